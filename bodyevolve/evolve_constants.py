from __future__ import annotations

import os
from typing import Final

"""
This module defines the physical and numerical constants shared by the evolution engine. It includes BIGG for Kepler mean-motion updates, the allowed integration method names, and EVOLVE_DEFAULT_VERBOSE with an environment variable override. The module provides a single place for these values so the selector, steppers and driver agree on them. It assumes SI units throughout.


"""




def _parse_verbose(default: int = 2) -> int:
	env_val = os.getenv("BODYEVOLVE_VERBOSE", "")
	if env_val.strip() != "":
		if env_val.strip().lstrip("-").isdigit():
			return int(env_val.strip())
	return default





BIGG: Final[float] = 6.67428e-11

METHOD_EULER: Final[str] = "euler"
METHOD_RK4: Final[str] = "rk4"
ALLOWED_METHODS = {
	METHOD_EULER,
	METHOD_RK4,
}

EVOLVE_DEFAULT_VERBOSE: int = _parse_verbose()
