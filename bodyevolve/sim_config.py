from __future__ import annotations
from dataclasses import dataclass, fields

from .evolve_constants import ALLOWED_METHODS, EVOLVE_DEFAULT_VERBOSE, METHOD_RK4

"""
This central configuration module defines all evolution parameters through the EvolveConfig dataclass. Key parameters include the base timestep and the eta safety factor for adaptive timestepping, the stop time and output cadence, the integration method and direction, the ice-sheet minimum timestep in orbital periods, the direct-integration switch for position/velocity variables, and verbosity with diagnostic rate limits. The class provides a copy method for configuration inheritance, from_dict for loaded mappings, and validate which lists every inconsistent setting. It serves as the single source of truth for run behavior, with the driver, steppers and timestep selector all reading from it. The module assumes SI units.

"""


@dataclass
class EvolveConfig:
    time_step: float = 1.0
    eta: float = 0.01
    stop_time: float = 1.0
    output_time: float = 1.0
    var_dt: bool = True
    integration_method: str = METHOD_RK4
    do_forward: bool = True
    do_backward: bool = False
    min_ice_dt: float = 5
    direct_integration: bool = False
    verbose: int = EVOLVE_DEFAULT_VERBOSE
    diag_print_limit: int = 3
    diag_print_interval: int = 1000

    @property
    def direction(self) -> int:
        if self.do_forward:
            return 1
        if self.do_backward:
            return -1
        return 0

    def copy(self) -> "EvolveConfig":
        new = object.__new__(EvolveConfig)
        new.__dict__ = dict(getattr(self, "__dict__", {}))
        return new

    @classmethod
    def field_names(cls) -> set:
        return {f.name for f in fields(cls)}

    @classmethod
    def from_dict(cls, data: dict) -> "EvolveConfig":
        known = cls.field_names()
        kwargs = {}
        for key, val in dict(data or {}).items():
            if key in known:
                kwargs[key] = val
            else:
                print(f"[warning] unknown evolve option {key!r} ignored")
        return cls(**kwargs)

    def validate(self) -> list:
        problems = []
        if self.integration_method not in ALLOWED_METHODS:
            problems.append(
                f"integration_method must be one of {sorted(ALLOWED_METHODS)}, "
                f"got {self.integration_method!r}"
            )
        if not self.time_step > 0.0:
            problems.append(f"time_step must be positive, got {self.time_step}")
        if not self.eta > 0.0:
            problems.append(f"eta must be positive, got {self.eta}")
        if not self.output_time > 0.0:
            problems.append(f"output_time must be positive, got {self.output_time}")
        if self.stop_time < 0.0:
            problems.append(f"stop_time must not be negative, got {self.stop_time}")
        if self.min_ice_dt < 0:
            problems.append(f"min_ice_dt must not be negative, got {self.min_ice_dt}")
        return problems


__all__ = ["EvolveConfig"]
