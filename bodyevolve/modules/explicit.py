"""
This module provides ExplicitTrackModule, which sets one attribute of its body as an
explicit function of the body's age rather than through a derivative, the way
luminosity or radius tracks are handled. The registered VarType is EXPLICIT_AGE by
default; SINUSOIDAL and EXPLICIT_TIME tracks are accepted too. Being single-valued,
such an attribute admits exactly one contributing equation.
"""

from __future__ import annotations
from typing import Callable, Optional

from ..var_type import VarType
from .base import PhysicsModule




class ExplicitTrackModule(PhysicsModule):
	name = "explicit_track"

	def __init__(
		self,
		attribute: str,
		track: Callable[[float], float],
		*,
		var_type=VarType.EXPLICIT_AGE,
		name: Optional[str] = None,
	) -> None:
		vt = VarType.from_code(var_type)
		if not vt.is_value:
			raise ValueError(f"explicit tracks need a value VarType, got {vt.name}")
		self.attribute = str(attribute)
		self.track = track
		self.var_type = vt
		if name:
			self.name = name

	def _value(self, bodies, system, body_ids) -> float:
		return float(self.track(bodies[body_ids[0]].age))

	def initialize_update(self, matrix, bodies, body_index: int) -> None:
		matrix.add_variable(body_index, self.attribute, self.var_type)
		matrix.add_equation(body_index, self.attribute, self._value, self.name)
