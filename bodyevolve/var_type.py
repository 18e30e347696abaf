"""
This module defines VarType, the closed enumeration of integration semantics a
variable slot can carry.

Each member keeps its integer type code as its value so registrations and output
can still be expressed as numbers, while the engine dispatches on members instead of
bare integers. The helper properties answer the two questions the steppers and the
timestep selector ask of every slot: is the cached equation result an absolute value
rather than a rate, and may this slot constrain the timestep at all. from_code rejects
unknown codes so a new tag can never silently fall through to ordinary derivative
treatment.
"""

from __future__ import annotations
from enum import Enum


class VarType(Enum):
	EXPLICIT_AGE = 0
	DERIVATIVE = 1
	POLAR = 2
	SINUSOIDAL = 3
	DERIVED = 5
	NBODY = 7
	FLOOR = 9
	EXPLICIT_TIME = 10

	@property
	def is_value(self) -> bool:
		return self in _VALUE_TYPES

	@property
	def single_equation(self) -> bool:
		return self in _VALUE_TYPES

	@property
	def constrains_timestep(self) -> bool:
		return self is not VarType.DERIVED

	@classmethod
	def from_code(cls, code) -> "VarType":
		if isinstance(code, VarType):
			return code
		try:
			return cls(int(code))
		except ValueError:
			raise ValueError(f"unknown variable type code {code!r}") from None


_VALUE_TYPES = frozenset({
	VarType.EXPLICIT_AGE,
	VarType.SINUSOIDAL,
	VarType.EXPLICIT_TIME,
})


__all__ = ["VarType"]
