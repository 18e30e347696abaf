"""
This module provides the simplest rate modules, used to drive the engine in tests and
examples.

ConstantRateModule contributes a fixed derivative to one attribute of its body under
any derivative-style VarType (ordinary, polar, floor-protected, derived, position or
velocity), optionally coupled to other bodies through the equation's body list.
ExponentialDecayModule contributes -y/tau. Both follow the full module interface but
leave every hook at its default.
"""

from __future__ import annotations
from typing import Optional, Sequence

from ..update_matrix import PolarReference
from ..var_type import VarType
from .base import PhysicsModule




class ConstantRateModule(PhysicsModule):
	name = "constant_rate"

	def __init__(
		self,
		attribute: str,
		rate: float,
		*,
		var_type=VarType.DERIVATIVE,
		reference: Optional[PolarReference] = None,
		min_ice_dt: Optional[float] = None,
		coupled: Sequence[int] = (),
		name: Optional[str] = None,
	) -> None:
		self.attribute = str(attribute)
		self.rate = float(rate)
		self.var_type = VarType.from_code(var_type)
		self.reference = reference
		self.min_ice_dt = min_ice_dt
		self.coupled = tuple(int(j) for j in coupled)
		if name:
			self.name = name

	def _rate(self, bodies, system, body_ids) -> float:
		return self.rate

	def initialize_update(self, matrix, bodies, body_index: int) -> None:
		matrix.add_variable(
			body_index,
			self.attribute,
			self.var_type,
			reference=self.reference,
			min_ice_dt=self.min_ice_dt,
		)
		matrix.add_equation(body_index, self.attribute, self._rate, self.name, (body_index,) + self.coupled)


class ExponentialDecayModule(PhysicsModule):
	name = "exponential_decay"

	def __init__(self, attribute: str, tau: float, *, name: Optional[str] = None) -> None:
		self.attribute = str(attribute)
		self.tau = float(tau)
		if name:
			self.name = name

	def _decay(self, bodies, system, body_ids) -> float:
		return -float(getattr(bodies[body_ids[0]], self.attribute)) / self.tau

	def initialize_update(self, matrix, bodies, body_index: int) -> None:
		matrix.add_variable(body_index, self.attribute, VarType.DERIVATIVE)
		matrix.add_equation(body_index, self.attribute, self._decay, self.name)
