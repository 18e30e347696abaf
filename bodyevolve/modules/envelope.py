"""
This module implements EnvelopeLossModule, a constant-rate atmospheric escape model.

The module removes mass from a planet's gaseous envelope at a fixed rate and removes
the same mass from the planet, so the planet's mass variable receives an equation from
this module alongside any other module acting on it. Once the envelope falls to the
configured minimum, force_behavior snaps it to zero, disables both equations of this
module for that body and reports the event once. body_copy carries the module-owned
threshold and flag into scratch bodies, and the module optionally offers an "envelope
gone" halt. Rates are in mass per unit time.
"""

from __future__ import annotations
from typing import List

from ..halt import Halt
from ..reporting import VERB_PROG, diag_print
from ..var_type import VarType
from .base import PhysicsModule




def _envelope_gone(bodies, state, halt, io, matrix, body_index) -> bool:
	body = bodies[body_index]
	return body.envelope_mass <= body.min_envelope_mass


class EnvelopeLossModule(PhysicsModule):
	name = "envelope_loss"

	def __init__(self, rate: float, min_envelope_mass: float = 0.0, *, halt_on_gone: bool = False) -> None:
		self.rate = float(rate)
		self.min_envelope_mass = float(min_envelope_mass)
		self.halt_on_gone = bool(halt_on_gone)

	def _d_envelope_dt(self, bodies, system, body_ids) -> float:
		if bodies[body_ids[0]].envelope_mass > 0.0:
			return -self.rate
		return 0.0

	def initialize_update(self, matrix, bodies, body_index: int) -> None:
		body = bodies[body_index]
		if not hasattr(body, "envelope_mass"):
			body.envelope_mass = 0.0
		body.min_envelope_mass = self.min_envelope_mass
		body.envelope_lost = False

		matrix.add_variable(body_index, "envelope_mass", VarType.DERIVATIVE)
		matrix.add_equation(body_index, "envelope_mass", self._d_envelope_dt, self.name)
		matrix.add_variable(body_index, "mass", VarType.DERIVATIVE)
		matrix.add_equation(body_index, "mass", self._d_envelope_dt, self.name)

	def force_behavior(self, bodies, state, system, matrix, body_index: int, module_index: int) -> None:
		body = bodies[body_index]
		if 0.0 < body.envelope_mass <= body.min_envelope_mass:
			body.envelope_mass = 0.0
		if body.envelope_mass <= 0.0 and not body.envelope_lost:
			matrix.disable(body_index, "envelope_mass", self.name)
			matrix.disable(body_index, "mass", self.name)
			body.envelope_lost = True
			diag_print(state.cfg if state is not None else None, VERB_PROG, "", f"{body.name}'s envelope removed.")

	def body_copy(self, dest, src, n_bodies: int, body_index: int) -> None:
		if hasattr(src[body_index], "min_envelope_mass"):
			dest[body_index].min_envelope_mass = src[body_index].min_envelope_mass
			dest[body_index].envelope_lost = src[body_index].envelope_lost

	def halts(self, body_index: int) -> List[Halt]:
		if not self.halt_on_gone:
			return []
		return [Halt(body_index, _envelope_gone, "envelope_gone", message="envelope mass reached its minimum")]
