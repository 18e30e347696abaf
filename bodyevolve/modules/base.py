"""
This module defines the interface between physics modules and the evolution engine.

A PhysicsModule registers its variables and equations for one body in
initialize_update and may override four hooks: force_behavior for rules that are not
expressible as derivatives (snapping a quantity to zero, disabling an equation),
props_aux for derived quantities that equations need before they can be evaluated,
body_copy for module-owned fields that Runge-Kutta scratch bodies must carry, and halts
for the stop conditions the module offers. Every hook defaults to doing nothing, so a
module only implements what it needs. A MultiModule carries the same two runtime hooks
for couplings that span modules and runs after the single-module hooks of its body.
"""

from __future__ import annotations
from typing import List, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from ..body import Body
    from ..evolve_state import EvolveState
    from ..halt import Halt
    from ..system import System
    from ..update_matrix import UpdateMatrix




class PhysicsModule:
	name = "module"

	def initialize_update(self, matrix: "UpdateMatrix", bodies: Sequence["Body"], body_index: int) -> None:
		return None

	def force_behavior(
		self,
		bodies: Sequence["Body"],
		state: "EvolveState",
		system: "System",
		matrix: "UpdateMatrix",
		body_index: int,
		module_index: int,
	) -> None:
		return None

	def props_aux(self, bodies: Sequence["Body"], state: "EvolveState", io, matrix: "UpdateMatrix", body_index: int) -> None:
		return None

	def body_copy(self, dest: Sequence["Body"], src: Sequence["Body"], n_bodies: int, body_index: int) -> None:
		return None

	def halts(self, body_index: int) -> List["Halt"]:
		return []

	def __repr__(self) -> str:
		return f"{type(self).__name__}(name={self.name!r})"


class MultiModule:
	name = "multi"

	def force_behavior(self, bodies, state, system, matrix, body_index: int, module_index: int) -> None:
		return None

	def props_aux(self, bodies, state, io, matrix, body_index: int) -> None:
		return None


__all__ = ["PhysicsModule", "MultiModule"]
