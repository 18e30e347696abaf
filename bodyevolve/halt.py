"""
This module implements the halt protocol that can end an evolution before its stop time.

A Halt pairs a predicate with the body it watches, a name and optional parameters the
predicate may read. Predicates are called as (bodies, state, halt, io, matrix,
body_index), where io is the run configuration. HaltChecker evaluates registered halts
in registration order after every step and stops at the first one that fires,
remembering which halt it was and reporting it at progress verbosity. check_initial
runs the same predicates against the initial conditions only to warn, since a
condition that already holds at the start will end the run after the first step. The
module also provides factory helpers for the generic threshold halts most modules
need.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, TYPE_CHECKING

from .reporting import VERB_PROG, diag_print

if TYPE_CHECKING:
    from .body import Body
    from .evolve_state import EvolveState
    from .sim_config import EvolveConfig
    from .update_matrix import UpdateMatrix


HaltPredicate = Callable[[Sequence["Body"], "EvolveState", "Halt", "EvolveConfig", "UpdateMatrix", int], bool]


@dataclass
class Halt:
    body_index: int
    predicate: HaltPredicate
    name: str = "halt"
    params: dict = field(default_factory=dict)
    message: Optional[str] = None

    def check(self, bodies, state, matrix) -> bool:
        io = state.cfg if state is not None else None
        return bool(self.predicate(bodies, state, self, io, matrix, self.body_index))

    def describe(self, bodies) -> str:
        label = bodies[self.body_index].name or f"body {self.body_index}"
        if self.message:
            return f"{label}: {self.message}"
        return f"{label}: {self.name}"


class HaltChecker:
	def __init__(self, cfg=None, halts: Sequence[Halt] = ()) -> None:
		self.cfg = cfg
		self.halts: List[Halt] = list(halts)
		self.fired: Optional[Halt] = None

	def __len__(self) -> int:
		return len(self.halts)

	def add(self, halt: Halt) -> Halt:
		self.halts.append(halt)
		return halt

	@property
	def reason(self) -> Optional[str]:
		if self.fired is None:
			return None
		return self.fired.name

	def any_halted(self, bodies, state, matrix) -> bool:
		for halt in self.halts:
			if halt.check(bodies, state, matrix):
				self.fired = halt
				diag_print(self.cfg, VERB_PROG, "", f"HALT: {halt.describe(bodies)} at time {state.time:.6e}.")
				return True
		return False

	def check_initial(self, bodies, state, matrix) -> List[Halt]:
		already = []
		for halt in self.halts:
			if halt.check(bodies, state, matrix):
				already.append(halt)
				diag_print(
					self.cfg,
					VERB_PROG,
					"warning",
					f"initial conditions already satisfy halt {halt.describe(bodies)}",
				)
		return already


def _min_value(bodies, state, halt, io, matrix, body_index) -> bool:
	return getattr(bodies[body_index], halt.params["attribute"]) <= halt.params["limit"]


def _max_value(bodies, state, halt, io, matrix, body_index) -> bool:
	return getattr(bodies[body_index], halt.params["attribute"]) >= halt.params["limit"]


def _positive_derivative(bodies, state, halt, io, matrix, body_index) -> bool:
	var = matrix.variable(body_index, halt.params["attribute"])
	if var is None or var.var_type.is_value:
		return False
	return state.direction * var.total() > 0.0


def halt_min_value(body_index: int, attribute: str, limit: float, name: Optional[str] = None) -> Halt:
	return Halt(
		body_index,
		_min_value,
		name or f"min_{attribute}",
		{"attribute": attribute, "limit": float(limit)},
		f"{attribute} fell to {limit:g} or below",
	)


def halt_max_value(body_index: int, attribute: str, limit: float, name: Optional[str] = None) -> Halt:
	return Halt(
		body_index,
		_max_value,
		name or f"max_{attribute}",
		{"attribute": attribute, "limit": float(limit)},
		f"{attribute} reached {limit:g} or above",
	)


def halt_positive_derivative(body_index: int, attribute: str, name: Optional[str] = None) -> Halt:
	return Halt(
		body_index,
		_positive_derivative,
		name or f"positive_d{attribute}_dt",
		{"attribute": attribute},
		f"d{attribute}/dt became positive",
	)


__all__ = [
	"Halt",
	"HaltChecker",
	"halt_min_value",
	"halt_max_value",
	"halt_positive_derivative",
]
