"""
This module implements the evolution driver, the top-level loop that carries a verified
update matrix from the start time to the stop time.

The EvolutionDriver verifies the matrix, computes auxiliary properties and the
initial derivatives, writes the initial output record and then repeats: take one step
through the Integrator, apply every module's force behavior, re-evaluate the matrix so
output stays self-consistent, check the halts, advance the ages by direction times the
step and the clock by the step, write an output record when the clock reaches the next
output boundary, and refresh auxiliary properties for the next step. A halt writes one
final record and stops the loop before any further clock or age advance. The driver
has two states, RUNNING and HALTED; a run that reaches the stop time stays RUNNING and
returns normally. EvolveResult summarizes the run.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, TYPE_CHECKING

from .halt import HaltChecker
from .reporting import VERB_ERR, VERB_PROG, diag_print

if TYPE_CHECKING:
    from .integrator import Integrator


OutputSink = Callable[..., None]
ForceBehaviorHook = Callable[..., None]


class EvolveStatus(Enum):
	RUNNING = "running"
	HALTED = "halted"


@dataclass
class EvolveResult:
    n_steps: int
    time: float
    halted: bool
    halt_reason: Optional[str]
    n_outputs: int


class EvolutionDriver:

	def __init__(
		self,
		integrator: "Integrator",
		halts: Optional[HaltChecker] = None,
		output: Optional[OutputSink] = None,
		*,
		force_behavior: Optional[ForceBehaviorHook] = None,
	) -> None:
		self.integ = integrator
		self.halts = halts if halts is not None else HaltChecker(integrator.cfg)
		self.output = output
		self._force_behavior = force_behavior
		self.status = EvolveStatus.RUNNING
		self.halt_reason: Optional[str] = None

	@property
	def cfg(self):
		return self.integ.cfg

	@property
	def state(self):
		return self.integ.state

	def write_output(self, time: float, dt: float, *, scheduled: bool = False) -> None:
		integ = self.integ
		if self.output is not None:
			self.output(integ.bodies, integ.state, integ.matrix, time, dt)
		if scheduled:
			integ.state.mark_output()
		else:
			integ.state.n_outputs += 1

	def force_behavior(self) -> None:
		if self._force_behavior is None:
			return
		integ = self.integ
		self._force_behavior(integ.bodies, integ.state, integ.system, integ.matrix)

	def _halt(self, reason: Optional[str]) -> None:
		self.status = EvolveStatus.HALTED
		self.halt_reason = reason
		self.state.halted = True

	def result(self) -> EvolveResult:
		state = self.state
		return EvolveResult(
			n_steps=state.n_steps,
			time=state.time,
			halted=self.status is EvolveStatus.HALTED,
			halt_reason=self.halt_reason,
			n_outputs=state.n_outputs,
		)

	def run(self) -> EvolveResult:
		integ = self.integ
		bodies = integ.bodies
		matrix = integ.matrix
		state = integ.state
		cfg = integ.cfg

		matrix.verify(bodies)

		if state.direction == 0:
			diag_print(cfg, VERB_PROG, "warning", "neither forward nor backward evolution requested")
			return self.result()

		integ.properties_auxiliary()
		dt = integ.initial_dt()

		self.halts.check_initial(bodies, state, matrix)
		self.write_output(state.time, dt)

		while state.time < cfg.stop_time:
			dt = integ.step()

			if not (dt > 0.0 and math.isfinite(dt)):
				diag_print(cfg, VERB_ERR, "error", f"non-positive timestep {dt!r} at time {state.time:.6e}")
				self._halt("invalid_timestep")
				self.write_output(state.time, state.effective_output_interval)
				break

			self.force_behavior()
			matrix.evaluate(bodies, integ.system)

			if self.halts.any_halted(bodies, state, matrix):
				self._halt(self.halts.reason)
				self.write_output(state.time, state.effective_output_interval)
				break

			for body in bodies:
				body.age += state.direction * dt
			state.advance(dt)

			if state.time >= state.next_output:
				self.write_output(state.time, state.effective_output_interval, scheduled=True)

			integ.properties_auxiliary()
			state.first_step = False

		diag_print(cfg, VERB_PROG, "", "Evolution completed.")
		return self.result()


__all__ = ["EvolutionDriver", "EvolveResult", "EvolveStatus"]
