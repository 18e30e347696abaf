"""
This module manages the run-scoped integration context for one evolution.

The EvolveState class replaces a process-wide control record: it is constructed for one
run, handed by reference to the steppers, hooks and halts, and discarded afterwards.
It tracks the simulation clock, the integration direction, the first-step flag, the
timestep chosen for the current step, the next scheduled output time and the step
counters used to report an effective output interval. It assumes the driver is the
only writer of the clock and counters.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from .timestep_manager import next_output_time

if TYPE_CHECKING:
    from .sim_config import EvolveConfig




class EvolveState:

	def __init__(self, cfg: "EvolveConfig", time: float = 0.0) -> None:
		self.cfg = cfg
		self.time: float = float(time)
		self.direction: int = int(cfg.direction)
		self.first_step: bool = True
		self.current_dt: float = float(cfg.time_step)
		self.next_output: float = next_output_time(self.time, cfg.output_time)
		self.n_steps: int = 0
		self.steps_since_output: int = 0
		self.n_outputs: int = 0
		self.halted: bool = False

	@property
	def time_to_output(self) -> float:
		return self.next_output - self.time

	@property
	def effective_output_interval(self) -> float:
		if self.steps_since_output > 0:
			return float(self.cfg.output_time) / self.steps_since_output
		return float(self.cfg.output_time)

	def advance(self, dt: float) -> None:
		new_time = self.time + float(dt)
		if abs(new_time - self.next_output) <= 1e-12 * max(1.0, abs(self.next_output)):
			new_time = self.next_output
		self.time = new_time
		self.n_steps += 1
		self.steps_since_output += 1

	def mark_output(self) -> None:
		self.n_outputs += 1
		self.steps_since_output = 0
		next_output = next_output_time(self.time, self.cfg.output_time)
		while next_output <= self.time:
			next_output += float(self.cfg.output_time)
		self.next_output = next_output

	def __repr__(self) -> str:
		return (f"EvolveState(time={self.time}, dt={self.current_dt}, "
				f"next_output={self.next_output}, n_steps={self.n_steps})")


__all__ = ["EvolveState"]
