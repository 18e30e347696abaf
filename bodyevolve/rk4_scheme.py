"""
This module implements the classical fourth-order Runge-Kutta scheme for a state vector
whose components have different integration semantics.

The RungeKutta4Scheme class chooses the step once from the scratch matrix evaluated at
the current state (that evaluation doubles as stage 0), then walks the scratch bodies
to the half step twice and to the full step once, recomputing auxiliary properties and
re-evaluating the scratch matrix each time. Rates are weighted 1-2-2-1 and applied to
the authoritative bodies in a single pass at the end. Explicit-value variables are not
rates: each stage writes their value straight into the scratch copy so dependent
equations see it, they are not re-evaluated at the full step, and the authoritative
value is set to the stage-0 result. The per-stage rate table is allocated once and
reused.
"""

from __future__ import annotations
import numpy as np
from .integration_scheme_base import IntegrationScheme
from .timestep_manager import assign_dt



class RungeKutta4Scheme(IntegrationScheme):
	name = "rk4"

	def __init__(self, integrator) -> None:
		super().__init__(integrator)
		self._k: np.ndarray | None = None

	def _ensure_k(self) -> np.ndarray:
		n_vars = len(self._pairs)
		if self._k is None or self._k.shape[1] != n_vars:
			self._k = np.zeros((4, n_vars), dtype=np.float64)
		return self._k

	def _collect(self, stage: int, direction: int) -> None:
		scratch = self._scratch
		for idx, (real, tv) in enumerate(self._pairs):
			if real.var_type.is_value:
				self._k[stage, idx] = self.explicit_value(tv, scratch)
			else:
				self._k[stage, idx] = direction * tv.total()

	def _move(self, stage: int, h: float) -> None:
		bodies = self.integ.bodies
		scratch = self._scratch
		for idx, (real, tv) in enumerate(self._pairs):
			if real.var_type.is_value:
				tv.set_value(scratch, self._k[stage, idx])
			else:
				tv.set_value(scratch, real.get_value(bodies) + h * self._k[stage, idx])

	def _midpoint_eval(self) -> None:
		integ = self.integ
		integ.properties_auxiliary(self._scratch, self._tmp_matrix)
		self._tmp_matrix.evaluate(self._scratch, integ.system)

	def step(self, dt: float, direction: int) -> float:
		integ = self.integ
		bodies = integ.bodies

		self.sync_scratch()
		k = self._ensure_k()
		tmp = self._tmp_matrix

		dt_sel = integ.selector.select_timestep(bodies, integ.system, tmp, integ.state)
		if integ.cfg.var_dt:
			dt = assign_dt(dt_sel, integ.state.time_to_output)
		else:
			dt = float(integ.cfg.time_step)

		self._collect(0, direction)
		self._move(0, 0.5 * dt)
		self._midpoint_eval()

		self._collect(1, direction)
		self._move(1, 0.5 * dt)
		self._midpoint_eval()

		self._collect(2, direction)
		self._move(2, dt)
		self._midpoint_eval()

		for idx, (real, tv) in enumerate(self._pairs):
			if real.var_type.is_value:
				k[3, idx] = k[0, idx]
			else:
				k[3, idx] = direction * tv.total()

		combined = (k[0] + 2.0 * k[1] + 2.0 * k[2] + k[3]) / 6.0
		for idx, (real, _) in enumerate(self._pairs):
			if real.var_type.is_value:
				real.set_value(bodies, k[0, idx])
			else:
				real.derivative = float(combined[idx])
				real.set_value(bodies, real.get_value(bodies) + combined[idx] * dt)
		return float(dt)
