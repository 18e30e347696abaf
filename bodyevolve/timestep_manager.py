"""
This module implements adaptive timestep control for the evolution engine.

The TimestepSelector class evaluates the update matrix at the current state and turns
every variable slot into a local timescale according to its VarType: value-to-rate
ratios for ordinary derivatives, sine-of-angle ratios for polar quantities, a
minimum-orbit floor for ice sheets, position over velocity for direct integration,
the distance to the next output for explicit functions of time, and a rate inferred
from the base timestep for explicit values. Degenerate slots (zero rate, zero value,
zero angle, unchanged explicit value) do not constrain the step. The global minimum is
scaled by eta. On the first step the base timestep is returned unchanged because the
derivatives may not be numerically settled yet. assign_dt and next_output_time clamp
the result so an output boundary is never skipped.
"""

from __future__ import annotations
import math
from typing import Sequence, TYPE_CHECKING

from .reporting import rate_limited_print
from .var_type import VarType

if TYPE_CHECKING:
    from .body import Body
    from .evolve_state import EvolveState
    from .sim_config import EvolveConfig
    from .system import System
    from .update_matrix import UpdateMatrix, Variable




def next_output_time(time: float, output_interval: float) -> float:
	interval = float(output_interval)
	quotient = float(time) / interval
	nearest = round(quotient)
	# a clock sitting on a boundary may divide to just under the whole number
	if abs(quotient - nearest) <= 1e-9 * max(1.0, abs(quotient)):
		n_outputs = int(nearest)
	else:
		n_outputs = int(math.floor(quotient))
	return (n_outputs + 1.0) * interval


def assign_dt(dt: float, time_to_output: float) -> float:
	if time_to_output < dt:
		return float(time_to_output)
	return float(dt)


class TimestepSelector:

	def __init__(self, cfg: "EvolveConfig") -> None:
		self.cfg = cfg
		self._last_limiter = None

	@property
	def last_limiter(self):
		return self._last_limiter

	def select_timestep(
		self,
		bodies: Sequence["Body"],
		system: "System",
		matrix: "UpdateMatrix",
		state: "EvolveState",
		eta: float | None = None,
	) -> float:
		matrix.evaluate(bodies, system)
		if eta is None:
			eta = float(self.cfg.eta)

		if state.first_step:
			self._last_limiter = None
			return float(self.cfg.time_step)

		d_min = self.min_timescale(bodies, matrix, state)
		dt = float(eta) * d_min
		if self._last_limiter is not None:
			i_body, attr = self._last_limiter
			rate_limited_print(
				self.cfg,
				"dt_limiter",
				f"dt={dt:.6e} at t={state.time:.6e} limited by body {i_body} {attr!r}",
			)
		return dt

	def min_timescale(
		self,
		bodies: Sequence["Body"],
		matrix: "UpdateMatrix",
		state: "EvolveState",
	) -> float:
		d_min = math.inf
		limiter = None
		for var in matrix.iter_variables():
			if var.n_eqns == 0 or not var.var_type.constrains_timestep:
				continue
			bound = self.local_bound(var, bodies, state)
			if bound < d_min:
				d_min = bound
				limiter = (var.body_index, var.attribute)
		self._last_limiter = limiter
		return d_min

	def local_bound(self, var: "Variable", bodies: Sequence["Body"], state: "EvolveState") -> float:
		vt = var.var_type
		if vt is VarType.EXPLICIT_AGE or vt is VarType.SINUSOIDAL:
			return self._explicit_bound(var, bodies)
		if vt is VarType.EXPLICIT_TIME:
			return float(state.time_to_output)
		if vt is VarType.POLAR:
			return self._polar_bound(var, bodies)
		if vt is VarType.FLOOR:
			return self._floor_bound(var, bodies)
		if vt is VarType.NBODY:
			return self._nbody_bound(var, bodies)
		if vt is VarType.DERIVATIVE:
			return self._ratio_bound(var, bodies)
		if vt is VarType.DERIVED:
			return math.inf
		raise ValueError(f"no timestep rule for {vt!r}")

	def _explicit_bound(self, var: "Variable", bodies) -> float:
		if var.n_enabled == 0:
			return math.inf
		val_now = var.get_value(bodies)
		val_new = var.total()
		if val_now == val_new:
			return math.inf
		rate = (val_now - val_new) / float(self.cfg.time_step)
		if var.var_type is VarType.SINUSOIDAL:
			return abs(1.0 / rate)
		return abs(val_now / rate)

	def _ratio_bound(self, var: "Variable", bodies) -> float:
		val = var.get_value(bodies)
		if val == 0.0:
			return math.inf
		bound = math.inf
		for i_eqn, eq in enumerate(var.equations):
			deriv = float(var.deriv_proc[i_eqn])
			if not eq.enabled or deriv == 0.0:
				continue
			bound = min(bound, abs(val / deriv))
		return bound

	def _polar_bound(self, var: "Variable", bodies) -> float:
		ref = var.reference
		if ref is None:
			amp = math.sin(var.get_value(bodies))
			degenerate = var.get_value(bodies) == 0.0
		elif ref.attribute is None:
			amp = 1.0
			degenerate = False
		else:
			ref_val = float(getattr(bodies[var.body_index], ref.attribute))
			degenerate = ref_val == 0.0
			if ref.is_angle:
				amp = math.sin(ref_val)
			else:
				amp = ref_val
		if degenerate:
			return math.inf

		bound = math.inf
		for i_eqn, eq in enumerate(var.equations):
			deriv = float(var.deriv_proc[i_eqn])
			if not eq.enabled or deriv == 0.0:
				continue
			bound = min(bound, abs(amp / deriv))
		return bound

	def _floor_bound(self, var: "Variable", bodies) -> float:
		bound = self._ratio_bound(var, bodies)
		if not math.isfinite(bound):
			return bound
		body = bodies[var.body_index]
		n_orbits = var.min_ice_dt
		if n_orbits is None:
			n_orbits = self.cfg.min_ice_dt
		period = body.orbital_period
		if n_orbits > 0 and math.isfinite(period):
			floor = float(n_orbits) * period / float(self.cfg.eta)
			if bound < floor:
				bound = floor
		return bound

	def _nbody_bound(self, var: "Variable", bodies) -> float:
		if not self.cfg.direct_integration:
			return math.inf
		body = bodies[var.body_index]
		r2 = body.position_x ** 2 + body.position_y ** 2 + body.position_z ** 2
		v2 = body.velocity_x ** 2 + body.velocity_y ** 2 + body.velocity_z ** 2
		if v2 == 0.0:
			return math.inf
		return math.sqrt(r2 / v2)


__all__ = ["TimestepSelector", "assign_dt", "next_output_time"]
