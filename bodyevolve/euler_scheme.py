"""
This module implements the forward Euler update scheme.

The EulerScheme class extends IntegrationScheme with the single-pass first-order rule:
explicit-value variables are overwritten with the summed equation result, every other
variable is advanced by direction times the summed derivative times the step. The
derivatives are taken from a fresh evaluation of the authoritative matrix at the state
being advanced, and the step is re-selected first when adaptive stepping is on. It
assumes the step is small compared with every timescale in the matrix.
"""

from __future__ import annotations
from .integration_scheme_base import IntegrationScheme



class EulerScheme(IntegrationScheme):
	name = "euler"

	def step(self, dt: float, direction: int) -> float:
		integ = self.integ
		bodies = integ.bodies
		matrix = integ.matrix

		dt = self.choose_dt(dt, matrix)

		for var in matrix.iter_variables():
			if var.n_eqns == 0:
				continue
			if var.var_type.is_value:
				if var.n_enabled > 0:
					var.set_value(bodies, var.total())
				continue
			deriv = direction * var.total()
			var.derivative = deriv
			var.set_value(bodies, var.get_value(bodies) + deriv * dt)
		return dt
