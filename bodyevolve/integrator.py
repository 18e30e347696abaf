from __future__ import annotations
from typing import Callable, Optional, Sequence, TYPE_CHECKING

from .timestep_manager import TimestepSelector, assign_dt
from .integration_scheme_base import IntegrationScheme
from .euler_scheme import EulerScheme
from .rk4_scheme import RungeKutta4Scheme
from .evolve_constants import METHOD_EULER
from .physics_utils import props_aux_general

if TYPE_CHECKING:
    from .body import Body
    from .evolve_state import EvolveState
    from .sim_config import EvolveConfig
    from .system import System
    from .update_matrix import UpdateMatrix

"""
This central module implements the Integrator class that advances the body list by one step. It owns the TimestepSelector and the update scheme chosen from the configured method (forward Euler or fourth-order Runge-Kutta), and it carries the two hooks the schemes call back into: properties_auxiliary, which recomputes derived quantities such as mean motion on whatever body list it is given (the authoritative one or a Runge-Kutta scratch copy), and body_copy, which lets modules copy their own fields into scratch bodies. step returns the timestep actually taken and records it on the EvolveState. The class assumes the matrix has been verified.

"""

PropsAuxHook = Callable[[Sequence["Body"], "UpdateMatrix"], None]
BodyCopyHook = Callable[[Sequence["Body"], Sequence["Body"]], None]


def _default_props_aux(bodies, matrix) -> None:
	props_aux_general(bodies)


def _default_body_copy(dest, src) -> None:
	return None


class Integrator:

	def __init__(
		self,
		bodies: Sequence["Body"],
		system: "System",
		matrix: "UpdateMatrix",
		state: "EvolveState",
		cfg: "EvolveConfig",
		*,
		props_aux: Optional[PropsAuxHook] = None,
		body_copy: Optional[BodyCopyHook] = None,
	) -> None:
		self.bodies = bodies
		self.system = system
		self.matrix = matrix
		self.state = state
		self.cfg = cfg
		self._props_aux = props_aux or _default_props_aux
		self._body_copy = body_copy or _default_body_copy

		self.selector = TimestepSelector(cfg)
		self._scheme: IntegrationScheme = self._make_scheme(cfg.integration_method)

	def _make_scheme(self, mode: str) -> IntegrationScheme:
		if mode == METHOD_EULER:
			return EulerScheme(self)
		return RungeKutta4Scheme(self)

	@property
	def scheme(self) -> IntegrationScheme:
		return self._scheme

	def properties_auxiliary(self, bodies: Optional[Sequence["Body"]] = None, matrix: Optional["UpdateMatrix"] = None) -> None:
		if bodies is None:
			bodies = self.bodies
		if matrix is None:
			matrix = self.matrix
		self._props_aux(bodies, matrix)

	def body_copy(self, dest: Sequence["Body"], src: Sequence["Body"]) -> None:
		self._body_copy(dest, src)

	def initial_dt(self) -> float:
		dt = self.selector.select_timestep(self.bodies, self.system, self.matrix, self.state)
		if self.cfg.var_dt:
			dt = assign_dt(dt, self.state.time_to_output)
		else:
			dt = float(self.cfg.time_step)
		self.state.current_dt = dt
		return dt

	def step(self, dt: Optional[float] = None) -> float:
		if dt is None:
			dt = self.state.current_dt
		dt = self._scheme.step(float(dt), self.state.direction)
		self.state.current_dt = dt
		return dt


__all__ = ["Integrator"]
