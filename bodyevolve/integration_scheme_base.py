"""
This base class defines the interface for the fixed-form update schemes of the evolution
engine.

The IntegrationScheme class provides the pieces both steppers share: choosing the step
through the integrator's TimestepSelector and clamping it to the next output boundary,
and the scratch arena used by multi-stage schemes. The arena is one deep copy of the
body list and one structural clone of the update matrix, allocated on first use and
re-synchronized from the authoritative state at the start of every step, so no stage
value can leak from one step into the next. Module-owned body fields are copied through
the integrator's body_copy hook. The class assumes the body list and matrix structure
stay fixed for the life of the run.
"""

from __future__ import annotations
import copy
from typing import List, Optional, Tuple, TYPE_CHECKING

from .timestep_manager import assign_dt

if TYPE_CHECKING:
    from .body import Body
    from .integrator import Integrator
    from .update_matrix import UpdateMatrix, Variable



class IntegrationScheme:
	name = "base"

	def __init__(self, integrator: "Integrator") -> None:
		self.integ = integrator
		self._scratch: Optional[List["Body"]] = None
		self._tmp_matrix: Optional["UpdateMatrix"] = None
		self._pairs: Optional[List[Tuple["Variable", "Variable"]]] = None

	def step(self, dt: float, direction: int) -> float:
		raise NotImplementedError

	def choose_dt(self, dt: float, matrix: "UpdateMatrix") -> float:
		integ = self.integ
		if integ.cfg.var_dt:
			dt = integ.selector.select_timestep(integ.bodies, integ.system, matrix, integ.state)
			return assign_dt(dt, integ.state.time_to_output)
		matrix.evaluate(integ.bodies, integ.system)
		return float(dt)

	def ensure_scratch(self) -> Tuple[List["Body"], "UpdateMatrix"]:
		if self._scratch is None:
			integ = self.integ
			self._scratch = copy.deepcopy(list(integ.bodies))
			self._tmp_matrix = integ.matrix.clone()
			self._pairs = list(zip(integ.matrix.iter_variables(), self._tmp_matrix.iter_variables()))
		return self._scratch, self._tmp_matrix

	@property
	def scratch_bodies(self) -> Optional[List["Body"]]:
		return self._scratch

	@property
	def tmp_matrix(self) -> Optional["UpdateMatrix"]:
		return self._tmp_matrix

	def sync_scratch(self) -> None:
		scratch, tmp = self.ensure_scratch()
		integ = self.integ
		for src, dest in zip(integ.bodies, scratch):
			src.copy_into(dest)
		for real, tv in self._pairs:
			tv.set_value(scratch, real.get_value(integ.bodies))
		integ.body_copy(scratch, integ.bodies)
		tmp.sync_from(integ.matrix)

	@staticmethod
	def explicit_value(var: "Variable", bodies) -> float:
		if var.n_enabled == 0:
			return var.get_value(bodies)
		return var.total()
