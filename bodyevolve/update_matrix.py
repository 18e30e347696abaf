"""
This module implements the update matrix, the per-body registry that lets any number of
physics modules contribute to the same state variable.

Each body owns a BodyUpdate holding its Variable slots in registration order. A
Variable binds one scalar attribute of one body to a VarType and to the Equation slots
that feed it; an Equation pairs a Rule (or None once the equation has been disabled)
with the owning module's name and the body indices it depends on. UpdateMatrix.evaluate
walks bodies, variables and equations in that fixed order and writes every result into
the per-variable cache, never touching body state itself. clone builds a structurally
identical matrix with independent caches that shares the Equation objects, so disabling
an equation through the authoritative matrix also disables it in the scratch copy used
by the Runge-Kutta stepper.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple, TYPE_CHECKING
import numpy as np

from .var_type import VarType

if TYPE_CHECKING:
    from .body import Body
    from .system import System


class UpdateMatrixError(ValueError):
	pass


class Rule:
	def evaluate(self, bodies: Sequence["Body"], system: "System", body_ids: Tuple[int, ...]) -> float:
		raise NotImplementedError


class FunctionRule(Rule):
	__slots__ = ("fn",)

	def __init__(self, fn: Callable) -> None:
		self.fn = fn

	def evaluate(self, bodies, system, body_ids) -> float:
		return float(self.fn(bodies, system, body_ids))

	def __repr__(self) -> str:
		return f"FunctionRule({getattr(self.fn, '__name__', self.fn)!r})"


def as_rule(obj) -> Optional[Rule]:
	if obj is None or isinstance(obj, Rule):
		return obj
	if callable(obj):
		return FunctionRule(obj)
	raise TypeError(f"cannot use {type(obj).__name__} as an update rule")


class Equation:
	__slots__ = ("rule", "module", "bodies")

	def __init__(self, rule, module: str, bodies: Sequence[int]) -> None:
		self.rule: Optional[Rule] = as_rule(rule)
		self.module = str(module)
		self.bodies: Tuple[int, ...] = tuple(int(b) for b in bodies)

	@property
	def enabled(self) -> bool:
		return self.rule is not None

	def disable(self) -> None:
		self.rule = None

	def evaluate(self, bodies, system) -> float:
		if self.rule is None:
			return 0.0
		return self.rule.evaluate(bodies, system, self.bodies)

	def __repr__(self) -> str:
		return f"Equation(module={self.module!r}, bodies={self.bodies}, enabled={self.enabled})"


@dataclass(frozen=True)
class PolarReference:
    attribute: Optional[str]
    is_angle: bool = True


class Variable:
	def __init__(
		self,
		body_index: int,
		attribute: str,
		var_type: VarType = VarType.DERIVATIVE,
		*,
		reference: Optional[PolarReference] = None,
		min_ice_dt: Optional[float] = None,
	) -> None:
		self.body_index = int(body_index)
		self.attribute = str(attribute)
		self.var_type = VarType.from_code(var_type)
		self.reference = reference
		self.min_ice_dt = min_ice_dt
		self.equations: List[Equation] = []
		self.deriv_proc: np.ndarray = np.zeros(0, dtype=np.float64)
		self.derivative: float = 0.0

	@property
	def n_eqns(self) -> int:
		return len(self.equations)

	@property
	def n_enabled(self) -> int:
		return sum(1 for eq in self.equations if eq.enabled)

	def add_equation(self, eq: Equation) -> int:
		self.equations.append(eq)
		self.deriv_proc = np.zeros(len(self.equations), dtype=np.float64)
		return len(self.equations) - 1

	def get_value(self, bodies: Sequence["Body"]) -> float:
		return float(getattr(bodies[self.body_index], self.attribute))

	def set_value(self, bodies: Sequence["Body"], value: float) -> None:
		setattr(bodies[self.body_index], self.attribute, float(value))

	def evaluate(self, bodies, system) -> None:
		for i_eqn, eq in enumerate(self.equations):
			self.deriv_proc[i_eqn] = eq.evaluate(bodies, system)

	def total(self) -> float:
		s = 0.0
		for val in self.deriv_proc:
			s += float(val)
		return s

	def clone(self) -> "Variable":
		new = Variable(
			self.body_index,
			self.attribute,
			self.var_type,
			reference=self.reference,
			min_ice_dt=self.min_ice_dt,
		)
		new.equations = list(self.equations)
		new.deriv_proc = self.deriv_proc.copy()
		new.derivative = self.derivative
		return new

	def __repr__(self) -> str:
		return (f"Variable(body={self.body_index}, attribute={self.attribute!r}, "
				f"type={self.var_type.name}, n_eqns={self.n_eqns})")


class BodyUpdate:
	def __init__(self, body_index: int) -> None:
		self.body_index = int(body_index)
		self.variables: List[Variable] = []
		self._index: dict = {}

	@property
	def n_vars(self) -> int:
		return len(self.variables)

	def __len__(self) -> int:
		return len(self.variables)

	def __iter__(self) -> Iterator[Variable]:
		return iter(self.variables)

	def variable(self, attribute: str) -> Optional[Variable]:
		i_var = self._index.get(attribute)
		if i_var is None:
			return None
		return self.variables[i_var]

	def add_variable(self, var: Variable) -> Variable:
		existing = self.variable(var.attribute)
		if existing is not None:
			if existing.var_type is not var.var_type:
				raise UpdateMatrixError(
					f"body {self.body_index}: variable {var.attribute!r} already registered "
					f"as {existing.var_type.name}, not {var.var_type.name}"
				)
			return existing
		self._index[var.attribute] = len(self.variables)
		self.variables.append(var)
		return var


class UpdateMatrix:
	def __init__(self, n_bodies: int) -> None:
		self.bodies: List[BodyUpdate] = [BodyUpdate(i) for i in range(int(n_bodies))]

	@property
	def n_bodies(self) -> int:
		return len(self.bodies)

	def __getitem__(self, body_index: int) -> BodyUpdate:
		return self.bodies[body_index]

	def add_variable(
		self,
		body_index: int,
		attribute: str,
		var_type=VarType.DERIVATIVE,
		*,
		reference: Optional[PolarReference] = None,
		min_ice_dt: Optional[float] = None,
	) -> Variable:
		var = Variable(body_index, attribute, var_type, reference=reference, min_ice_dt=min_ice_dt)
		return self.bodies[body_index].add_variable(var)

	def add_equation(
		self,
		body_index: int,
		attribute: str,
		rule,
		module: str,
		bodies: Optional[Sequence[int]] = None,
	) -> Equation:
		var = self.bodies[body_index].variable(attribute)
		if var is None:
			var = self.add_variable(body_index, attribute)
		if bodies is None:
			bodies = (body_index,)
		eq = Equation(rule, module, bodies)
		var.add_equation(eq)
		return eq

	def variable(self, body_index: int, attribute: str) -> Optional[Variable]:
		return self.bodies[body_index].variable(attribute)

	def iter_variables(self) -> Iterator[Variable]:
		for body_update in self.bodies:
			for var in body_update.variables:
				yield var

	@property
	def n_equations(self) -> int:
		return sum(var.n_eqns for var in self.iter_variables())

	def evaluate(self, bodies: Sequence["Body"], system: "System") -> None:
		for body_update in self.bodies:
			for var in body_update.variables:
				var.evaluate(bodies, system)

	def result(self, body_index: int, i_var: int, i_eqn: int) -> float:
		return float(self.bodies[body_index].variables[i_var].deriv_proc[i_eqn])

	def disable(self, body_index: int, attribute: str, module: Optional[str] = None) -> int:
		var = self.variable(body_index, attribute)
		if var is None:
			return 0
		n = 0
		for eq in var.equations:
			if eq.enabled and (module is None or eq.module == module):
				eq.disable()
				n += 1
		return n

	def verify(self, bodies: Optional[Sequence["Body"]] = None) -> None:
		from .matrix_validator import MatrixValidator

		MatrixValidator.verify(self, bodies)

	def clone(self) -> "UpdateMatrix":
		new = UpdateMatrix(0)
		for body_update in self.bodies:
			copy_update = BodyUpdate(body_update.body_index)
			for var in body_update.variables:
				copy_update.add_variable(var.clone())
			new.bodies.append(copy_update)
		return new

	def sync_from(self, other: "UpdateMatrix") -> None:
		for mine, theirs in zip(self.iter_variables(), other.iter_variables()):
			mine.deriv_proc[...] = theirs.deriv_proc
			mine.derivative = theirs.derivative

	def totals(self) -> dict:
		out = {}
		for var in self.iter_variables():
			out[(var.body_index, var.attribute)] = var.total()
		return out


__all__ = [
	"UpdateMatrixError",
	"Rule",
	"FunctionRule",
	"as_rule",
	"Equation",
	"PolarReference",
	"Variable",
	"BodyUpdate",
	"UpdateMatrix",
]
