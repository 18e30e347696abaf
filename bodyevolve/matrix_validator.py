"""
This module provides verification utilities for update matrices before integration.

The MatrixValidator class offers static methods to collect every configuration problem
in a matrix (single-valued variables with more than one contributing equation,
equations referring to unknown body indices, variables bound to attributes the body
does not carry, variables of a body index outside the body list), report them as
tagged diagnostics, and refuse to continue. The checks run once, before the first
output record, so an inconsistent registration can never reach the steppers. It
assumes the matrix structure is final when verification runs.
"""

from __future__ import annotations
import math
from typing import List, Optional, Sequence, TYPE_CHECKING

from .update_matrix import UpdateMatrixError

if TYPE_CHECKING:
    from .body import Body
    from .update_matrix import UpdateMatrix




class MatrixValidator:
	@staticmethod
	def problems(matrix: "UpdateMatrix", bodies: Optional[Sequence["Body"]] = None) -> List[str]:
		out: List[str] = []
		n_bodies = matrix.n_bodies
		if bodies is not None and len(bodies) != n_bodies:
			out.append(f"matrix has {n_bodies} bodies but {len(bodies)} were supplied")

		for body_update in matrix.bodies:
			i_body = body_update.body_index
			for var in body_update.variables:
				label = f"body {i_body} variable {var.attribute!r}"

				if var.var_type.single_equation and var.n_eqns > 1:
					modules = ", ".join(eq.module for eq in var.equations)
					out.append(
						f"{label}: more than one equation trying to set a "
						f"{var.var_type.name} value ({modules})"
					)

				for eq in var.equations:
					for j in eq.bodies:
						if j < 0 or j >= n_bodies:
							out.append(f"{label}: equation from {eq.module!r} depends on unknown body {j}")

				if bodies is not None and i_body < len(bodies):
					body = bodies[i_body]
					if not hasattr(body, var.attribute):
						out.append(f"{label}: body {body.name!r} has no attribute {var.attribute!r}")
					else:
						val = getattr(body, var.attribute)
						if not isinstance(val, (int, float)) or not math.isfinite(float(val)):
							out.append(f"{label}: initial value {val!r} is not a finite number")

				ref = var.reference
				if ref is not None and ref.attribute is not None and bodies is not None and i_body < len(bodies):
					if not hasattr(bodies[i_body], ref.attribute):
						out.append(f"{label}: reference attribute {ref.attribute!r} missing")

		return out

	@staticmethod
	def matrix_is_valid(matrix: "UpdateMatrix", bodies: Optional[Sequence["Body"]] = None) -> bool:
		return not MatrixValidator.problems(matrix, bodies)

	@staticmethod
	def report_invalid_matrix(label: str, problems: Sequence[str]) -> None:
		print(f"[invalid] {label}")
		for msg in problems:
			print(f"  {msg}")

	@staticmethod
	def verify(matrix: "UpdateMatrix", bodies: Optional[Sequence["Body"]] = None) -> None:
		problems = MatrixValidator.problems(matrix, bodies)
		if problems:
			MatrixValidator.report_invalid_matrix("update matrix", problems)
			raise UpdateMatrixError("; ".join(problems))


__all__ = ["MatrixValidator", "UpdateMatrixError"]
