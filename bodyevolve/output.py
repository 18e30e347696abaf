"""
This module handles output records for evolutions.

The OutputRecorder class is the default output sink: every call appends one row holding
the simulation time, the effective output interval, each body's age and the current
value of every registered variable (optionally also its summed equation result), keyed
as "<body>.<attribute>". Rows accumulate in memory and convert to a pandas DataFrame on
demand, and write_csv stores them with a comment header naming the run. Any callable
with the same signature can stand in for it in the driver. It assumes body names are
unique or empty; empty names fall back to the body index.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd



def _label(bodies, i_body: int) -> str:
	name = getattr(bodies[i_body], "name", "")
	if name:
		return str(name)
	return f"body{i_body}"


class OutputRecorder:

	def __init__(self, extra: Sequence[str] = (), *, with_derivatives: bool = False) -> None:
		self.extra = tuple(extra)
		self.with_derivatives = bool(with_derivatives)
		self.rows: List[Dict[str, float]] = []

	def __len__(self) -> int:
		return len(self.rows)

	def __call__(self, bodies, state, matrix, time: float, dt: float) -> None:
		row: Dict[str, float] = {"time": float(time), "dt": float(dt)}
		for i_body in range(len(bodies)):
			label = _label(bodies, i_body)
			row[f"{label}.age"] = float(bodies[i_body].age)
			for attr in self.extra:
				if hasattr(bodies[i_body], attr):
					row[f"{label}.{attr}"] = float(getattr(bodies[i_body], attr))
		for var in matrix.iter_variables():
			label = _label(bodies, var.body_index)
			row[f"{label}.{var.attribute}"] = var.get_value(bodies)
			if self.with_derivatives and not var.var_type.is_value:
				row[f"{label}.d{var.attribute}_dt"] = state.direction * var.total()
		self.rows.append(row)

	@property
	def times(self) -> np.ndarray:
		return np.array([row["time"] for row in self.rows], dtype=float)

	def column(self, key: str) -> np.ndarray:
		return np.array([row.get(key, np.nan) for row in self.rows], dtype=float)

	def to_frame(self) -> pd.DataFrame:
		return pd.DataFrame(self.rows)

	def write_csv(self, path: str, name: Optional[str] = None) -> None:
		df = self.to_frame()
		with open(path, "w") as f:
			if name:
				f.write(f"# run: {name}\n")
			df.to_csv(f, index=False)

	def clear(self) -> None:
		self.rows = []


__all__ = ["OutputRecorder"]
