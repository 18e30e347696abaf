"""
This module defines the Body class, the state record for one star or planet in the
evolution.

The class stores the quantities every run needs (mass, radius, age, orbital elements,
rotation, mean motion and the Cartesian position/velocity used by direct integration)
as floating-point attributes, and accepts any number of extra keyword fields for
module-owned state such as envelope or surface water masses. Bodies are created once
before the run and mutated in place afterwards. copy_into synchronizes the core fields
of a scratch body from an authoritative one; module-owned fields are copied by each
module's body_copy hook because the engine does not know their layout. Body 0 is the
primary by convention.
"""

from __future__ import annotations
import math
import numpy as np


_CORE_FIELDS = (
	"mass",
	"radius",
	"age",
	"semi",
	"ecc",
	"obliquity",
	"rot_rate",
	"mean_motion",
	"position_x",
	"position_y",
	"position_z",
	"velocity_x",
	"velocity_y",
	"velocity_z",
)


class Body:
	def __init__(
		self,
		name: str = "",
		mass: float = 0.0,
		*,
		radius: float = 0.0,
		age: float = 0.0,
		semi: float = 0.0,
		ecc: float = 0.0,
		obliquity: float = 0.0,
		rot_rate: float = 0.0,
		mean_motion: float = 0.0,
		binary: bool = False,
		position=(0.0, 0.0, 0.0),
		velocity=(0.0, 0.0, 0.0),
		**fields,
	):
		self.name = str(name)
		self.mass = float(mass)
		self.radius = float(radius)
		self.age = float(age)
		self.semi = float(semi)
		self.ecc = float(ecc)
		self.obliquity = float(obliquity)
		self.rot_rate = float(rot_rate)
		self.mean_motion = float(mean_motion)
		self.binary = bool(binary)
		self.position_x, self.position_y, self.position_z = (float(c) for c in position)
		self.velocity_x, self.velocity_y, self.velocity_z = (float(c) for c in velocity)
		for key, val in fields.items():
			setattr(self, key, val)

	@property
	def position(self) -> np.ndarray:
		return np.array([self.position_x, self.position_y, self.position_z], dtype=float)

	@property
	def velocity(self) -> np.ndarray:
		return np.array([self.velocity_x, self.velocity_y, self.velocity_z], dtype=float)

	@property
	def orbital_period(self) -> float:
		if self.mean_motion > 0.0:
			return 2.0 * math.pi / self.mean_motion
		return math.inf

	def copy_into(self, dest: "Body") -> None:
		dest.name = self.name
		dest.binary = self.binary
		for key in _CORE_FIELDS:
			setattr(dest, key, getattr(self, key))

	def __repr__(self) -> str:
		return (f"Body(name={self.name!r}, mass={self.mass}, age={self.age}, "
				f"semi={self.semi}, ecc={self.ecc})")


__all__ = ["Body"]
