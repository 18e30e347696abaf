"""
This module implements the Simulation facade that assembles one evolution run.

The Simulation class collects the body list, the configuration, the system record, the
physics modules attached to each body and any extra halts. build validates the
configuration, lets every module register its variables and equations into a fresh
UpdateMatrix, collects module halts, verifies the matrix, and wires the run-scoped
EvolveState, Integrator and EvolutionDriver together; the hooks handed to the engine
fan out to the modules in body order and, within a body, in attachment order. run
builds on demand and evolves to the stop time or the first halt; building twice is a
no-op. The class assumes modules are attached before build and that the body list is
not resized afterwards.
"""

from __future__ import annotations
from typing import List, Optional, Sequence

from .body import Body
from .evolution import EvolutionDriver, EvolveResult
from .evolve_state import EvolveState
from .halt import Halt, HaltChecker
from .integrator import Integrator
from .modules.base import MultiModule, PhysicsModule
from .output import OutputRecorder
from .physics_utils import props_aux_general
from .sim_config import EvolveConfig
from .system import System
from .update_matrix import UpdateMatrix




class Simulation:

	def __init__(
		self,
		bodies: Sequence[Body],
		cfg: Optional[EvolveConfig] = None,
		*,
		system: Optional[System] = None,
		output=None,
	) -> None:
		self.bodies: List[Body] = list(bodies)
		self.cfg = cfg if cfg is not None else EvolveConfig()
		self.system = system if system is not None else System()
		self.output = output if output is not None else OutputRecorder()

		n = len(self.bodies)
		self.matrix = UpdateMatrix(n)
		self.halts = HaltChecker(self.cfg)
		self._modules: List[List[PhysicsModule]] = [[] for _ in range(n)]
		self._multi: List[List[MultiModule]] = [[] for _ in range(n)]
		self._extra_halts: List[Halt] = []

		self.state: Optional[EvolveState] = None
		self.integrator: Optional[Integrator] = None
		self.driver: Optional[EvolutionDriver] = None

	@property
	def n_bodies(self) -> int:
		return len(self.bodies)

	@property
	def is_built(self) -> bool:
		return self.driver is not None

	def modules(self, body_index: int) -> List[PhysicsModule]:
		return list(self._modules[body_index])

	def add_module(self, body_index: int, module: PhysicsModule) -> PhysicsModule:
		self._modules[body_index].append(module)
		return module

	def add_multi_module(self, body_index: int, multi: MultiModule) -> MultiModule:
		self._multi[body_index].append(multi)
		return multi

	def add_halt(self, halt: Halt) -> Halt:
		self._extra_halts.append(halt)
		return halt

	def properties_auxiliary(self, bodies, matrix) -> None:
		props_aux_general(bodies)
		for i_body in range(len(bodies)):
			for module in self._modules[i_body]:
				module.props_aux(bodies, self.state, self.cfg, matrix, i_body)
			for multi in self._multi[i_body]:
				multi.props_aux(bodies, self.state, self.cfg, matrix, i_body)

	def force_behavior(self, bodies, state, system, matrix) -> None:
		for i_body in range(len(bodies)):
			for i_module, module in enumerate(self._modules[i_body]):
				module.force_behavior(bodies, state, system, matrix, i_body, i_module)
			for i_module, multi in enumerate(self._multi[i_body]):
				multi.force_behavior(bodies, state, system, matrix, i_body, i_module)

	def body_copy(self, dest, src) -> None:
		n = len(src)
		for i_body in range(n):
			for module in self._modules[i_body]:
				module.body_copy(dest, src, n, i_body)

	def build(self) -> "Simulation":
		if self.is_built:
			return self

		problems = self.cfg.validate()
		if problems:
			for msg in problems:
				print(f"[error] {msg}")
			raise ValueError("invalid evolve configuration: " + "; ".join(problems))

		for i_body, modules in enumerate(self._modules):
			for module in modules:
				module.initialize_update(self.matrix, self.bodies, i_body)
				for halt in module.halts(i_body):
					self.halts.add(halt)
		for halt in self._extra_halts:
			self.halts.add(halt)

		self.matrix.verify(self.bodies)

		self.state = EvolveState(self.cfg)
		self.integrator = Integrator(
			self.bodies,
			self.system,
			self.matrix,
			self.state,
			self.cfg,
			props_aux=self.properties_auxiliary,
			body_copy=self.body_copy,
		)
		self.driver = EvolutionDriver(
			self.integrator,
			self.halts,
			self.output,
			force_behavior=self.force_behavior,
		)
		return self

	def run(self) -> EvolveResult:
		if not self.is_built:
			self.build()
		return self.driver.run()


__all__ = ["Simulation"]
