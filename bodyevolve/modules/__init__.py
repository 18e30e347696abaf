"""
Physics modules for the evolution engine: the PhysicsModule and MultiModule interface
plus the small reference modules used by tests and examples.
"""

from .base import PhysicsModule, MultiModule
from .rates import ConstantRateModule, ExponentialDecayModule
from .explicit import ExplicitTrackModule
from .envelope import EnvelopeLossModule


__all__ = [
	"PhysicsModule",
	"MultiModule",
	"ConstantRateModule",
	"ExponentialDecayModule",
	"ExplicitTrackModule",
	"EnvelopeLossModule",
]
