from __future__ import annotations
from dataclasses import dataclass, field

"""
This module defines the System record handed to every equation alongside the body list. It carries the run-wide quantities that do not belong to any single body, a name used in output, and a free-form params mapping that modules may read. Modules that need shared state beyond it keep that state on their own instances.


"""


@dataclass
class System:
    name: str = "system"
    params: dict = field(default_factory=dict)

    def get(self, key: str, default=None):
        return self.params.get(key, default)


__all__ = ["System"]
