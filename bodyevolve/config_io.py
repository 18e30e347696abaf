from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .sim_config import EvolveConfig

"""
This module loads evolution settings from YAML files. load_config reads one mapping with yaml.safe_load, accepts the EvolveConfig fields either at the top level or nested under an "evolve" key (so the run settings can share a file with body and module definitions), and builds the config through EvolveConfig.from_dict, which warns about and drops unknown keys. The loaded config is validated and every problem is reported before a ValueError is raised. save_config writes the inverse mapping so a run can be reproduced from its own settings.


"""


def read_mapping(path: Union[str, Path]) -> Dict[str, Any]:
	with open(path, "r") as f:
		data = yaml.safe_load(f)
	if data is None:
		return {}
	if not isinstance(data, dict):
		raise ValueError(f"{path}: expected a YAML mapping, got {type(data).__name__}")
	return data


def load_config(path: Union[str, Path]) -> EvolveConfig:
	data = read_mapping(path)
	section = data.get("evolve", data)
	if not isinstance(section, dict):
		raise ValueError(f"{path}: 'evolve' must be a mapping")

	cfg = EvolveConfig.from_dict(section)
	problems = cfg.validate()
	if problems:
		for msg in problems:
			print(f"[error] {path}: {msg}")
		raise ValueError(f"{path}: invalid evolve configuration")
	return cfg


def save_config(cfg: EvolveConfig, path: Union[str, Path]) -> None:
	data = {name: getattr(cfg, name) for name in sorted(EvolveConfig.field_names())}
	with open(path, "w") as f:
		yaml.safe_dump({"evolve": data}, f, sort_keys=True)


__all__ = ["load_config", "read_mapping", "save_config"]
