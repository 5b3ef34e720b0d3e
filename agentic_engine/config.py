"""
YAML configuration loader for EngineParameters.

A config file is either a flat mapping of parameter names or a mapping with
an ``engine`` section holding them:

    engine:
      seed: 42
      consensus_gain: 0.2
      noise_scale: 0.0

Public API:
    load_config(path)      -> raw config dict
    load_parameters(path)  -> EngineParameters
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .core.parameters import EngineParameters

PathLike = Union[str, Path]


def load_config(config_path: PathLike) -> Dict[str, Any]:
    """Load a YAML config file into a dict (empty file gives {})."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path.resolve()}")

    with open(path, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(
            f"Config {path} must be a mapping, got {type(config).__name__}"
        )
    return config


def parameters_from_config(config: Dict[str, Any]) -> EngineParameters:
    """Build EngineParameters from a loaded config dict.

    Raises:
        ValueError: If the ``engine`` section is not a mapping, a key is
                    unknown, or a value fails validation.
    """
    section = config.get("engine", config)
    if section is None:
        section = {}
    if not isinstance(section, dict):
        raise ValueError("'engine' section must be a mapping")
    return EngineParameters.from_dict(section)


def load_parameters(config_path: PathLike) -> EngineParameters:
    """Load EngineParameters from a YAML file."""
    return parameters_from_config(load_config(config_path))
