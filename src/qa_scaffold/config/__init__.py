"""Layered YAML configuration."""

from qa_scaffold.config.loader import (
    get_home_config_path,
    get_local_config_path,
    load_config,
    load_yaml_config,
    save_config,
)
from qa_scaffold.config.schema import DEFAULT_CONFIG, ScaffoldConfig

__all__ = [
    "DEFAULT_CONFIG",
    "ScaffoldConfig",
    "get_home_config_path",
    "get_local_config_path",
    "load_config",
    "load_yaml_config",
    "save_config",
]
