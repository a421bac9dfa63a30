"""Configuration file loading and merging."""

import logging
from pathlib import Path

import yaml

from qa_scaffold.config.schema import DEFAULT_CONFIG, ScaffoldConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"
LOCAL_CONFIG_FILENAME = ".qa-scaffold.yaml"


def get_home_config_path() -> Path:
    """Get path to global config: ~/.qa-scaffold/config.yaml."""
    return Path.home() / ".qa-scaffold" / CONFIG_FILENAME


def get_local_config_path(root: Path | None = None) -> Path:
    """Get path to local config: <root>/.qa-scaffold.yaml."""
    return (root or Path.cwd()) / LOCAL_CONFIG_FILENAME


def load_yaml_config(path: Path) -> dict[str, object] | None:
    """Load a YAML config file, return None if not found, empty or invalid."""
    if not path.exists():
        return None
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return None
    if not isinstance(data, dict):
        return None
    result: dict[str, object] = data
    return result


def load_config(root: Path | None = None) -> ScaffoldConfig:
    """Load merged configuration.

    Precedence (lowest to highest):
    1. Built-in defaults
    2. Global config (~/.qa-scaffold/config.yaml)
    3. Local config (<root>/.qa-scaffold.yaml)

    CLI flags are layered on top by the caller.
    """
    config = DEFAULT_CONFIG

    for path in (get_home_config_path(), get_local_config_path(root)):
        data = load_yaml_config(path)
        if data:
            logger.debug("Loaded config from %s", path)
            config = config.merge(ScaffoldConfig.from_dict(data))

    return config


def save_config(config: ScaffoldConfig, path: Path) -> None:
    """Save config to a YAML file.

    Creates parent directories if needed.
    Only saves non-None values.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config.to_dict()
    with path.open("w") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
