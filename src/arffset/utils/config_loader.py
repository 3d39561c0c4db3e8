"""Load YAML configuration files describing a dataset selection."""

from __future__ import annotations

from pathlib import Path
from typing import Any, MutableMapping

import yaml

from ..errors import ConfigurationError


class ConfigError(ConfigurationError):
    """Raised when the configuration file is missing or malformed."""


def load_config(config_path: str | Path) -> MutableMapping[str, Any]:
    """Load a YAML configuration file and return it as a mutable mapping.

    Config files are expected to live one level below the project root
    (``<project>/config/dataset.yml``); relative dataset paths inside the file
    are later resolved against that root.
    """

    resolved_path = Path(config_path).expanduser().resolve()
    if not resolved_path.exists():
        raise ConfigError(f"Config file not found: {resolved_path}")

    with resolved_path.open("r", encoding="utf-8") as handle:
        try:
            config = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {resolved_path}: {exc}") from exc

    if not isinstance(config, MutableMapping):
        raise ConfigError("Configuration root must be a mapping.")

    config["__config_file__"] = resolved_path
    config["__project_root__"] = resolved_path.parent.parent
    return config


def resolve_project_path(config: MutableMapping[str, Any], relative_path: str | Path) -> Path:
    """Resolve a project-relative path declared inside the configuration."""

    path = Path(relative_path).expanduser()
    if path.is_absolute():
        return path
    project_root = Path(config.get("__project_root__", Path.cwd()))
    return (project_root / path).resolve()
