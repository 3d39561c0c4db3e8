"""Utility modules for configuration and sampling."""

from .config_loader import ConfigError, load_config, resolve_project_path
from .sampling import SamplingConfig, set_seed, to_sampling_config

__all__ = [
    "ConfigError",
    "load_config",
    "resolve_project_path",
    "SamplingConfig",
    "set_seed",
    "to_sampling_config",
]
