"""Configuration loading for the portfolio report generator."""

from .loader import ConfigError, apply_env_overrides, load_config

__all__ = [
    "ConfigError",
    "apply_env_overrides",
    "load_config",
]
