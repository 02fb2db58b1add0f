"""Configuration package for runtime settings and startup validation."""

from .settings import CheckMode, CheckSettings, ConfigurationError, config_load_settings

__all__ = ["CheckMode", "CheckSettings", "ConfigurationError", "config_load_settings"]
