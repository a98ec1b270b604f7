"""
Configuration loader.

App config: reads config.yaml (optional), validates against JSON Schema,
overlays environment variables and resolves secrets.
"""

from config.loader import (
    AppConfig,
    ConfigError,
    DataConfig,
    LoggingConfig,
    load_config,
    with_overrides,
)

__all__ = [
    "AppConfig",
    "ConfigError",
    "DataConfig",
    "LoggingConfig",
    "load_config",
    "with_overrides",
]
