"""Configuration module for the supervisor listener."""

from .listener import ListenerSettings
from .logging import LoggingSettings
from .settings import ConfigurationError, Settings, find_toml_config_file


__all__ = [
    "ConfigurationError",
    "ListenerSettings",
    "LoggingSettings",
    "Settings",
    "find_toml_config_file",
]
