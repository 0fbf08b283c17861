import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from supervisor_listener.core.logging import get_logger

from .listener import ListenerSettings
from .logging import LoggingSettings


__all__ = ["Settings", "ConfigurationError", "find_toml_config_file"]

CONFIG_FILE_NAME = ".supervisor-listener.toml"
XDG_APP_DIR = "supervisor-listener"


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def find_toml_config_file() -> Path | None:
    """Return the first TOML configuration file found, if any.

    Search order:
    1. .supervisor-listener.toml in the current directory
    2. config.toml in XDG_CONFIG_HOME/supervisor-listener/
    """
    local = Path.cwd() / CONFIG_FILE_NAME
    if local.is_file():
        return local

    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    config_home = Path(xdg_home) if xdg_home else Path.home() / ".config"
    xdg_config = config_home / XDG_APP_DIR / "config.toml"
    if xdg_config.is_file():
        return xdg_config

    return None


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Settings(BaseSettings):
    """
    Configuration settings for the supervisor event listener.

    Settings are loaded from environment variables, .env files, and TOML configuration files.
    Environment variables take precedence over TOML values; explicit overrides
    (CLI options) take precedence over both. Nested fields use a double
    underscore, e.g. LISTENER__PROCESS_TAG or LOGGING__LEVEL.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    listener: ListenerSettings = Field(
        default_factory=ListenerSettings,
        description="Protocol loop configuration",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file."""
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read TOML config file {toml_path}: {e}"
            ) from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def _without_env_overrides(cls, config_data: dict[str, Any]) -> dict[str, Any]:
        """Drop TOML values that an environment variable also sets."""
        result: dict[str, Any] = {}
        for key, value in config_data.items():
            if isinstance(value, dict):
                nested = {
                    nested_key: nested_value
                    for nested_key, nested_value in value.items()
                    if os.getenv(f"{key.upper()}__{nested_key.upper()}") is None
                }
                result[key] = nested
            elif os.getenv(key.upper()) is None:
                result[key] = value
        return result

    @classmethod
    def from_config(
        cls,
        config_path: Path | str | None = None,
        **kwargs: Any,
    ) -> "Settings":
        """Create Settings from a TOML file, the environment and overrides.

        Args:
            config_path: TOML file; falls back to CONFIG_FILE and the default
                search locations when None
            **kwargs: Section overrides, e.g. ``logging={"level": "DEBUG"}``

        Raises:
            ConfigurationError: If the file cannot be read or values are invalid
        """
        if config_path is None:
            config_path_env = os.environ.get("CONFIG_FILE")
            if config_path_env:
                config_path = Path(config_path_env)

        if isinstance(config_path, str):
            config_path = Path(config_path)

        if config_path is None:
            config_path = find_toml_config_file()

        config_data: dict[str, Any] = {}
        if config_path is not None:
            if not config_path.exists():
                raise ConfigurationError(f"Config file not found: {config_path}")
            config_data = cls.load_toml_config(config_path)
            get_logger(__name__).debug(
                "config_file_loaded", path=str(config_path), category="config"
            )

        init_data = _deep_merge(cls._without_env_overrides(config_data), kwargs)

        try:
            return cls(**init_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
