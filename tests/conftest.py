"""Shared test configuration for supervisor_listener tests."""

from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from supervisor_listener.core.logging import setup_logging


@pytest.fixture(autouse=True)
def structlog_to_stderr() -> Generator[None, None, None]:
    """Send module logs to stderr for each test and restore defaults after.

    CLI tests reconfigure structlog against CliRunner streams that are closed
    once the invocation ends.
    """
    setup_logging(log_level_name="DEBUG")
    yield
    structlog.reset_defaults()


@pytest.fixture
def isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Path:
    """Run in an empty working directory with no config discovery or overrides."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    for name in (
        "CONFIG_FILE",
        "LISTENER",
        "LOGGING",
        "LISTENER__PROCESS_TAG",
        "LISTENER__HANDLERS",
        "LISTENER__RAISE_HANDLER_FAULTS",
        "LOGGING__LEVEL",
        "LOGGING__FORMAT",
        "LOGGING__LOG_EVENTS",
    ):
        monkeypatch.delenv(name, raising=False)
    return tmp_path
