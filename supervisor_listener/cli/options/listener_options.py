"""Listener-related CLI options."""

from typing import Any

import typer


def validate_log_level(
    ctx: typer.Context, param: typer.CallbackParam, value: str | None
) -> str | None:
    """Validate log level."""
    if value is None:
        return None

    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    if value.upper() not in valid_levels:
        raise typer.BadParameter(f"Log level must be one of: {', '.join(valid_levels)}")

    return value.upper()


def validate_handler_paths(
    ctx: typer.Context, param: typer.CallbackParam, value: list[str] | None
) -> list[str] | None:
    """Validate handler import paths."""
    if not value:
        return None

    for path in value:
        module, sep, attribute = path.partition(":")
        if not sep or not module or not attribute:
            raise typer.BadParameter(
                f"Handler must be given as 'package.module:attribute', got {path!r}"
            )

    return list(value)


def handler_option() -> Any:
    """Handler import path parameter."""
    return typer.Option(
        None,
        "--handler",
        "-H",
        help="Handler import path 'package.module:attribute'; repeat for a chain, first match wins",
        callback=validate_handler_paths,
        rich_help_panel="Listener Settings",
    )


def process_tag_option() -> Any:
    """Diagnostic tag parameter."""
    return typer.Option(
        None,
        "--process-tag",
        help="Tag prefixed to diagnostic lines on stderr",
        rich_help_panel="Listener Settings",
    )


def raise_handler_faults_option() -> Any:
    """Handler fault policy parameter."""
    return typer.Option(
        None,
        "--raise-handler-faults/--fail-on-handler-faults",
        help="Exit when a handler raises instead of answering FAIL",
        rich_help_panel="Listener Settings",
    )


def log_level_option() -> Any:
    """Log level parameter."""
    return typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        callback=validate_log_level,
        rich_help_panel="Logging Settings",
    )


def json_logs_option() -> Any:
    """Log format parameter."""
    return typer.Option(
        None,
        "--json-logs/--plain-logs",
        help="Write diagnostics as JSON lines",
        rich_help_panel="Logging Settings",
    )


def log_events_option() -> Any:
    """Event logging parameter."""
    return typer.Option(
        None,
        "--log-events/--no-log-events",
        help="Log every notification before it is dispatched",
        rich_help_panel="Logging Settings",
    )
