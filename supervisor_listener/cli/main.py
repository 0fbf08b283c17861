"""Main entry point for the supervisor event listener."""

from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape

from supervisor_listener._version import __version__
from supervisor_listener.config.settings import ConfigurationError, Settings
from supervisor_listener.core.logging import get_logger, setup_logging
from supervisor_listener.exceptions import ListenerError, StreamClosedError
from supervisor_listener.handlers import EventHandler
from supervisor_listener.handlers.implementations import LoggingHandler
from supervisor_listener.listener import EventListener
from supervisor_listener.loader import load_handlers

from .options.listener_options import (
    handler_option,
    json_logs_option,
    log_events_option,
    log_level_option,
    process_tag_option,
    raise_handler_faults_option,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"supervisor-listener {__version__}")
        raise typer.Exit()


app = typer.Typer(
    rich_markup_mode="rich",
    add_completion=False,
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)

logger = get_logger(__name__)


def _error_console() -> Console:
    # stdout belongs to the protocol
    return Console(stderr=True)


@app.callback()
def app_main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Supervisord event listener - dispatches events to Python handlers."""
    ctx.ensure_object(dict)


def build_overrides(
    handlers: list[str] | None = None,
    process_tag: str | None = None,
    raise_handler_faults: bool | None = None,
    log_level: str | None = None,
    json_logs: bool | None = None,
    log_events: bool | None = None,
) -> dict[str, Any]:
    """Collect explicitly given CLI values as settings overrides."""
    listener_overrides: dict[str, Any] = {}
    if handlers:
        listener_overrides["handlers"] = list(handlers)
    if process_tag is not None:
        listener_overrides["process_tag"] = process_tag
    if raise_handler_faults is not None:
        listener_overrides["raise_handler_faults"] = raise_handler_faults

    logging_overrides: dict[str, Any] = {}
    if log_level is not None:
        logging_overrides["level"] = log_level
    if json_logs is not None:
        logging_overrides["format"] = "json" if json_logs else "plain"
    if log_events is not None:
        logging_overrides["log_events"] = log_events

    overrides: dict[str, Any] = {}
    if listener_overrides:
        overrides["listener"] = listener_overrides
    if logging_overrides:
        overrides["logging"] = logging_overrides
    return overrides


def create_listener(settings: Settings) -> EventListener:
    """Build a listener on the process standard streams from settings.

    Raises:
        HandlerLoadError: If a configured handler cannot be imported
    """
    handlers: list[EventHandler] = []
    if settings.logging.log_events:
        handlers.append(LoggingHandler(include_payload=True))
    handlers.extend(load_handlers(settings.listener.handlers))

    return EventListener(
        handlers,
        process_tag=settings.listener.process_tag,
        json_diagnostics=settings.logging.json_logs,
        log_level=settings.logging.level,
        raise_handler_faults=settings.listener.raise_handler_faults,
    )


def run_listener(listener: EventListener) -> int:
    """Run the listener until it stops and return the process exit code.

    The peer closing the input between cycles is a normal shutdown. Any other
    protocol error leaves the streams out of step and exits with status 1.
    """
    try:
        listener.listen()
    except StreamClosedError as e:
        if not e.mid_cycle:
            listener.log("Input stream closed, exiting", cycles=listener.cycles)
            return 0
        listener.diagnostics.error(e.message, error_type=e.error_type)
        return 1
    except ListenerError as e:
        listener.diagnostics.error(e.message, error_type=e.error_type)
        return 1

    listener.log("Handler requested quit, exiting", cycles=listener.cycles)
    return 0


@app.command()
def listen(
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    handler: list[str] | None = handler_option(),
    process_tag: str | None = process_tag_option(),
    raise_handler_faults: bool | None = raise_handler_faults_option(),
    log_level: str | None = log_level_option(),
    json_logs: bool | None = json_logs_option(),
    log_events: bool | None = log_events_option(),
) -> None:
    """
    Listen for supervisord events on stdin and answer on stdout.

    Configure it as an [eventlistener:x] program in supervisord.conf, e.g.

        command=supervisor-listener listen --handler mypkg.handlers:on_exit
    """
    # Route anything logged while loading settings away from stdout
    setup_logging(log_level or "INFO")

    overrides = build_overrides(
        handlers=handler,
        process_tag=process_tag,
        raise_handler_faults=raise_handler_faults,
        log_level=log_level,
        json_logs=json_logs,
        log_events=log_events,
    )

    try:
        settings = Settings.from_config(config_path=config, **overrides)
    except ConfigurationError as e:
        _error_console().print(
            f"[bold red]Configuration error:[/bold red] {escape(str(e))}"
        )
        raise typer.Exit(1) from e

    setup_logging(settings.logging.level, json_logs=settings.logging.json_logs)

    try:
        listener = create_listener(settings)
    except ListenerError as e:
        _error_console().print(
            f"[bold red]Startup error:[/bold red] {escape(e.message)}"
        )
        raise typer.Exit(1) from e

    logger.debug(
        "listener_configured",
        handlers=listener.handlers.names(),
        process_tag=listener.process_tag,
    )
    raise typer.Exit(run_listener(listener))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
