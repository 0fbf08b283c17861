"""Structlog configuration for the listener process.

Standard output carries protocol text, so every log line goes to standard
error (or a caller supplied stream).
"""

import logging
import sys
from typing import Any, TextIO

import structlog


__all__ = ["get_logger", "setup_logging"]


def setup_logging(
    log_level_name: str = "INFO",
    json_logs: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog for module loggers.

    Args:
        log_level_name: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines instead of console output
        stream: Destination stream, standard error when None
    """
    level = getattr(logging, log_level_name.upper(), logging.INFO)
    output = stream if stream is not None else sys.stderr

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=output.isatty())
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structlog bound logger
    """
    return structlog.get_logger(name)
