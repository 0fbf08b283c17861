"""Diagnostic logging to the listener's error stream.

Each listener owns a structlog logger wrapped around its error stream, so
diagnostics from in-memory listeners in tests do not leak into the global
logging configuration. Lines are written and flushed immediately.
"""

import logging
from collections.abc import MutableMapping
from typing import Any, TextIO

import structlog


__all__ = ["DEFAULT_PROCESS_TAG", "DiagnosticLogger", "TaggedLineRenderer"]

DEFAULT_PROCESS_TAG = "Supervisord Event"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class TaggedLineRenderer:
    """Render ``[<tag>] <timestamp>: <message>`` lines.

    Remaining context is appended as ``key=value`` pairs and a formatted
    exception, if any, follows on the next lines.
    """

    def __init__(self, process_tag: str) -> None:
        self.process_tag = process_tag

    def __call__(
        self, logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
    ) -> str:
        timestamp = event_dict.pop("timestamp", "")
        message = str(event_dict.pop("event", ""))
        exception = event_dict.pop("exception", None)
        event_dict.pop("level", None)

        line = f"[{self.process_tag}] {timestamp}: {message}"
        if event_dict:
            context = " ".join(f"{key}={value}" for key, value in event_dict.items())
            line = f"{line} {context}"
        if exception:
            line = f"{line}\n{exception.rstrip()}"
        return line


class DiagnosticLogger:
    """Timestamped logger bound to one error stream"""

    def __init__(
        self,
        stream: TextIO,
        process_tag: str = DEFAULT_PROCESS_TAG,
        json_format: bool = False,
        level: str | int = logging.INFO,
    ) -> None:
        self.stream = stream
        self.process_tag = process_tag
        self.json_format = json_format
        if isinstance(level, str):
            level = getattr(logging, level.upper(), logging.INFO)
        self.level = level

        processors: list[Any] = [structlog.processors.add_log_level]
        if json_format:
            processors += [
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.dict_tracebacks,
                _add_process_tag(process_tag),
                structlog.processors.JSONRenderer(),
            ]
        else:
            processors += [
                structlog.processors.TimeStamper(fmt=TIMESTAMP_FORMAT, utc=False),
                structlog.processors.format_exc_info,
                TaggedLineRenderer(process_tag),
            ]

        self._logger = structlog.wrap_logger(
            structlog.PrintLogger(file=stream),
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(level),
        )

    def debug(self, message: str, **context: Any) -> None:
        self._logger.debug(message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._logger.info(message, **context)

    log = info

    def warning(self, message: str, **context: Any) -> None:
        self._logger.warning(message, **context)

    def error(self, message: str, **context: Any) -> None:
        self._logger.error(message, **context)

    def exception(self, message: str, **context: Any) -> None:
        """Log at error level with the active exception's traceback"""
        self._logger.exception(message, **context)


def _add_process_tag(process_tag: str) -> Any:
    def processor(
        logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
    ) -> MutableMapping[str, Any]:
        event_dict["tag"] = process_tag
        return event_dict

    return processor
