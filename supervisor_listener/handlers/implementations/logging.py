"""Structured logging handler implementation."""

from typing import TYPE_CHECKING, Any

import structlog

from ...notification import EventNotification
from ..base import EventHandler, Verdict


if TYPE_CHECKING:
    from supervisor_listener.listener import EventListener


class LoggingHandler(EventHandler):
    """Log every notification and defer to the rest of the chain"""

    def __init__(
        self,
        logger: structlog.BoundLogger | None = None,
        include_payload: bool = False,
    ):
        """Initialize logging handler.

        Args:
            logger: Optional structlog logger instance. If None, logs through
                the listener's diagnostics.
            include_payload: Whether to include the parsed payload fields
        """
        self.logger = logger
        self.include_payload = include_payload

    @property
    def name(self) -> str:
        return "logging_handler"

    def applies_to(self, notification: EventNotification) -> bool:
        return True

    def handle(
        self, notification: EventNotification, listener: "EventListener"
    ) -> Verdict:
        log_data: dict[str, Any] = {
            "event_name": notification.event_name,
            "serial": notification.headers.get("serial"),
            "pool": notification.headers.get("pool"),
            "length": notification.length,
        }

        if self.include_payload:
            fields, body = notification.parse_payload()
            log_data["payload"] = fields
            if body:
                log_data["body_length"] = len(body)

        logger = self.logger if self.logger is not None else listener.diagnostics
        logger.info("event_received", **log_data)
        return Verdict.PASS
