"""Base classes for event handlers.

A handler answers two questions for each notification: does it apply, and
if so what verdict does handling it produce. The listener owns the dispatch
policy; handlers never see each other.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING, Any

from supervisor_listener.handlers.events import SupervisorEvent, event_matches
from supervisor_listener.notification import EventNotification


if TYPE_CHECKING:
    from supervisor_listener.listener import EventListener


__all__ = ["EventHandler", "SubscriptionHandler", "Verdict"]


class Verdict(str, Enum):
    """Outcome of handling one notification."""

    SUCCESS = "success"
    FAILURE = "failure"
    QUIT = "quit"
    # Handler declined to decide, dispatch moves on to the next handler
    PASS = "pass"

    @classmethod
    def coerce(cls, value: Any) -> "Verdict":
        """Convert a loose callback result into a verdict.

        ``True`` and ``False`` map to SUCCESS and FAILURE, the string
        ``"quit"`` to QUIT and ``None`` to PASS.

        Raises:
            TypeError: For any other value
        """
        if isinstance(value, cls):
            return value
        if value is True:
            return cls.SUCCESS
        if value is False:
            return cls.FAILURE
        if value is None:
            return cls.PASS
        if isinstance(value, str) and value.lower() == cls.QUIT.value:
            return cls.QUIT
        raise TypeError(f"Cannot interpret handler result {value!r} as a verdict")


class EventHandler(ABC):
    """Abstract interface for event handlers."""

    @property
    def name(self) -> str:
        """Handler name used in diagnostics"""
        return type(self).__name__

    @abstractmethod
    def applies_to(self, notification: EventNotification) -> bool:
        """Return True if this handler should handle the notification.

        Must not have side effects.
        """

    @abstractmethod
    def handle(
        self, notification: EventNotification, listener: "EventListener"
    ) -> Verdict:
        """Handle the notification and return a verdict.

        Args:
            notification: The decoded notification
            listener: The running listener, for ``log``/``send_busy``/
                ``send_acknowledged``

        Returns:
            The verdict for this cycle, or Verdict.PASS to defer
        """


class SubscriptionHandler(EventHandler):
    """Handler that applies to a fixed set of event types.

    Subclasses set ``events``; a parent type such as ``PROCESS_STATE``
    matches all of its subtypes.
    """

    events: Iterable[SupervisorEvent | str] = ()

    def subscriptions(self) -> frozenset[str]:
        events = self.events
        # A single event name given as a plain string.
        if isinstance(events, str):
            events = (events,)
        return frozenset(
            event.value if isinstance(event, SupervisorEvent) else str(event)
            for event in events
        )

    def applies_to(self, notification: EventNotification) -> bool:
        event_name = notification.event_name
        if event_name is None:
            return False
        return any(
            event_matches(subscription, event_name)
            for subscription in self.subscriptions()
        )
