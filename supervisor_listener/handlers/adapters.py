"""Concrete handlers built from plain callables."""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from supervisor_listener.handlers.base import EventHandler, Verdict
from supervisor_listener.notification import EventNotification


if TYPE_CHECKING:
    from supervisor_listener.listener import EventListener


Predicate = Callable[[EventNotification], bool]
HandleFunc = Callable[[EventNotification, "EventListener"], Any]
ListenerCallback = Callable[["EventListener", EventNotification], Any]


class PredicateHandler(EventHandler):
    """Handler composed from a predicate and a handle function."""

    def __init__(
        self, predicate: Predicate, handle: HandleFunc, name: str | None = None
    ) -> None:
        self._predicate = predicate
        self._handle = handle
        self._name = name or getattr(handle, "__name__", type(self).__name__)

    @property
    def name(self) -> str:
        return self._name

    def applies_to(self, notification: EventNotification) -> bool:
        return bool(self._predicate(notification))

    def handle(
        self, notification: EventNotification, listener: "EventListener"
    ) -> Verdict:
        return Verdict.coerce(self._handle(notification, listener))


class FunctionHandler(EventHandler):
    """Adapter that turns a ``(listener, notification)`` callable into a handler.

    The wrapped function applies to every notification. Its return value is
    passed through Verdict.coerce, so ``True``/``False``/``"quit"`` work as
    well as Verdict members.
    """

    def __init__(self, func: ListenerCallback, name: str | None = None) -> None:
        self._func = func
        self._name = name or getattr(func, "__name__", type(self).__name__)

    @property
    def name(self) -> str:
        return self._name

    def applies_to(self, notification: EventNotification) -> bool:
        return True

    def handle(
        self, notification: EventNotification, listener: "EventListener"
    ) -> Verdict:
        return Verdict.coerce(self._func(listener, notification))


def as_handler(obj: Any) -> EventHandler:
    """Normalize a handler instance, handler class or callable into a handler.

    Raises:
        TypeError: If ``obj`` is none of those
    """
    if isinstance(obj, EventHandler):
        return obj
    if isinstance(obj, type):
        if issubclass(obj, EventHandler):
            return obj()
        raise TypeError(f"{obj.__name__} is not an EventHandler subclass")
    if callable(obj):
        return FunctionHandler(obj)
    raise TypeError(f"Cannot use {obj!r} as an event handler")
