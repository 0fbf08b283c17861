"""Ordered registry of event handlers"""

from collections.abc import Iterable, Iterator
from typing import Any

from .adapters import as_handler
from .base import EventHandler


class HandlerRegistry:
    """Ordered, append-only collection of handlers.

    Dispatch walks the handlers in registration order, so the order in which
    they are registered is the order of precedence.
    """

    def __init__(self, handlers: Iterable[Any] = ()) -> None:
        self._handlers: list[EventHandler] = []
        self.extend(handlers)

    def register(self, handler: Any) -> None:
        """Append a handler, wrapping plain callables"""
        self._handlers.append(as_handler(handler))

    def extend(self, handlers: Iterable[Any]) -> None:
        for handler in handlers:
            self.register(handler)

    def names(self) -> list[str]:
        return [handler.name for handler in self._handlers]

    def __iter__(self) -> Iterator[EventHandler]:
        return iter(tuple(self._handlers))

    def __len__(self) -> int:
        return len(self._handlers)

    def __bool__(self) -> bool:
        return bool(self._handlers)
