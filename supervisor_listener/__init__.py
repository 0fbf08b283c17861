"""Supervisord event listener protocol engine.

Reads event notifications on one byte stream, dispatches them to registered
handlers and reports each outcome on another.
"""

from ._version import __version__
from .exceptions import (
    HandlerFaultError,
    InvalidLengthFieldError,
    ListenerError,
    MalformedHeaderError,
    MissingLengthFieldError,
    ProtocolError,
    StreamClosedError,
)
from .handlers import (
    EventHandler,
    FunctionHandler,
    PredicateHandler,
    SubscriptionHandler,
    SupervisorEvent,
    Verdict,
)
from .listener import EventListener
from .notification import EventNotification, decode_notification


__all__ = [
    "EventHandler",
    "EventListener",
    "EventNotification",
    "FunctionHandler",
    "HandlerFaultError",
    "InvalidLengthFieldError",
    "ListenerError",
    "MalformedHeaderError",
    "MissingLengthFieldError",
    "PredicateHandler",
    "ProtocolError",
    "StreamClosedError",
    "SubscriptionHandler",
    "SupervisorEvent",
    "Verdict",
    "__version__",
    "decode_notification",
]
