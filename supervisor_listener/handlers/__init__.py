"""Event handlers for the supervisor listener.

Key components:
- Verdict: Outcome of handling a notification
- EventHandler: Abstract handler interface
- SubscriptionHandler: Handler applying to a fixed set of event types
- PredicateHandler / FunctionHandler: Handlers built from callables
- HandlerRegistry: Ordered handler collection
- SupervisorEvent: Event type names emitted by supervisord
"""

from .adapters import FunctionHandler, PredicateHandler, as_handler
from .base import EventHandler, SubscriptionHandler, Verdict
from .events import SupervisorEvent, event_matches
from .registry import HandlerRegistry


__all__ = [
    "EventHandler",
    "FunctionHandler",
    "HandlerRegistry",
    "PredicateHandler",
    "SubscriptionHandler",
    "SupervisorEvent",
    "Verdict",
    "as_handler",
    "event_matches",
]
