"""Event type names emitted by supervisord."""

from enum import Enum


class SupervisorEvent(str, Enum):
    """Event types a listener can subscribe to"""

    # Base type, every event is a subtype of it
    EVENT = "EVENT"

    # Process state changes
    PROCESS_STATE = "PROCESS_STATE"
    PROCESS_STATE_STOPPED = "PROCESS_STATE_STOPPED"
    PROCESS_STATE_EXITED = "PROCESS_STATE_EXITED"
    PROCESS_STATE_STARTING = "PROCESS_STATE_STARTING"
    PROCESS_STATE_STOPPING = "PROCESS_STATE_STOPPING"
    PROCESS_STATE_BACKOFF = "PROCESS_STATE_BACKOFF"
    PROCESS_STATE_FATAL = "PROCESS_STATE_FATAL"
    PROCESS_STATE_RUNNING = "PROCESS_STATE_RUNNING"
    PROCESS_STATE_UNKNOWN = "PROCESS_STATE_UNKNOWN"

    # Process output
    PROCESS_LOG = "PROCESS_LOG"
    PROCESS_LOG_STDOUT = "PROCESS_LOG_STDOUT"
    PROCESS_LOG_STDERR = "PROCESS_LOG_STDERR"
    PROCESS_COMMUNICATION = "PROCESS_COMMUNICATION"
    PROCESS_COMMUNICATION_STDOUT = "PROCESS_COMMUNICATION_STDOUT"
    PROCESS_COMMUNICATION_STDERR = "PROCESS_COMMUNICATION_STDERR"
    REMOTE_COMMUNICATION = "REMOTE_COMMUNICATION"

    # Group and daemon lifecycle
    PROCESS_GROUP = "PROCESS_GROUP"
    PROCESS_GROUP_ADDED = "PROCESS_GROUP_ADDED"
    PROCESS_GROUP_REMOVED = "PROCESS_GROUP_REMOVED"
    SUPERVISOR_STATE_CHANGE = "SUPERVISOR_STATE_CHANGE"
    SUPERVISOR_STATE_CHANGE_RUNNING = "SUPERVISOR_STATE_CHANGE_RUNNING"
    SUPERVISOR_STATE_CHANGE_STOPPING = "SUPERVISOR_STATE_CHANGE_STOPPING"

    # Timers
    TICK = "TICK"
    TICK_5 = "TICK_5"
    TICK_60 = "TICK_60"
    TICK_3600 = "TICK_3600"


def event_matches(subscription: str, event_name: str) -> bool:
    """Return True when ``event_name`` is ``subscription`` or one of its subtypes.

    Subtypes share the parent name as an underscore separated prefix,
    e.g. ``PROCESS_STATE`` covers ``PROCESS_STATE_EXITED``.
    """
    if subscription == SupervisorEvent.EVENT.value:
        return True
    return event_name == subscription or event_name.startswith(subscription + "_")
