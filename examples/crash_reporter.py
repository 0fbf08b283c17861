#!/usr/bin/env python3
"""Example listener reporting unexpected process exits.

Configure it in supervisord.conf:

    [eventlistener:crash_reporter]
    command=python examples/crash_reporter.py
    events=PROCESS_STATE,TICK_3600
"""

from supervisor_listener import (
    EventListener,
    EventNotification,
    SubscriptionHandler,
    SupervisorEvent,
    Verdict,
)
from supervisor_listener.handlers.implementations import LoggingHandler


class CrashReporter(SubscriptionHandler):
    """Log unexpected exits and fail the event so supervisord buffers it."""

    events = (SupervisorEvent.PROCESS_STATE_EXITED,)

    def handle(self, notification: EventNotification, listener: EventListener) -> Verdict:
        fields, _ = notification.parse_payload()
        if fields.get("expected") == "1":
            return Verdict.SUCCESS

        listener.log(
            "Process exited unexpectedly",
            processname=fields.get("processname"),
            groupname=fields.get("groupname"),
            pid=fields.get("pid"),
        )
        return Verdict.FAILURE


def restart_hourly(listener: EventListener, notification: EventNotification) -> Verdict:
    # Let supervisord restart the listener once an hour
    if notification.event_name == SupervisorEvent.TICK_3600.value:
        listener.log("Hourly restart")
        return Verdict.QUIT
    return Verdict.PASS


def main() -> None:
    listener = EventListener([LoggingHandler(), CrashReporter()])
    listener.listen(restart_hourly)


if __name__ == "__main__":
    main()
