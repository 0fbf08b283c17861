"""Event listener protocol loop.

The listener talks to supervisord over two byte streams. Each cycle it
announces ``READY``, blocks for a header line, reads the length-prefixed
payload, dispatches the notification to the first handler that decides it
and answers ``RESULT 2\\nOK`` or ``RESULT 4\\nFAIL``. Nothing but that fixed
vocabulary is ever written to the output stream; diagnostics go to the
error stream.
"""

import sys
from collections.abc import Callable, Iterable
from typing import Any, BinaryIO, TextIO

from supervisor_listener.diagnostics import DEFAULT_PROCESS_TAG, DiagnosticLogger
from supervisor_listener.exceptions import HandlerFaultError, StreamClosedError
from supervisor_listener.handlers import (
    EventHandler,
    FunctionHandler,
    HandlerRegistry,
    Verdict,
)
from supervisor_listener.notification import EventNotification, decode_notification


__all__ = ["EventListener"]

READY = "READY"
BUSY = "BUSY"
ACKNOWLEDGED = "ACKNOWLEDGED"
RESULT_OK = "OK"
RESULT_FAIL = "FAIL"


class EventListener:
    """Reads supervisord notifications and dispatches them to handlers.

    Streams default to the process standard streams only when not given, so
    the loop can run against in-memory buffers.
    """

    def __init__(
        self,
        handlers: Iterable[Any] = (),
        *,
        input_stream: BinaryIO | None = None,
        output_stream: BinaryIO | None = None,
        error_stream: TextIO | None = None,
        process_tag: str = DEFAULT_PROCESS_TAG,
        json_diagnostics: bool = False,
        log_level: str = "INFO",
        raise_handler_faults: bool = False,
    ) -> None:
        """Initialize the listener.

        Args:
            handlers: Handlers in order of precedence; callables are wrapped
                in FunctionHandler
            input_stream: Binary stream notifications are read from
            output_stream: Binary stream protocol responses are written to
            error_stream: Text stream for diagnostics
            process_tag: Tag prefixed to every diagnostic line
            json_diagnostics: Render diagnostics as JSON lines
            log_level: Minimum level written to the error stream
            raise_handler_faults: Re-raise handler exceptions as
                HandlerFaultError instead of answering FAIL
        """
        self.input_stream = (
            input_stream if input_stream is not None else sys.stdin.buffer
        )
        self.output_stream = (
            output_stream if output_stream is not None else sys.stdout.buffer
        )
        self.error_stream = error_stream if error_stream is not None else sys.stderr
        self.raise_handler_faults = raise_handler_faults
        self.handlers = HandlerRegistry(handlers)
        self.diagnostics = DiagnosticLogger(
            self.error_stream,
            process_tag=process_tag,
            json_format=json_diagnostics,
            level=log_level,
        )
        self.cycles = 0
        self._callbacks: list[Callable[..., Any]] = []

    @property
    def process_tag(self) -> str:
        return self.diagnostics.process_tag

    def add_handler(self, handler: Any) -> None:
        self.handlers.register(handler)

    def listen(
        self, callback: Callable[["EventListener", EventNotification], Any] | None = None
    ) -> None:
        """Run protocol cycles until a handler returns Verdict.QUIT.

        Args:
            callback: Optional ``(listener, notification)`` callable appended
                to the handlers as a FunctionHandler. A callback already
                registered by an earlier call is not added again.

        Raises:
            ProtocolError: On framing errors or end of input; the stream
                cannot be resynchronized, so the listener must exit
            HandlerFaultError: If a handler fails and raise_handler_faults
                is set
        """
        if callback is not None and callback not in self._callbacks:
            self._callbacks.append(callback)
            self.add_handler(FunctionHandler(callback))

        self.diagnostics.debug("listener_started", handlers=len(self.handlers))
        while True:
            self.send_ready()
            notification = self._next_notification()

            verdict = self.dispatch(notification)
            self.cycles += 1
            self.diagnostics.debug(
                "cycle_completed",
                event_name=notification.event_name,
                verdict=verdict.value,
                cycle=self.cycles,
            )

            if verdict is Verdict.QUIT:
                self.diagnostics.debug("listener_stopped", cycles=self.cycles)
                return
            if verdict is Verdict.FAILURE:
                self.send_fail()
            else:
                self.send_complete()

    def _next_notification(self) -> EventNotification:
        # Blank lines are padding, not notifications; READY was already sent.
        while True:
            line = self.read_line()
            if line.strip():
                return decode_notification(line, self.input_stream)

    def dispatch(self, notification: EventNotification) -> Verdict:
        """Return the verdict of the first handler that decides the notification.

        Handlers are tried in registration order. Handlers that do not apply
        are skipped and Verdict.PASS defers to the next one. When no handler
        decides, the verdict is Verdict.SUCCESS.
        """
        for handler in self.handlers:
            try:
                if not handler.applies_to(notification):
                    continue
                verdict = Verdict.coerce(handler.handle(notification, self))
            except Exception as e:
                return self._handler_fault(handler, notification, e)

            if verdict is not Verdict.PASS:
                return verdict
        return Verdict.SUCCESS

    def _handler_fault(
        self, handler: EventHandler, notification: EventNotification, error: Exception
    ) -> Verdict:
        if self.raise_handler_faults:
            raise HandlerFaultError(handler.name, error) from error

        self.diagnostics.exception(
            f"Handler {handler.name} failed",
            event_name=notification.event_name,
            error=str(error),
        )
        return Verdict.FAILURE

    def log(self, message: str, **context: Any) -> None:
        """Write a timestamped line to the error stream"""
        self.diagnostics.log(message, **context)

    def read_line(self) -> str:
        """Read one header line.

        Raises:
            StreamClosedError: If the input stream is at end of file
        """
        line = self.input_stream.readline()
        if not line:
            raise StreamClosedError(mid_cycle=False)
        return line.decode("utf-8", errors="replace")

    def send_ready(self) -> None:
        """Tell supervisord notifications may be sent"""
        self._write(f"{READY}\n")

    def send_busy(self) -> None:
        """Tell supervisord notifications may not be sent"""
        self._write(f"{BUSY}\n")

    def send_acknowledged(self) -> None:
        """Tell supervisord the last event send was accepted or rejected"""
        self._write(f"{ACKNOWLEDGED}\n")

    def send_complete(self) -> None:
        self.send_result(RESULT_OK)

    def send_fail(self) -> None:
        self.send_result(RESULT_FAIL)

    def send_result(self, body: str) -> None:
        """Write ``RESULT <n>\\n<body>`` where n is the byte length of body."""
        encoded = body.encode("utf-8")
        self.output_stream.write(f"RESULT {len(encoded)}\n".encode() + encoded)
        self.output_stream.flush()

    def _write(self, text: str) -> None:
        self.output_stream.write(text.encode("utf-8"))
        self.output_stream.flush()
