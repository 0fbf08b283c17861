"""Custom exceptions for the supervisor event listener."""

from typing import Any


class ListenerError(Exception):
    """Base exception for listener errors."""

    def __init__(
        self,
        message: str,
        error_type: str = "listener_error",
        fatal: bool = True,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.fatal = fatal
        self.details = details or {}


class ProtocolError(ListenerError):
    """Framing error; the input stream can no longer be trusted."""

    def __init__(
        self,
        message: str,
        error_type: str = "protocol_error",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message, error_type=error_type, fatal=True, details=details
        )


class MalformedHeaderError(ProtocolError):
    """Header line contains a token that is not a ``key:value`` pair."""

    def __init__(self, header: str, token: str) -> None:
        super().__init__(
            message=f"Malformed header token {token!r}",
            error_type="malformed_header",
            details={"header": header, "token": token},
        )
        self.header = header
        self.token = token


class MissingLengthFieldError(ProtocolError):
    """Header line has no ``len`` token."""

    def __init__(self, header: str) -> None:
        super().__init__(
            message="Header is missing the 'len' field",
            error_type="missing_length_field",
            details={"header": header},
        )
        self.header = header


class InvalidLengthFieldError(ProtocolError):
    """``len`` is not a non-negative integer."""

    def __init__(self, value: str, reason: str = "not a non-negative integer") -> None:
        super().__init__(
            message=f"Invalid 'len' field value {value!r}: {reason}",
            error_type="invalid_length_field",
            details={"value": value, "reason": reason},
        )
        self.value = value
        self.reason = reason


class StreamClosedError(ProtocolError):
    """Input stream reached end-of-file.

    ``mid_cycle`` is False when the peer closed the stream while the listener
    was waiting for a header line, True when a payload was cut short.
    """

    def __init__(
        self, message: str = "Input stream closed", mid_cycle: bool = False
    ) -> None:
        super().__init__(
            message=message,
            error_type="stream_closed",
            details={"mid_cycle": mid_cycle},
        )
        self.mid_cycle = mid_cycle


class HandlerFaultError(ListenerError):
    """A handler raised instead of returning a verdict."""

    def __init__(self, handler_name: str, cause: BaseException) -> None:
        super().__init__(
            message=f"Handler {handler_name!r} failed: {cause}",
            error_type="handler_fault",
            fatal=False,
            details={"handler": handler_name, "cause": type(cause).__name__},
        )
        self.handler_name = handler_name


class HandlerLoadError(ListenerError):
    """A handler import path could not be resolved."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(
            message=f"Cannot load handler {path!r}: {reason}",
            error_type="handler_load_error",
            details={"path": path},
        )
        self.path = path
