"""Event notification model and decoder.

A notification arrives as one header line of whitespace separated
``key:value`` tokens followed by exactly ``len`` bytes of payload. The
payload read must be byte exact, otherwise every following header line is
read from the wrong offset.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, BinaryIO

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from supervisor_listener.exceptions import (
    InvalidLengthFieldError,
    MalformedHeaderError,
    MissingLengthFieldError,
    StreamClosedError,
)


__all__ = [
    "MAX_PAYLOAD_LENGTH",
    "EventNotification",
    "decode_notification",
    "parse_header",
    "parse_length",
    "read_exact",
    "serialize_header",
]

LENGTH_FIELD = "len"

# Upper bound for a declared payload length. supervisord payloads are a
# header line plus captured output, far below this.
MAX_PAYLOAD_LENGTH = 64 * 1024 * 1024
READ_CHUNK_SIZE = 65536


class EventNotification(BaseModel):
    """One inbound event: header fields plus the raw payload block."""

    model_config = ConfigDict(frozen=True)

    raw_header: str = Field(description="Header line as received, trimmed")
    headers: Mapping[str, str] = Field(
        default_factory=dict, description="Parsed header key/value pairs, read-only"
    )
    payload: bytes = Field(default=b"", description="Exactly 'len' payload bytes")

    @field_validator("headers", mode="after")
    @classmethod
    def freeze_headers(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("headers")
    def serialize_headers(self, value: Mapping[str, str]) -> dict[str, Any]:
        return dict(value)

    @property
    def event_name(self) -> str | None:
        return self.headers.get("eventname")

    @property
    def length(self) -> int:
        return len(self.payload)

    @property
    def payload_text(self) -> str:
        return self.payload.decode("utf-8", errors="replace")

    def parse_payload(self) -> tuple[dict[str, str], str]:
        """Split the payload into its ``key:value`` line and trailing body.

        Events such as ``PROCESS_COMMUNICATION_STDOUT`` carry a token line,
        a newline and free-form data. The body is empty for events without
        one. Tokens lacking a colon are ignored here since the payload is
        not part of the framing.
        """
        text = self.payload_text
        if "\n" in text:
            line, body = text.split("\n", 1)
        else:
            line, body = text, ""

        fields: dict[str, str] = {}
        for token in line.split():
            key, sep, value = token.partition(":")
            if sep:
                fields[key] = value
        return fields, body


def parse_header(line: str) -> dict[str, str]:
    """Parse a header line into a dict.

    Duplicate keys overwrite earlier ones. A token without a colon, or with an
    empty key, raises MalformedHeaderError.
    """
    headers: dict[str, str] = {}
    for token in line.split():
        key, sep, value = token.partition(":")
        if not sep or not key:
            raise MalformedHeaderError(line, token)
        headers[key] = value
    return headers


def serialize_header(headers: Mapping[str, str]) -> str:
    """Render header fields back into a header line (no trailing newline)."""
    return " ".join(f"{key}:{value}" for key, value in headers.items())


def parse_length(headers: Mapping[str, str], raw_header: str = "") -> int:
    """Return the payload length declared by the ``len`` header field.

    The value must be ASCII digits and at most MAX_PAYLOAD_LENGTH.
    """
    if LENGTH_FIELD not in headers:
        raise MissingLengthFieldError(raw_header)

    value = headers[LENGTH_FIELD]
    if not value.isascii() or not value.isdigit():
        raise InvalidLengthFieldError(value)

    # Digit count first so very long values never reach int().
    digits = value.lstrip("0")
    if len(digits) > len(str(MAX_PAYLOAD_LENGTH)) or int(value) > MAX_PAYLOAD_LENGTH:
        raise InvalidLengthFieldError(
            value, reason=f"exceeds maximum of {MAX_PAYLOAD_LENGTH} bytes"
        )
    return int(value)


def read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes in bounded chunks, looping over short reads.

    Raises:
        StreamClosedError: If the stream ends before ``size`` bytes arrive
    """
    chunks: list[bytes] = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(min(remaining, READ_CHUNK_SIZE))
        if not chunk:
            raise StreamClosedError(
                f"Input stream closed after {size - remaining} of {size} payload bytes",
                mid_cycle=True,
            )
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def decode_notification(line: str, stream: BinaryIO) -> EventNotification:
    """Build a notification from a header line and the stream positioned after it.

    Args:
        line: Header line with the trailing newline already removed
        stream: Binary input stream; exactly ``len`` bytes are consumed

    Returns:
        The decoded notification

    Raises:
        MalformedHeaderError: If a header token is not ``key:value``
        MissingLengthFieldError: If there is no ``len`` field
        InvalidLengthFieldError: If ``len`` is not a non-negative integer within
            MAX_PAYLOAD_LENGTH
        StreamClosedError: If the payload is cut short
    """
    raw_header = line.strip()
    headers = parse_header(raw_header)
    size = parse_length(headers, raw_header)
    payload = read_exact(stream, size)
    return EventNotification(raw_header=raw_header, headers=headers, payload=payload)
