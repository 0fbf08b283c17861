"""Tests for header parsing and notification decoding."""

import io

import pytest
from pydantic import ValidationError

from supervisor_listener.exceptions import (
    InvalidLengthFieldError,
    MalformedHeaderError,
    MissingLengthFieldError,
    StreamClosedError,
)
from supervisor_listener.notification import (
    MAX_PAYLOAD_LENGTH,
    READ_CHUNK_SIZE,
    EventNotification,
    decode_notification,
    parse_header,
    parse_length,
    read_exact,
    serialize_header,
)
from tests.helpers.protocol import TrickleStream


HEADER = (
    "ver:3.0 server:supervisor serial:21 pool:mypool poolserial:10 "
    "eventname:PROCESS_STATE_EXITED len:0"
)


@pytest.mark.unit
class TestParseHeader:
    """Test parse_header function."""

    def test_parses_supervisor_header(self) -> None:
        headers = parse_header(HEADER)
        assert headers == {
            "ver": "3.0",
            "server": "supervisor",
            "serial": "21",
            "pool": "mypool",
            "poolserial": "10",
            "eventname": "PROCESS_STATE_EXITED",
            "len": "0",
        }

    def test_splits_on_first_colon_only(self) -> None:
        assert parse_header("url:http://host:9001 len:0")["url"] == "http://host:9001"

    def test_empty_value_allowed(self) -> None:
        assert parse_header("groupname: len:0")["groupname"] == ""

    def test_duplicate_keys_last_wins(self) -> None:
        assert parse_header("a:1 a:2 len:0")["a"] == "2"

    def test_extra_whitespace_ignored(self) -> None:
        assert parse_header("  a:1 \t b:2   len:3 ") == {"a": "1", "b": "2", "len": "3"}

    def test_token_without_colon_is_malformed(self) -> None:
        with pytest.raises(MalformedHeaderError) as exc_info:
            parse_header("ver:3.0 garbage len:0")
        assert exc_info.value.token == "garbage"
        assert exc_info.value.fatal is True

    def test_empty_key_is_malformed(self) -> None:
        with pytest.raises(MalformedHeaderError):
            parse_header(":value len:0")

    def test_does_not_require_known_keys(self) -> None:
        assert parse_header("len:4") == {"len": "4"}

    @pytest.mark.parametrize(
        "headers",
        [
            {"len": "0"},
            {"ver": "3.0", "eventname": "TICK_5", "len": "15"},
            {"url": "http://x:1/", "empty": "", "len": "2"},
        ],
    )
    def test_serialize_then_parse_recovers_fields(self, headers: dict[str, str]) -> None:
        assert parse_header(serialize_header(headers)) == headers


@pytest.mark.unit
class TestParseLength:
    """Test parse_length function."""

    def test_valid_length(self) -> None:
        assert parse_length({"len": "54"}) == 54

    def test_zero_length(self) -> None:
        assert parse_length({"len": "0"}) == 0

    def test_missing_length(self) -> None:
        with pytest.raises(MissingLengthFieldError):
            parse_length({"ver": "3.0"}, "ver:3.0")

    @pytest.mark.parametrize("value", ["", "-1", "abc", "1.5", "+3", "٣"])
    def test_invalid_length(self, value: str) -> None:
        with pytest.raises(InvalidLengthFieldError) as exc_info:
            parse_length({"len": value})
        assert exc_info.value.value == value

    def test_maximum_length_accepted(self) -> None:
        assert parse_length({"len": str(MAX_PAYLOAD_LENGTH)}) == MAX_PAYLOAD_LENGTH

    def test_leading_zeros_accepted(self) -> None:
        assert parse_length({"len": "0000000000000000042"}) == 42

    @pytest.mark.parametrize(
        "value",
        [str(MAX_PAYLOAD_LENGTH + 1), "99999999999999999999", "9" * 5000],
    )
    def test_length_above_maximum(self, value: str) -> None:
        with pytest.raises(InvalidLengthFieldError) as exc_info:
            parse_length({"len": value})
        assert "exceeds maximum" in exc_info.value.reason


@pytest.mark.unit
class TestReadExact:
    """Test read_exact function."""

    def test_reads_requested_bytes_only(self) -> None:
        stream = io.BytesIO(b"abcdefgh")
        assert read_exact(stream, 3) == b"abc"
        assert stream.read() == b"defgh"

    def test_zero_bytes_does_not_touch_stream(self) -> None:
        stream = TrickleStream(b"abc")
        assert read_exact(stream, 0) == b""
        assert stream.read_calls == 0

    def test_loops_over_short_reads(self) -> None:
        stream = TrickleStream(b"processname:cat extra", chunk=2)
        assert read_exact(stream, 15) == b"processname:cat"
        assert stream.remaining() == b" extra"

    def test_large_read_uses_bounded_chunks(self) -> None:
        data = b"x" * (READ_CHUNK_SIZE * 3 + 7)
        stream = TrickleStream(data, chunk=len(data))

        assert read_exact(stream, len(data)) == data
        assert max(stream.requested) == READ_CHUNK_SIZE
        assert stream.read_calls == 4

    def test_short_stream_raises_mid_cycle(self) -> None:
        with pytest.raises(StreamClosedError) as exc_info:
            read_exact(io.BytesIO(b"abc"), 10)
        assert exc_info.value.mid_cycle is True


@pytest.mark.unit
class TestDecodeNotification:
    """Test decode_notification function."""

    def test_empty_payload(self) -> None:
        notification = decode_notification(HEADER, io.BytesIO(b""))
        assert notification.payload == b""
        assert notification.event_name == "PROCESS_STATE_EXITED"
        assert notification.raw_header == HEADER

    def test_strips_trailing_newline(self) -> None:
        notification = decode_notification(HEADER + "\n", io.BytesIO(b""))
        assert notification.raw_header == HEADER

    def test_payload_that_looks_like_a_header(self) -> None:
        payload = b"ver:3.0 len:5\nhello"
        stream = io.BytesIO(payload + b"NEXT")
        notification = decode_notification(f"len:{len(payload)}", stream)
        assert notification.payload == payload
        assert stream.read() == b"NEXT"

    def test_payload_bytes_are_not_decoded(self) -> None:
        payload = "data:café".encode()
        notification = decode_notification(
            f"eventname:PROCESS_LOG_STDOUT len:{len(payload)}", io.BytesIO(payload)
        )
        assert notification.payload == payload
        assert notification.length == len(payload)
        assert notification.payload_text == "data:café"

    def test_malformed_header_reads_nothing(self) -> None:
        stream = io.BytesIO(b"payload")
        with pytest.raises(MalformedHeaderError):
            decode_notification("ver:3.0 oops len:7", stream)
        assert stream.read() == b"payload"


@pytest.mark.unit
class TestEventNotification:
    """Test EventNotification model."""

    def test_is_immutable(self) -> None:
        notification = EventNotification(raw_header="len:0", headers={"len": "0"})
        with pytest.raises(ValidationError):
            notification.payload = b"changed"  # type: ignore[misc]

    def test_headers_are_read_only(self) -> None:
        notification = EventNotification(
            raw_header="", headers={"eventname": "TICK_5", "len": "0"}
        )
        with pytest.raises(TypeError):
            notification.headers["eventname"] = "TICK_60"  # type: ignore[index]
        assert notification.event_name == "TICK_5"

    def test_headers_copied_from_input(self) -> None:
        headers = {"eventname": "TICK_5", "len": "0"}
        notification = EventNotification(raw_header="", headers=headers)
        headers["eventname"] = "TICK_60"

        assert notification.event_name == "TICK_5"
        assert notification.model_dump()["headers"] == {"eventname": "TICK_5", "len": "0"}

    def test_event_name_missing(self) -> None:
        notification = EventNotification(raw_header="len:0", headers={"len": "0"})
        assert notification.event_name is None

    def test_parse_payload_token_line(self) -> None:
        payload = b"processname:cat groupname:cat from_state:RUNNING expected:0 pid:2766"
        notification = EventNotification(
            raw_header="", headers={}, payload=payload
        )
        fields, body = notification.parse_payload()
        assert fields == {
            "processname": "cat",
            "groupname": "cat",
            "from_state": "RUNNING",
            "expected": "0",
            "pid": "2766",
        }
        assert body == ""

    def test_parse_payload_with_body(self) -> None:
        payload = b"processname:foo groupname:bar pid:123 channel:stdout\nline one\nline two"
        notification = EventNotification(raw_header="", headers={}, payload=payload)
        fields, body = notification.parse_payload()
        assert fields["channel"] == "stdout"
        assert body == "line one\nline two"
