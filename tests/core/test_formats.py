from __future__ import annotations

import json
from datetime import datetime

import pytest

from ultragrep.core.errors import UnknownFormat
from ultragrep.core.formats import (
    JsonFormat,
    KeyValueFormat,
    LineFormat,
    get_format,
    parse_local_timestamp,
)


def _local(*args: int) -> datetime:
    return datetime(*args).astimezone()


def test_line_format_extracts_at_marker() -> None:
    fmt = LineFormat()
    ts = fmt.extract_timestamp(b"Processing FooController#index at 2013-01-01 10:11:12\n")
    assert ts == _local(2013, 1, 1, 10, 11, 12)
    assert ts.tzinfo is not None


def test_line_format_marker_at_line_start() -> None:
    assert LineFormat().extract_timestamp(b"at 2013-01-01 00:00:01 boot") == _local(2013, 1, 1, 0, 0, 1)


def test_line_format_without_marker_has_no_timestamp() -> None:
    fmt = LineFormat()
    assert fmt.extract_timestamp(b"  Parameters: {\"id\"=>1}\n") is None
    assert fmt.extract_timestamp(b"2013-01-01 10:11:12 no marker\n") is None


def test_line_format_malformed_timestamp_is_tolerated() -> None:
    assert LineFormat().extract_timestamp(b"Processing at 2013-13-45 99:99:99\n") is None


def test_line_format_render_strips_newline() -> None:
    assert LineFormat().render(b"Processing xxx at 2013-01-01 10:11:12\r\n") == (
        "Processing xxx at 2013-01-01 10:11:12"
    )


def test_json_format_reads_time_field() -> None:
    raw = b'{"time":"2013-01-01 10:11:12","session":"f6add2:a51f27"}\n'
    assert JsonFormat().extract_timestamp(raw) == _local(2013, 1, 1, 10, 11, 12)


@pytest.mark.parametrize(
    "raw",
    [
        b"not json at all",
        b'{"time": 12345}',
        b'{"session": "abc"}',
        b'{"time": "yesterday"}',
        b'{"time": "2013-01-01 10:11:12"',
        b"[1, 2, 3]",
    ],
)
def test_json_format_bad_records_have_no_timestamp(raw: bytes) -> None:
    assert JsonFormat().extract_timestamp(raw) is None


def test_json_format_pretty_render() -> None:
    raw = b'{"time":"2013-01-01 10:11:12","session":"f6add2"}\n'
    out = JsonFormat(indent=4).render(raw)
    assert json.loads(out) == {"time": "2013-01-01 10:11:12", "session": "f6add2"}
    assert '\n    "session"' in out


def test_json_format_pretty_render_falls_back_to_raw() -> None:
    assert JsonFormat(indent=4).render(b"{broken\n") == "{broken"


def test_key_value_format() -> None:
    fmt = KeyValueFormat()
    raw = b'time="2013-01-01 10:11:12" level=error msg="boom happened"\n'
    assert fmt.extract_timestamp(raw) == _local(2013, 1, 1, 10, 11, 12)
    assert fmt.fields(raw)["msg"] == "boom happened"
    assert fmt.extract_timestamp(b'level=info msg="unterminated') is None


def test_parse_local_timestamp_rejects_garbage() -> None:
    assert parse_local_timestamp("2013-01-01T10:11:12") is None
    assert parse_local_timestamp(b"2013-01-01 10:11:12") == _local(2013, 1, 1, 10, 11, 12)


def test_registry_lookup() -> None:
    assert isinstance(get_format("app"), LineFormat)
    assert isinstance(get_format("work"), JsonFormat)
    assert isinstance(get_format("logfmt"), KeyValueFormat)


def test_registry_unknown_format() -> None:
    with pytest.raises(UnknownFormat, match="nginx"):
        get_format("nginx")


def test_out_of_range_local_timestamp_is_tolerated(tz_ahead_of_utc) -> None:
    assert parse_local_timestamp("0001-01-01 00:00:00") is None
    assert LineFormat().extract_timestamp(b"garbage at 0001-01-01 00:00:00\n") is None
    assert parse_local_timestamp("2013-01-01 00:00:00") == _local(2013, 1, 1)
