from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from ultragrep.core.errors import InvalidTimeFormat
from ultragrep.core.time_range import local_midnight, parse_time, resolve_time_range

NOW = datetime(2013, 1, 2, 15, 30, 0).astimezone()


def test_equivalent_start_forms_agree() -> None:
    midnight = datetime(2013, 1, 2).astimezone()
    epoch = str(int(midnight.timestamp()))
    starts = {
        resolve_time_range(s, now=NOW).start
        for s in (epoch, "2013-01-02", "2013-01-02 00:00:00", "20130102")
    }
    assert starts == {midnight}


def test_datetime_form_with_seconds() -> None:
    tr = resolve_time_range("2013-01-02 10:11:12", now=NOW)
    assert tr.start == datetime(2013, 1, 2, 10, 11, 12).astimezone()
    assert tr.start == parse_time(str(int(tr.start.timestamp())))


def test_default_start_is_local_midnight_and_end_is_now() -> None:
    tr = resolve_time_range(now=NOW)
    assert tr.start == datetime(2013, 1, 2).astimezone()
    assert tr.end == NOW


def test_local_midnight() -> None:
    assert local_midnight(NOW) == datetime(2013, 1, 2).astimezone()


def test_explicit_end() -> None:
    tr = resolve_time_range("2013-01-01", "2013-01-01 12:00:00", now=NOW)
    assert tr.end - tr.start == timedelta(hours=12)


def test_short_digit_strings_are_epoch_seconds() -> None:
    assert parse_time("12345678") == datetime.fromtimestamp(12345678).astimezone()
    assert parse_time("0") == datetime.fromtimestamp(0).astimezone()


@pytest.mark.parametrize(
    "value",
    ["yesterday", "2013-01-02T10:00:00", "2013-13-01", "2013/01/02", "20131332x", "", "2013-01-02 25:00:00"],
)
def test_invalid_start_is_rejected(value: str) -> None:
    with pytest.raises(InvalidTimeFormat) as exc:
        resolve_time_range(value or " ", now=NOW)
    assert "--start" in str(exc.value)


def test_invalid_end_names_argument() -> None:
    with pytest.raises(InvalidTimeFormat, match="--end"):
        resolve_time_range(None, "later", now=NOW)


def test_start_after_end_is_rejected() -> None:
    with pytest.raises(InvalidTimeFormat):
        resolve_time_range("2013-01-03", now=NOW)
