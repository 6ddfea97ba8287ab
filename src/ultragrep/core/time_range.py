"""Time-range parsing helpers.

Turns the user's ``--start``/``--end`` strings into a local, timezone-aware
``[start, end)`` window.
"""

from __future__ import annotations

import re
from datetime import datetime, time

from .errors import InvalidTimeFormat
from .models import TimeRange

_EPOCH_RE = re.compile(r"^\d+$")
_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}(?: \d{2}:\d{2}:\d{2})?$")
_COMPACT_DATE_RE = re.compile(r"^\d{8}$")


def local_now() -> datetime:
    return datetime.now().astimezone()


def local_midnight(now: datetime) -> datetime:
    """Return local midnight of the day containing ``now``."""
    day = now.astimezone().date()
    return datetime.combine(day, time()).astimezone()


def _parse_compact_date(s: str) -> datetime | None:
    if not _COMPACT_DATE_RE.match(s):
        return None
    try:
        return datetime.strptime(s, "%Y%m%d")
    except ValueError:
        return None


def parse_time(value: str, *, argument: str = "--start") -> datetime:
    """Parse one time argument.

    Forms are tried in order: epoch seconds, ``YYYY-MM-DD[ HH:MM:SS]``, then compact
    ``YYYYMMDD`` (local midnight). An eight-digit string that is a valid calendar date
    is read as ``YYYYMMDD``; epoch values that short only cover 1970-1973.
    """
    s = value.strip()
    compact = _parse_compact_date(s)
    try:
        if _EPOCH_RE.match(s) and compact is None:
            return datetime.fromtimestamp(int(s)).astimezone()
        if _DATETIME_RE.match(s):
            fmt = "%Y-%m-%d %H:%M:%S" if " " in s else "%Y-%m-%d"
            return datetime.strptime(s, fmt).astimezone()
        if compact is not None:
            return compact.astimezone()
    except (ValueError, OverflowError, OSError) as exc:
        raise InvalidTimeFormat(value, argument=argument) from exc
    raise InvalidTimeFormat(value, argument=argument)


def resolve_time_range(
    start: str | None = None,
    end: str | None = None,
    *,
    now: datetime | None = None,
) -> TimeRange:
    """Resolve the effective search window.

    Priority: explicit start > local midnight of today. End defaults to ``now``.
    """
    now = (now or local_now()).astimezone()
    since = parse_time(start, argument="--start") if start else local_midnight(now)
    until = parse_time(end, argument="--end") if end else now

    if since > until:
        argument, value = ("--start", start) if start else ("--end", end or "")
        raise InvalidTimeFormat(
            value,
            argument=argument,
            reason=f"Invalid time window: {since:%Y-%m-%d %H:%M:%S} is after {until:%Y-%m-%d %H:%M:%S}",
        )
    return TimeRange(start=since, end=until)
