"""Format interface and shared timestamp helpers."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "replace"


class LogFormat(Protocol):
    """Stateless capability bundle for one log shape.

    Implementations receive one raw record (a line, newline included or not) and must
    never raise on malformed input.
    """

    def extract_timestamp(self, raw: bytes) -> datetime | None:
        """Return the record's instant, or None when it carries no usable timestamp."""
        ...

    def render(self, raw: bytes) -> str:
        """Return the display text for a matched record."""
        ...


def parse_local_timestamp(value: str | bytes) -> datetime | None:
    """Parse ``YYYY-MM-DD HH:MM:SS`` as local wall-clock time.

    Returns a timezone-aware datetime, or None if the value is malformed.
    """
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="replace")
    try:
        naive = datetime.strptime(value.strip(), TIMESTAMP_FORMAT)
        # Dates near year 1 or 9999 can fall outside the representable range once
        # shifted by the local UTC offset.
        return naive.astimezone()
    except (ValueError, OverflowError, OSError):
        return None


def decode_line(raw: bytes) -> str:
    """Decode a raw record and strip its line terminator."""
    return raw.decode(TEXT_ENCODING, errors=TEXT_ERRORS).rstrip("\r\n")
