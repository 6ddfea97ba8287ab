"""Line format: one record per line, timestamp after an ``at`` marker."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from .base import decode_line, parse_local_timestamp

_AT_RE = re.compile(rb"(?:^|\s)at (?P<ts>\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2})")


@dataclass(frozen=True, slots=True)
class LineFormat:
    """Parse lines such as ``Processing FooController#index at 2013-01-01 10:00:00``."""

    def extract_timestamp(self, raw: bytes) -> datetime | None:
        m = _AT_RE.search(raw)
        if not m:
            return None
        return parse_local_timestamp(m.group("ts"))

    def render(self, raw: bytes) -> str:
        return decode_line(raw)
