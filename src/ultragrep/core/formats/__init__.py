"""Log formats understood by the search engine.

Each format knows how to pull a timestamp out of a raw record and how to render a
matched record for display.
"""

from __future__ import annotations

from .base import LogFormat, decode_line, parse_local_timestamp
from .line import LineFormat
from .registry import FORMATS, get_format
from .structured import JsonFormat, KeyValueFormat

__all__ = [
    "FORMATS",
    "JsonFormat",
    "KeyValueFormat",
    "LineFormat",
    "LogFormat",
    "decode_line",
    "get_format",
    "parse_local_timestamp",
]
