"""Lookup of log formats by identifier."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from ..errors import UnknownFormat
from .base import LogFormat
from .line import LineFormat
from .structured import JsonFormat, KeyValueFormat

_LINE = LineFormat()
_JSON = JsonFormat()
_KV = KeyValueFormat()

FORMATS: Mapping[str, LogFormat] = MappingProxyType(
    {
        "app": _LINE,
        "line": _LINE,
        "json": _JSON,
        "work": _JSON,
        "json-pretty": JsonFormat(indent=4),
        "kv": _KV,
        "logfmt": _KV,
    }
)


def get_format(name: str) -> LogFormat:
    """Return the format registered under ``name``."""
    try:
        return FORMATS[name]
    except KeyError:
        raise UnknownFormat(name, sorted(FORMATS)) from None
