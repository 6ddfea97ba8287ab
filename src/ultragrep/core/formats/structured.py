"""Structured formats: JSON objects and key=value records with a time field."""

from __future__ import annotations

import json
import shlex
from dataclasses import dataclass
from datetime import datetime

from .base import decode_line, parse_local_timestamp

TIME_KEY = "time"


@dataclass(frozen=True, slots=True)
class JsonFormat:
    """Parse JSON-lines records (one object per line) carrying a ``time`` field.

    When ``indent`` is set, matched records are rendered as indented JSON.
    """

    time_key: str = TIME_KEY
    indent: int | None = None

    def _load(self, raw: bytes) -> dict | None:
        s = raw.strip()
        if not (s.startswith(b"{") and s.endswith(b"}")):
            return None
        try:
            obj = json.loads(s)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        return obj if isinstance(obj, dict) else None

    def extract_timestamp(self, raw: bytes) -> datetime | None:
        obj = self._load(raw)
        if obj is None:
            return None
        value = obj.get(self.time_key)
        if not isinstance(value, str):
            return None
        return parse_local_timestamp(value)

    def render(self, raw: bytes) -> str:
        if self.indent is None:
            return decode_line(raw)
        obj = self._load(raw)
        if obj is None:
            return decode_line(raw)
        return json.dumps(obj, indent=self.indent, ensure_ascii=False)


@dataclass(frozen=True, slots=True)
class KeyValueFormat:
    """Parse logfmt-style ``key=value`` records; quoted values may contain spaces."""

    time_key: str = TIME_KEY

    def fields(self, raw: bytes) -> dict[str, str]:
        try:
            tokens = shlex.split(decode_line(raw), posix=True)
        except ValueError:
            return {}

        out: dict[str, str] = {}
        for token in tokens:
            if "=" not in token:
                continue
            key, value = token.split("=", 1)
            if key:
                out[key] = value
        return out

    def extract_timestamp(self, raw: bytes) -> datetime | None:
        value = self.fields(raw).get(self.time_key)
        if value is None:
            return None
        return parse_local_timestamp(value)

    def render(self, raw: bytes) -> str:
        return decode_line(raw)
