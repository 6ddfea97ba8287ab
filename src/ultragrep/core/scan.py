"""Scan engine: bounded forward scan from a seek offset."""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import datetime

import aiofiles

from .formats import LogFormat, decode_line
from .models import CandidateFile, MatchEvent
from .pattern import TermMatcher


async def scan_file(
    candidate: CandidateFile,
    offset: int,
    fmt: LogFormat,
    matcher: TermMatcher,
    *,
    end: datetime,
    start: datetime | None = None,
) -> AsyncIterator[MatchEvent]:
    """Yield matches from ``offset`` until EOF or the first record at/after ``end``.

    Records without a timestamp inherit the previous one. They are filtered against
    ``start`` with the inherited value but never end the scan.
    """
    async with aiofiles.open(candidate.path, "rb") as f:
        await f.seek(offset)
        current: datetime | None = None
        async for raw in f:
            ts = fmt.extract_timestamp(raw)
            if ts is not None:
                if ts >= end:
                    break
                current = ts

            if start is not None and current is not None and current < start:
                continue
            if not matcher.matches(decode_line(raw)):
                continue
            yield MatchEvent(file=candidate, timestamp=current, text=fmt.render(raw))
