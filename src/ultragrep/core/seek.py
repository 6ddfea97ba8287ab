"""Seek engine: binary search for the first record at or after a start instant.

The returned offset may be early, never late: scanning forward from it cannot skip a
record whose timestamp is ``>= start`` as long as timestamps in the file are
non-decreasing.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any

import aiofiles

from .formats import LogFormat
from .index import index_bounds, load_index

LOGGER = logging.getLogger(__name__)

SEEK_THRESHOLD = 4096  # stop bisecting below this many bytes
PROBE_WINDOW = 16 * 1024  # bytes read forward per probe
BACKSCAN_CHUNK = 4096


async def find_record_start(f: Any, offset: int) -> int:
    """Return the start of the line containing ``offset`` in an async binary file.

    An offset that already sits on a line start is returned unchanged.
    """
    pos = offset
    while pos > 0:
        chunk_start = max(0, pos - BACKSCAN_CHUNK)
        await f.seek(chunk_start)
        buf = await f.read(pos - chunk_start)
        nl = buf.rfind(b"\n")
        if nl >= 0:
            return chunk_start + nl + 1
        pos = chunk_start
    return 0


async def _probe(
    f: Any, fmt: LogFormat, pos: int, limit: int, size: int
) -> tuple[int, int, datetime] | None:
    """Find the first timestamped record starting in ``[pos, limit)``.

    Returns ``(record_start, next_record_start, timestamp)``, or None when the probe
    window holds no timestamped record.
    """
    if pos > 0:
        await f.seek(pos - 1)
        buf = await f.read(PROBE_WINDOW + 1)
        nl = buf.find(b"\n")
        if nl < 0:
            return None
        base = pos + nl
        buf = buf[nl + 1 :]
    else:
        await f.seek(0)
        buf = await f.read(PROBE_WINDOW)
        base = 0

    cursor = 0
    while cursor < len(buf) and base + cursor < limit:
        nl = buf.find(b"\n", cursor)
        if nl < 0:
            if base + len(buf) < size:
                return None  # record runs past the window
            line, next_start = buf[cursor:], size
        else:
            line, next_start = buf[cursor : nl + 1], base + nl + 1

        ts = fmt.extract_timestamp(line)
        if ts is not None:
            return base + cursor, next_start, ts
        if nl < 0:
            return None
        cursor = nl + 1
    return None


async def seek_offset(
    path: str | Path,
    fmt: LogFormat,
    start: datetime,
    *,
    use_index: bool = True,
) -> int:
    """Return a byte offset from which scanning finds every record ``>= start``."""
    entries = await load_index(path) if use_index else []

    async with aiofiles.open(path, "rb") as f:
        size = await f.seek(0, os.SEEK_END)
        lo, hi = index_bounds(entries, start, size)
        # Start of the last record seen older than ``start``. Scanning from it lets its
        # untimestamped continuation lines inherit a timestamp and be filtered out.
        older: int | None = None

        # Invariant: every record starting before ``lo`` is older than ``start``.
        while hi - lo > SEEK_THRESHOLD:
            mid = (lo + hi) // 2
            probe = await _probe(f, fmt, mid, hi, size)
            if probe is None:
                # Unknown timestamps are assumed to be inside the window.
                hi = mid
                continue
            rec_start, next_start, ts = probe
            if ts < start:
                lo = next_start
                older = rec_start
            else:
                hi = mid

        if older is not None:
            offset = older
        else:
            offset = await find_record_start(f, min(lo, size))

    LOGGER.debug("Seek %s -> offset %d of %d (index=%s)", path, offset, size, bool(entries))
    return offset
