"""Sidecar timestamp index for log shards.

An index file ``<log>.idx`` holds little-endian ``(bucket_epoch, byte_offset)`` pairs.
Each pair points at the first record whose timestamp floors to ``bucket_epoch``, so a
seek can start from a known-safe offset instead of the top of the file.
"""

from __future__ import annotations

import bisect
import logging
import os
import struct
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

import aiofiles

from .formats import LogFormat

LOGGER = logging.getLogger(__name__)

INDEX_SUFFIX = ".idx"
INDEX_EVERY = 10  # seconds per bucket
_ENTRY = struct.Struct("<qQ")

IndexEntry = tuple[int, int]


def index_path(log_path: str | Path) -> Path:
    return Path(f"{log_path}{INDEX_SUFFIX}")


def _bucket(ts: datetime) -> int:
    epoch = int(ts.timestamp())
    return epoch - (epoch % INDEX_EVERY)


async def load_index(log_path: str | Path) -> list[IndexEntry]:
    """Return index entries for ``log_path``, or [] when absent or unusable."""
    idx = index_path(log_path)
    try:
        async with aiofiles.open(idx, "rb") as f:
            data = await f.read()
        size = os.path.getsize(log_path)
    except FileNotFoundError:
        return []
    except OSError as exc:
        LOGGER.warning("Ignoring unreadable index %s: %s", idx, exc.strerror or exc)
        return []

    if len(data) % _ENTRY.size:
        LOGGER.warning("Ignoring corrupt index %s", idx)
        return []

    entries = [_ENTRY.unpack_from(data, i) for i in range(0, len(data), _ENTRY.size)]
    if any(off > size for _, off in entries):
        LOGGER.warning("Ignoring stale index %s (offsets past end of log)", idx)
        return []
    return entries


def index_bounds(entries: Sequence[IndexEntry], start: datetime, size: int) -> tuple[int, int]:
    """Narrow the search window for ``start`` using index entries.

    Records before the low bound are older than ``start``; records from the high bound
    on are newer than it.
    """
    if not entries:
        return 0, size
    epoch = start.timestamp()
    buckets = [b for b, _ in entries]
    pos = bisect.bisect_right(buckets, epoch)
    lo = entries[pos - 1][1] if pos > 0 else 0
    hi = entries[pos][1] if pos < len(entries) else size
    return lo, max(lo, hi)


async def build_index(log_path: str | Path, fmt: LogFormat) -> int:
    """Create or extend the index for ``log_path``; return the number of entries."""
    path = Path(log_path)
    entries = await load_index(path)

    # The last bucket may have been cut short by a previous run; rebuild from it.
    resume = entries.pop()[1] if entries else 0
    last_bucket = entries[-1][0] if entries else None

    async with aiofiles.open(path, "rb") as f:
        await f.seek(resume)
        offset = resume
        async for raw in f:
            ts = fmt.extract_timestamp(raw)
            if ts is not None:
                bucket = _bucket(ts)
                if last_bucket is None or bucket > last_bucket:
                    entries.append((bucket, offset))
                    last_bucket = bucket
            offset += len(raw)

    async with aiofiles.open(index_path(path), "wb") as out:
        await out.write(b"".join(_ENTRY.pack(b, off) for b, off in entries))

    LOGGER.debug("Indexed %s: %d entries", path, len(entries))
    return len(entries)
