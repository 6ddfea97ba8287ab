"""Candidate file selection: glob, day range and host filtering."""

from __future__ import annotations

import glob
import logging
import os
import re
from datetime import date, datetime
from pathlib import Path

from .errors import ConfigError
from .models import CandidateFile, HostFilter, TimeRange

LOGGER = logging.getLogger(__name__)

_DAY_SUFFIX_RE = re.compile(r"-(?P<day>\d{8})$")
_HOST_RE = re.compile(r"^[A-Za-z0-9][\w-]*(?:\.[\w-]+)+$")


def parse_day(path: Path) -> date | None:
    """Return the calendar day from a ``-YYYYMMDD`` filename suffix."""
    m = _DAY_SUFFIX_RE.search(path.name)
    if not m:
        return None
    try:
        return datetime.strptime(m.group("day"), "%Y%m%d").date()
    except ValueError:
        return None


def parse_host(path: Path) -> str | None:
    """Return the host label from a ``host.N``-style parent directory."""
    name = path.parent.name
    return name if _HOST_RE.match(name) else None


def select_files(
    pattern: str,
    time_range: TimeRange,
    hosts: HostFilter | None = None,
) -> list[CandidateFile]:
    """Expand ``pattern`` into the lexically ordered shards to search.

    Paths that do not follow the ``<host>/<name>-YYYYMMDD`` convention are ignored.
    """
    if not pattern or not pattern.strip():
        raise ConfigError("glob pattern must not be empty")

    hosts = hosts or HostFilter()
    first_day, last_day = time_range.days()

    out: list[CandidateFile] = []
    matched = 0
    for raw in sorted(glob.glob(os.path.expanduser(pattern))):
        matched += 1
        path = Path(raw)
        if not path.is_file():
            continue
        day = parse_day(path)
        host = parse_host(path)
        if day is None or host is None:
            LOGGER.debug("Skipping %s (not a dated host shard)", raw)
            continue
        if not first_day <= day <= last_day:
            continue
        if not hosts.accepts(host):
            continue
        out.append(CandidateFile(path=path, host=host, day=day))

    LOGGER.debug("Glob %r matched %d paths, %d candidates", pattern, matched, len(out))
    return out
