"""Core data models for the search engine."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class TimeRange:
    """Half-open search window ``[start, end)`` of timezone-aware instants."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError("start must be <= end")

    def days(self) -> tuple[date, date]:
        """Return the inclusive local calendar days touched by the window."""
        return self.start.astimezone().date(), self.end.astimezone().date()


@dataclass(frozen=True, slots=True)
class HostFilter:
    """Set of accepted host names; empty accepts every host."""

    hosts: frozenset[str] = frozenset()

    @classmethod
    def of(cls, hosts: Iterable[str] | None) -> HostFilter:
        return cls(frozenset(h for h in (hosts or ()) if h))

    def accepts(self, host: str) -> bool:
        return not self.hosts or host in self.hosts


@dataclass(frozen=True, slots=True)
class CandidateFile:
    """A dated shard selected for searching."""

    path: Path
    host: str
    day: date

    @property
    def display_path(self) -> str:
        return str(self.path)


@dataclass(frozen=True, slots=True)
class MatchEvent:
    """One matching record found in a candidate file."""

    file: CandidateFile
    timestamp: datetime | None  # None when no timestamp preceded the record
    text: str


@dataclass(frozen=True, slots=True)
class FileError:
    """Non-fatal problem that caused a candidate file to be skipped."""

    file: CandidateFile
    message: str


@dataclass(frozen=True, slots=True)
class FileResult:
    """Outcome of searching one candidate file."""

    file: CandidateFile
    matches: tuple[MatchEvent, ...] = ()
    error: FileError | None = None


class ProgressKind(str, Enum):
    """Kinds of progress events emitted while searching."""

    SEARCH_STARTED = "search_started"
    SCANNING_FILE = "scanning_file"


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """Diagnostic event; payload holds the pattern/range or the file."""

    kind: ProgressKind
    payload: dict[str, Any]
