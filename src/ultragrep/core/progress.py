"""Progress and diagnostic reporting.

A single ``Reporter`` is handed to every worker, so nothing here is global. All lines go
to stderr so they never interleave with match blocks on stdout.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from .models import CandidateFile, FileError, ProgressEvent, ProgressKind, TimeRange

LOGGER = logging.getLogger(__name__)

TIME_DISPLAY = "%Y-%m-%d %H:%M:%S"


class Reporter:
    """Writes progress events (when enabled) and per-file errors (always)."""

    def __init__(self, *, progress: bool = False, stream: TextIO | None = None) -> None:
        self.progress = progress
        self._stream = stream
        self.events: list[ProgressEvent] = []
        self.errors: list[FileError] = []

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stderr

    def _write(self, line: str) -> None:
        self.stream.write(line + "\n")
        self.stream.flush()

    def emit(self, event: ProgressEvent) -> None:
        if not self.progress:
            return
        self.events.append(event)
        if event.kind is ProgressKind.SEARCH_STARTED:
            p = event.payload
            self._write(
                f"searching for regexps: {p['pattern']} "
                f"from {p['start']:{TIME_DISPLAY}} to {p['end']:{TIME_DISPLAY}}"
            )
        elif event.kind is ProgressKind.SCANNING_FILE:
            self._write(f"searching {event.payload['file'].display_path}")

    def search_started(self, pattern: str, time_range: TimeRange) -> None:
        self.emit(
            ProgressEvent(
                kind=ProgressKind.SEARCH_STARTED,
                payload={"pattern": pattern, "start": time_range.start, "end": time_range.end},
            )
        )

    def scanning(self, candidate: CandidateFile) -> None:
        self.emit(ProgressEvent(kind=ProgressKind.SCANNING_FILE, payload={"file": candidate}))

    def file_error(self, error: FileError) -> None:
        self.errors.append(error)
        LOGGER.debug("Skipped %s: %s", error.file.display_path, error.message)
        self._write(f"ultragrep: skipping {error.file.display_path}: {error.message}")
