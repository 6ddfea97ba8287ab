"""Rendering of per-file match blocks."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import TextIO

from .models import FileError, FileResult
from .progress import Reporter

SEPARATOR = "-" * 40


@dataclass(slots=True)
class SearchSummary:
    """Counters for a finished search."""

    files_searched: int = 0
    files_matched: int = 0
    matches: int = 0
    errors: list[FileError] = field(default_factory=list)


def format_block(result: FileResult) -> str:
    """Return ``# <path>``, the matched records, and the separator line."""
    lines = [f"# {result.file.display_path}"]
    lines.extend(m.text for m in result.matches)
    lines.append(SEPARATOR)
    return "\n".join(lines) + "\n"


async def write_results(
    results: AsyncIterator[FileResult],
    out: TextIO,
    reporter: Reporter,
) -> SearchSummary:
    """Write each file's block as soon as it is next in dispatch order."""
    summary = SearchSummary()
    async for result in results:
        summary.files_searched += 1
        if result.error is not None:
            summary.errors.append(result.error)
            reporter.file_error(result.error)
            continue
        if not result.matches:
            continue
        summary.files_matched += 1
        summary.matches += len(result.matches)
        out.write(format_block(result))
        out.flush()
    return summary
