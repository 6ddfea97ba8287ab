"""Search orchestration.

This module is the main integration point: it validates the request, selects the
candidate shards and runs the per-file seek+scan jobs on the worker pool.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import TextIO

from .dispatch import FileSearcher, iter_results, make_file_searcher, resolve_max_workers
from .formats import LogFormat, get_format
from .models import CandidateFile, FileResult, HostFilter, TimeRange
from .output import SearchSummary, write_results
from .pattern import TermMatcher, compile_terms
from .progress import Reporter
from .selector import select_files
from .time_range import resolve_time_range

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SearchPlan:
    """Everything resolved before any file is opened."""

    fmt: LogFormat
    time_range: TimeRange
    matcher: TermMatcher
    candidates: tuple[CandidateFile, ...]


def plan_search(
    *,
    glob: str,
    format_name: str,
    patterns: Sequence[str],
    start: str | None = None,
    end: str | None = None,
    hosts: Sequence[str] | None = None,
    ignore_case: bool = False,
    now: datetime | None = None,
) -> SearchPlan:
    """Resolve a request, raising fatal errors before any work starts."""
    fmt = get_format(format_name)
    matcher = compile_terms(patterns, ignore_case=ignore_case)
    time_range = resolve_time_range(start, end, now=now)
    candidates = select_files(glob, time_range, HostFilter.of(hosts))
    return SearchPlan(
        fmt=fmt,
        time_range=time_range,
        matcher=matcher,
        candidates=tuple(candidates),
    )


async def iter_search(
    plan: SearchPlan,
    *,
    reporter: Reporter | None = None,
    max_workers: int | None = None,
    searcher: FileSearcher | None = None,
    use_index: bool = True,
) -> AsyncIterator[FileResult]:
    """Yield one result per candidate file, in dispatch order."""
    reporter = reporter or Reporter()
    worker_count = resolve_max_workers(max_workers)

    reporter.search_started(plan.matcher.describe(), plan.time_range)
    searcher = searcher or make_file_searcher(
        plan.fmt,
        plan.matcher,
        start=plan.time_range.start,
        end=plan.time_range.end,
        reporter=reporter,
        use_index=use_index,
    )
    async for result in iter_results(plan.candidates, searcher=searcher, worker_count=worker_count):
        yield result


async def run_search(
    plan: SearchPlan,
    out: TextIO,
    *,
    reporter: Reporter | None = None,
    max_workers: int | None = None,
    searcher: FileSearcher | None = None,
) -> SearchSummary:
    """Search every candidate and write the match blocks to ``out``."""
    reporter = reporter or Reporter()
    summary = await write_results(
        iter_search(plan, reporter=reporter, max_workers=max_workers, searcher=searcher),
        out,
        reporter,
    )
    LOGGER.debug(
        "Searched %d files: %d matches in %d files, %d errors",
        summary.files_searched,
        summary.matches,
        summary.files_matched,
        len(summary.errors),
    )
    return summary
