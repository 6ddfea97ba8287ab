"""Concurrent per-file search with results yielded in dispatch order."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from datetime import datetime

from .formats import LogFormat
from .models import CandidateFile, FileError, FileResult
from .pattern import TermMatcher
from .progress import Reporter
from .scan import scan_file
from .seek import seek_offset

LOGGER = logging.getLogger(__name__)

MAX_WORKERS_ENV = "ULTRAGREP_MAX_WORKERS"

FileSearcher = Callable[[CandidateFile], Awaitable[FileResult]]


def resolve_max_workers(max_workers: int | None) -> int:
    """Return the pool size: explicit value, env override, or twice the core count."""
    if max_workers is not None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        return max_workers

    env = os.getenv(MAX_WORKERS_ENV)
    if env:
        try:
            value = int(env)
        except ValueError as exc:
            raise ValueError(f"{MAX_WORKERS_ENV} must be an integer") from exc
        if value < 1:
            raise ValueError(f"{MAX_WORKERS_ENV} must be >= 1")
        return value

    cpu_count = os.cpu_count() or 1
    return min(32, cpu_count * 2)


def make_file_searcher(
    fmt: LogFormat,
    matcher: TermMatcher,
    *,
    start: datetime,
    end: datetime,
    reporter: Reporter,
    use_index: bool = True,
) -> FileSearcher:
    """Build the per-file seek+scan job run by each worker."""

    async def search_file(candidate: CandidateFile) -> FileResult:
        reporter.scanning(candidate)
        try:
            offset = await seek_offset(candidate.path, fmt, start, use_index=use_index)
            matches = [
                m
                async for m in scan_file(candidate, offset, fmt, matcher, start=start, end=end)
            ]
        except OSError as exc:
            message = exc.strerror or str(exc)
            return FileResult(file=candidate, error=FileError(file=candidate, message=message))
        return FileResult(file=candidate, matches=tuple(matches))

    return search_file


async def iter_results(
    candidates: Sequence[CandidateFile],
    *,
    searcher: FileSearcher,
    worker_count: int,
) -> AsyncIterator[FileResult]:
    """Run ``searcher`` over ``candidates`` on a bounded pool of workers.

    Results are yielded in the order of ``candidates``, whatever order they finish in.
    """
    if worker_count < 1:
        raise ValueError("worker_count must be >= 1")
    if not candidates:
        return

    worker_count = min(worker_count, len(candidates))
    LOGGER.debug("Dispatching %d files to %d workers", len(candidates), worker_count)

    queue_size = max(1, worker_count * 4)
    work_queue: asyncio.Queue[tuple[object, CandidateFile | None]] = asyncio.Queue(
        maxsize=queue_size
    )
    result_queue: asyncio.Queue[tuple[object, FileResult | None]] = asyncio.Queue()
    work_sentinel = object()
    done_sentinel = object()
    errors: list[Exception] = []

    async def reader() -> None:
        try:
            for seq, candidate in enumerate(candidates):
                await work_queue.put((seq, candidate))
        finally:
            for _ in range(worker_count):
                await work_queue.put((work_sentinel, None))

    async def worker() -> None:
        try:
            while True:
                seq, candidate = await work_queue.get()
                if seq is work_sentinel:
                    break
                result = await searcher(candidate)
                await result_queue.put((seq, result))
        except Exception as exc:
            errors.append(exc)
        finally:
            await result_queue.put((done_sentinel, None))

    reader_task = asyncio.create_task(reader())
    worker_tasks = [asyncio.create_task(worker()) for _ in range(worker_count)]

    pending: dict[int, FileResult] = {}
    next_seq = 0
    done_workers = 0

    try:
        while True:
            seq, result = await result_queue.get()
            if seq is done_sentinel:
                done_workers += 1
                if done_workers == worker_count:
                    break
                continue
            if errors:
                break

            pending[seq] = result
            while next_seq in pending:
                yield pending.pop(next_seq)
                next_seq += 1

        if errors:
            raise errors[0]
    finally:
        reader_task.cancel()
        for task in worker_tasks:
            task.cancel()
        await asyncio.gather(reader_task, *worker_tasks, return_exceptions=True)
