"""MCP tool implementations.

This module contains the *implementation* behind the exposed MCP tools.
Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

from ultragrep.config import load_config
from ultragrep.core.models import FileError, FileResult, MatchEvent
from ultragrep.core.progress import Reporter
from ultragrep.core.search_service import iter_search, plan_search

DEFAULT_LIMIT = 200
HARD_LIMIT = 5000


def _match_to_dict(match: MatchEvent) -> dict[str, Any]:
    return {
        "timestamp": match.timestamp.isoformat() if match.timestamp is not None else None,
        "text": match.text,
    }


def _file_to_dict(result: FileResult, matches: Sequence[MatchEvent]) -> dict[str, Any]:
    return {
        "path": result.file.display_path,
        "host": result.file.host,
        "day": result.file.day.isoformat(),
        "matches": [_match_to_dict(m) for m in matches],
    }


def _error_to_dict(error: FileError) -> dict[str, Any]:
    return {"path": error.file.display_path, "message": error.message}


async def search_logs_async(
    *,
    patterns: Sequence[str],
    type: str | None = None,
    start: str | None = None,
    end: str | None = None,
    hosts: Sequence[str] | None = None,
    config_path: str | None = None,
    limit: int | None = None,
    ignore_case: bool = False,
) -> dict[str, Any]:
    """Implementation for the `ultragrep_search` MCP tool.

    Notes
    -----
    - Files are reported in dispatch (lexical path) order; files without matches are
      omitted.
    - ``limit`` caps the total number of matches across files.
    """
    if limit is None:
        limit = DEFAULT_LIMIT
    if limit <= 0:
        raise ValueError("limit must be > 0")
    limit = min(limit, HARD_LIMIT)

    log_type = load_config(config_path).resolve_type(type)
    plan = plan_search(
        glob=log_type.glob,
        format_name=log_type.format,
        patterns=list(patterns),
        start=start,
        end=end,
        hosts=hosts,
        ignore_case=ignore_case,
    )

    files: list[dict[str, Any]] = []
    errors: list[dict[str, Any]] = []
    count = 0
    reporter = Reporter(progress=False)

    async for result in iter_search(plan, reporter=reporter):
        if result.error is not None:
            errors.append(_error_to_dict(result.error))
            continue
        if not result.matches or count >= limit:
            continue
        kept = result.matches[: limit - count]
        count += len(kept)
        files.append(_file_to_dict(result, kept))

    return {"count": count, "files": files, "errors": errors}


def search_logs_impl(**kwargs: Any) -> dict[str, Any]:
    """Synchronous wrapper around :func:`search_logs_async`."""
    return asyncio.run(search_logs_async(**kwargs))
