"""MCP server entrypoint (stdio transport).

Exposes the time-windowed shard search as a tool.

Run locally (stdio):
    python -m ultragrep.server.mcp_server
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

from mcp.server.fastmcp import FastMCP

from ultragrep.tools.search import search_logs_async

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure logging on stderr; stdout carries the MCP protocol."""
    level_name = os.getenv("ULTRAGREP_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


mcp = FastMCP("ultragrep", json_response=True)


@mcp.tool()
async def ultragrep_search(
    patterns: list[str],
    type: str | None = None,
    start: str | None = None,
    end: str | None = None,
    hosts: list[str] | None = None,
    config_path: str | None = None,
    limit: int | None = None,
    ignore_case: bool = False,
) -> dict[str, Any]:
    """Search dated, host-sharded logs for records matching every pattern.

    Parameters
    ----------
    patterns:
        Regular expressions; a record is returned only if all of them match.
    type:
        Log type name from .ultragrep.yml (defaults to the configured default_type).
    start/end:
        Epoch seconds, "YYYY-MM-DD[ HH:MM:SS]" or "YYYYMMDD" in local time.
        Defaults: start = today 00:00, end = now.
    hosts:
        Restrict the search to these host directories (e.g., ["host.1"]).
    config_path:
        Explicit config file; otherwise .ultragrep.yml, ~/.ultragrep.yml, /etc/ultragrep.yml.
    limit:
        Maximum number of matches returned (hard-capped in the implementation).

    Returns
    -------
    dict:
        {"count": int, "files": list[dict], "errors": list[dict]}
    """
    return await search_logs_async(
        patterns=patterns,
        type=type,
        start=start,
        end=end,
        hosts=hosts,
        config_path=config_path,
        limit=limit,
        ignore_case=ignore_case,
    )


def main() -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
