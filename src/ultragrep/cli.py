from __future__ import annotations

import argparse
import asyncio
import glob
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from ultragrep import __version__
from ultragrep.config import UltragrepConfig, load_config
from ultragrep.core.dispatch import resolve_max_workers
from ultragrep.core.errors import UltragrepError
from ultragrep.core.formats import get_format
from ultragrep.core.index import INDEX_SUFFIX, build_index
from ultragrep.core.progress import Reporter
from ultragrep.core.search_service import plan_search, run_search

LOG_LEVEL_ENV = "ULTRAGREP_LOG_LEVEL"


class _HelpFormatter(argparse.RawDescriptionHelpFormatter):
    def add_usage(self, usage, actions, groups, prefix=None):
        return super().add_usage(usage, actions, groups, prefix="Usage: " if prefix is None else prefix)


def _configure_logging(default: str = "WARNING") -> None:
    level_name = os.getenv(LOG_LEVEL_ENV, default).upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _positive_int(s: str) -> int:
    try:
        value = int(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError("must be an integer") from e
    if value < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return value


def _preparse_config(argv: Sequence[str]) -> str | None:
    p = argparse.ArgumentParser(add_help=False)
    p.add_argument("-c", "--config", default=None)
    known, _ = p.parse_known_args(argv)
    return known.config


def _types_epilog(config: UltragrepConfig) -> str:
    names = ", ".join(config.type_names()) or "(none configured)"
    out = f"Types: {names}"
    if config.default_type:
        out += f" (default: {config.default_type})"
    return out


def build_parser(config: UltragrepConfig) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ultragrep",
        description="Search time-sharded logs across hosts for lines matching every REGEXP.",
        epilog=_types_epilog(config),
        formatter_class=_HelpFormatter,
    )
    p.add_argument("regexps", nargs="+", metavar="REGEXP", help="All must match (implicit AND)")
    p.add_argument("-t", "--type", default=None, help="Log type from the config file")
    p.add_argument("-c", "--config", default=None, help="Path to config (default: .ultragrep.yml)")
    p.add_argument(
        "-s",
        "--start",
        default=None,
        help="Start time: epoch seconds, YYYY-MM-DD[ HH:MM:SS] or YYYYMMDD (default: today 00:00)",
    )
    p.add_argument("-e", "--end", default=None, help="End time, same forms as --start (default: now)")
    p.add_argument(
        "--host",
        dest="hosts",
        action="append",
        default=[],
        help=(
            "Only search this host (repeatable). A shard's host is its parent directory,"
            " which must look like host.N; shards under other directories are skipped"
        ),
    )
    p.add_argument("-p", "--progress", action="store_true", help="Report what is searched on stderr")
    p.add_argument("-i", "--ignore-case", action="store_true", help="Case-insensitive matching")
    p.add_argument("-j", "--workers", type=_positive_int, default=None, help="Parallel files searched")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(argv: Sequence[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    _configure_logging()

    try:
        config = load_config(_preparse_config(argv))
    except UltragrepError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)

    args = build_parser(config).parse_args(argv)

    try:
        log_type = config.resolve_type(args.type)
        plan = plan_search(
            glob=log_type.glob,
            format_name=log_type.format,
            patterns=args.regexps,
            start=args.start,
            end=args.end,
            hosts=args.hosts,
            ignore_case=args.ignore_case,
        )
        workers = resolve_max_workers(args.workers)
    except (UltragrepError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    reporter = Reporter(progress=args.progress)
    asyncio.run(run_search(plan, sys.stdout, reporter=reporter, max_workers=workers))


def index_main(argv: Sequence[str] | None = None) -> None:
    """Build or refresh sidecar timestamp indexes."""
    _configure_logging()
    p = argparse.ArgumentParser(
        prog="ultragrep-index",
        description="Build timestamp indexes so searches can seek straight to a start time.",
        formatter_class=_HelpFormatter,
    )
    p.add_argument("files", nargs="*", help="Shards to index (default: every file of the type's glob)")
    p.add_argument("-t", "--type", default=None)
    p.add_argument("-c", "--config", default=None)
    args = p.parse_args(argv)

    try:
        log_type = load_config(args.config).resolve_type(args.type)
        fmt = get_format(log_type.format)
    except UltragrepError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    files = args.files or sorted(
        f for f in glob.glob(os.path.expanduser(log_type.glob)) if not f.endswith(INDEX_SUFFIX)
    )

    async def _run() -> None:
        for name in files:
            try:
                count = await build_index(Path(name), fmt)
            except OSError as exc:
                print(f"ultragrep-index: skipping {name}: {exc.strerror or exc}", file=sys.stderr)
                continue
            print(f"indexed {name} ({count} entries)")

    asyncio.run(_run())


if __name__ == "__main__":
    main()
