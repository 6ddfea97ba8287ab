from __future__ import annotations

from datetime import date, datetime
from pathlib import Path

import pytest

from ultragrep.core.formats import JsonFormat, LineFormat
from ultragrep.core.models import CandidateFile
from ultragrep.core.pattern import compile_terms
from ultragrep.core.scan import scan_file


def _t(h: int, m: int = 0, s: int = 0) -> datetime:
    return datetime(2013, 1, 1, h, m, s).astimezone()


@pytest.fixture
def shard(tmp_path: Path, write_lines) -> CandidateFile:
    path = write_lines(
        tmp_path / "host.1" / "a.log-20130101",
        [
            "Processing a at 2013-01-01 10:00:00",
            "  detail a",
            "Processing b at 2013-01-01 11:00:00",
            "  detail b",
            "Processing c at 2013-01-01 12:00:00",
            "Processing d at 2013-01-01 13:00:00",
        ],
    )
    return CandidateFile(path=path, host="host.1", day=date(2013, 1, 1))


async def _texts(candidate: CandidateFile, terms: list[str], **kwargs) -> list[str]:
    matcher = compile_terms(terms)
    return [m.text async for m in scan_file(candidate, 0, LineFormat(), matcher, **kwargs)]


@pytest.mark.asyncio
async def test_scan_stops_at_end_exclusive(shard: CandidateFile) -> None:
    texts = await _texts(shard, ["Processing"], end=_t(12))
    assert texts == ["Processing a at 2013-01-01 10:00:00", "Processing b at 2013-01-01 11:00:00"]


@pytest.mark.asyncio
async def test_scan_excludes_matches_after_end(shard: CandidateFile) -> None:
    texts = await _texts(shard, ["Processing [cd]"], end=_t(12, 0, 1))
    assert texts == ["Processing c at 2013-01-01 12:00:00"]


@pytest.mark.asyncio
async def test_scan_applies_start_to_inherited_timestamps(shard: CandidateFile) -> None:
    texts = await _texts(shard, ["detail"], start=_t(11), end=_t(23))
    assert texts == ["  detail b"]


@pytest.mark.asyncio
async def test_scan_requires_every_term(shard: CandidateFile) -> None:
    texts = await _texts(shard, ["Processing", r"\bb\b"], end=_t(23))
    assert texts == ["Processing b at 2013-01-01 11:00:00"]


@pytest.mark.asyncio
async def test_scan_reports_inherited_timestamp(shard: CandidateFile) -> None:
    matcher = compile_terms(["detail b"])
    events = [m async for m in scan_file(shard, 0, LineFormat(), matcher, end=_t(23))]
    assert len(events) == 1
    assert events[0].timestamp == _t(11)
    assert events[0].file == shard


@pytest.mark.asyncio
async def test_untimestamped_records_never_end_the_scan(tmp_path: Path, write_lines) -> None:
    path = write_lines(
        tmp_path / "host.1" / "a.log-20130101",
        ["Processing a at 2013-01-01 10:00:00", "tail one", "tail two", "tail three"],
    )
    candidate = CandidateFile(path=path, host="host.1", day=date(2013, 1, 1))
    texts = await _texts(candidate, ["tail"], end=_t(10, 0, 1))
    assert texts == ["tail one", "tail two", "tail three"]


@pytest.mark.asyncio
async def test_leading_records_without_timestamp_are_kept(tmp_path: Path, write_lines) -> None:
    path = write_lines(
        tmp_path / "host.1" / "a.log-20130101",
        ["continued from yesterday", "Processing a at 2013-01-01 10:00:00"],
    )
    candidate = CandidateFile(path=path, host="host.1", day=date(2013, 1, 1))
    texts = await _texts(candidate, ["."], start=_t(11), end=_t(23))
    assert texts == ["continued from yesterday"]


@pytest.mark.asyncio
async def test_scan_from_offset(shard: CandidateFile) -> None:
    offset = len(b"Processing a at 2013-01-01 10:00:00\n  detail a\n")
    matcher = compile_terms(["Processing"])
    texts = [m.text async for m in scan_file(shard, offset, LineFormat(), matcher, end=_t(23))]
    assert texts[0] == "Processing b at 2013-01-01 11:00:00"
    assert len(texts) == 3


@pytest.mark.asyncio
async def test_scan_structured_records(tmp_path: Path, write_lines) -> None:
    path = write_lines(
        tmp_path / "host.1" / "w.log-20130101",
        [
            '{"time":"2013-01-01 10:00:00","session":"f6add2:a51f27"}',
            "{corrupt",
            '{"time":"2013-01-01 11:00:00","session":"f6add2:000000"}',
        ],
    )
    candidate = CandidateFile(path=path, host="host.1", day=date(2013, 1, 1))
    matcher = compile_terms(["f6add2"])
    events = [m async for m in scan_file(candidate, 0, JsonFormat(), matcher, end=_t(10, 30))]
    assert [e.text for e in events] == ['{"time":"2013-01-01 10:00:00","session":"f6add2:a51f27"}']


@pytest.mark.asyncio
async def test_scan_survives_out_of_range_timestamp(tmp_path: Path, write_lines, tz_ahead_of_utc) -> None:
    path = write_lines(
        tmp_path / "host.1" / "a.log-20130101",
        ["garbage at 0001-01-01 00:00:00", "Processing a at 2013-01-01 10:00:00"],
    )
    candidate = CandidateFile(path=path, host="host.1", day=date(2013, 1, 1))
    texts = await _texts(candidate, ["Processing"], start=_t(9), end=_t(11))
    assert texts == ["Processing a at 2013-01-01 10:00:00"]
