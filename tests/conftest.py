from __future__ import annotations

import os
import time
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest
import yaml


@pytest.fixture
def now() -> datetime:
    return datetime.now().astimezone().replace(microsecond=0)


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty directory with no user-level config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.delenv("ULTRAGREP_MAX_WORKERS", raising=False)
    return tmp_path


@pytest.fixture
def write_file() -> Callable[[Path, str], Path]:
    def _write(path: Path, content: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_config(workdir: Path) -> Callable[..., Path]:
    def _write(data: dict | None = None, name: str = ".ultragrep.yml") -> Path:
        data = data or {
            "types": {
                "app": {"glob": "foo/*/*", "format": "app"},
                "work": {"glob": "work/*/*", "format": "work"},
            },
            "default_type": "app",
        }
        path = workdir / name
        path.write_text(yaml.safe_dump(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_lines() -> Callable[[Path, list[str]], Path]:
    def _write(path: Path, lines: list[str]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"".join(line.encode("utf-8") + b"\n" for line in lines))
        return path

    return _write


@pytest.fixture
def tz_ahead_of_utc():
    """Switch the process to a timezone east of UTC for the duration of a test."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is unavailable on this platform")
    saved = os.environ.get("TZ")
    os.environ["TZ"] = "JST-9"
    time.tzset()
    yield
    if saved is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = saved
    time.tzset()
