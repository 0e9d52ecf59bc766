"""Shared pytest fixtures for sync-folders tests."""

import os
from pathlib import Path

import pytest

from sync_folders.config import Config


def write_file(
    root: Path,
    rel_path: str,
    content: bytes | str,
    mtime: float | None = None,
) -> Path:
    """Write *content* to ``root/rel_path`` and optionally set its mtime (seconds)."""
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, str):
        content = content.encode("utf-8")
    path.write_bytes(content)
    if mtime is not None:
        ns = int(mtime * 1_000_000_000)
        os.utime(path, ns=(ns, ns))
    return path


@pytest.fixture
def src_dir(tmp_path):
    """Empty source directory."""
    path = tmp_path / "src"
    path.mkdir()
    return path


@pytest.fixture
def dest_dir(tmp_path):
    """Empty destination directory."""
    path = tmp_path / "dest"
    path.mkdir()
    return path


@pytest.fixture
def make_config(src_dir, dest_dir):
    """Factory fixture for Config instances pointing at the temp trees."""

    def _make(**overrides):
        values = {
            "source_root": src_dir,
            "dest_root": dest_dir,
            "progress": "none",
        }
        values.update(overrides)
        return Config(**values)

    return _make


class RecordingProgress:
    """ProgressReporter that records every event."""

    def __init__(self):
        self.events: list[tuple] = []

    def start(self, total):
        self.events.append(("start", total))

    def update(self, count):
        self.events.append(("update", count))

    def stop(self):
        self.events.append(("stop",))


@pytest.fixture
def recording_progress():
    return RecordingProgress()


@pytest.fixture
def make_file():
    """Factory fixture wrapping ``write_file``."""
    return write_file
