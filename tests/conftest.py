"""Shared test fixtures for pfinder tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from pfinder.scanners.base import ProcessRecord


class FakeProc:
    """A /proc-shaped tree under tmp_path with real fd symlinks."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir()

    @property
    def path(self) -> str:
        return str(self.root)

    def add_process(self, pid: int, targets: list[str] | None = None) -> Path:
        """Create <root>/<pid>/fd/ with one symlink per target, fd numbers from 0."""
        fd_dir = self.root / str(pid) / "fd"
        fd_dir.mkdir(parents=True)
        for fd, target in enumerate(targets or []):
            os.symlink(target, fd_dir / str(fd))
        return fd_dir

    def add_process_without_fds(self, pid: int) -> None:
        """A PID directory whose descriptor table cannot be listed."""
        (self.root / str(pid)).mkdir()

    def add_entry(self, name: str, *, is_dir: bool) -> None:
        entry = self.root / name
        if is_dir:
            entry.mkdir()
        else:
            entry.write_text("pseudo")


@pytest.fixture()
def fake_proc(tmp_path: Path) -> FakeProc:
    return FakeProc(tmp_path / "proc")


@pytest.fixture()
def target_file(tmp_path: Path) -> str:
    """An existing regular file, as an absolute path string."""
    path = tmp_path / "data" / "locked.db"
    path.parent.mkdir()
    path.write_text("payload")
    return str(path)


def make_records(*pids: int) -> list[ProcessRecord]:
    return [ProcessRecord(pid=pid, ppid=1, executable=f"proc{pid}", username="alice") for pid in pids]
