"""Sequential scanner over a pre-fetched process list."""

from __future__ import annotations

import contextlib
import logging
import os
from typing import TYPE_CHECKING

from pfinder.scanners.base import FdScanner, ScanError
from pfinder.scanners.fdtable import PathMatcher, holds_path

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from pfinder.scanners.base import ProcessRecord
    from pfinder.scanners.fdtable import MatchMode

logger = logging.getLogger(__name__)

# A FIFO with no writer would block a plain read-only open.
_OPEN_FLAGS = os.O_RDONLY | getattr(os, "O_NONBLOCK", 0)


class ProcessListScanner(FdScanner):
    """Walks the supplied process list one PID at a time.

    Used where the global process directory cannot be listed: only the PIDs
    the enumerator reported are inspected, and access-denied descriptor
    tables are skipped silently.
    """

    name = "process-list"

    def __init__(self, *, proc_root: str = "/proc", match_mode: MatchMode = "literal") -> None:
        self._proc_root = proc_root
        self._match_mode = match_mode

    def find_owner(self, path: str, processes: Sequence[ProcessRecord]) -> int | None:
        """Return the first listed process holding *path* open.

        Scanning stops at the first match.
        """
        with contextlib.closing(self._scan(path, processes)) as pids:
            return next(pids, None)

    def find_owners(self, path: str, processes: Sequence[ProcessRecord]) -> list[int]:
        return sorted(set(self._scan(path, processes)))

    def _scan(self, path: str, processes: Sequence[ProcessRecord]) -> Iterator[int]:
        # The query path stays open for the whole scan; our own PID is
        # skipped so this handle is never reported as an owner.
        try:
            handle = os.open(path, _OPEN_FLAGS)
        except OSError as exc:
            raise ScanError(f"Cannot open {path}: {exc}") from exc

        try:
            matcher = PathMatcher(path, self._match_mode)
            my_pid = os.getpid()
            for proc in processes:
                if proc.pid == my_pid:
                    continue
                if holds_path(self._proc_root, proc.pid, matcher):
                    logger.debug("pid=%d holds %s", proc.pid, path)
                    yield proc.pid
        finally:
            os.close(handle)
