"""Concurrent scanner over every numeric entry of the process root."""

from __future__ import annotations

import logging
import os
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

from pfinder.scanners.base import FdScanner, ScanError
from pfinder.scanners.fdtable import PathMatcher, holds_path

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pfinder.scanners.base import ProcessRecord
    from pfinder.scanners.fdtable import MatchMode

logger = logging.getLogger(__name__)

_DEFAULT_MAX_WORKERS = 32


class OwnerSlot:
    """Result slot shared by all scan tasks, guarded by one lock.

    ``offer`` is a compare-and-set: the lowest PID seen wins, so the
    answer does not depend on which task finishes last.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._owner: int | None = None
        self._all: set[int] = set()

    def offer(self, pid: int) -> None:
        with self._lock:
            self._all.add(pid)
            if self._owner is None or pid < self._owner:
                self._owner = pid

    @property
    def owner(self) -> int | None:
        with self._lock:
            return self._owner

    @property
    def owners(self) -> list[int]:
        with self._lock:
            return sorted(self._all)


class ProcRootScanner(FdScanner):
    """Scans every PID under *proc_root* with one pool task per process.

    The supplied process list is ignored: the live process root is the
    source of PIDs.  All tasks run to completion before the result is read;
    there is no early cancellation once a match is found.
    """

    name = "proc-root"

    def __init__(
        self,
        *,
        proc_root: str = "/proc",
        match_mode: MatchMode = "literal",
        max_workers: int = _DEFAULT_MAX_WORKERS,
    ) -> None:
        self._proc_root = proc_root
        self._match_mode = match_mode
        self._max_workers = max_workers

    def find_owner(self, path: str, processes: Sequence[ProcessRecord]) -> int | None:
        return self._scan(path).owner

    def find_owners(self, path: str, processes: Sequence[ProcessRecord]) -> list[int]:
        return self._scan(path).owners

    def list_pids(self) -> list[int]:
        """Return the numeric directory entries of the process root.

        Raises :class:`ScanError` if the root itself cannot be listed.
        """
        try:
            with os.scandir(self._proc_root) as it:
                entries = list(it)
        except OSError as exc:
            raise ScanError(f"Cannot list process root {self._proc_root}: {exc}") from exc

        pids: list[int] = []
        for entry in entries:
            if not (entry.name.isascii() and entry.name.isdigit()):
                continue
            try:
                if not entry.is_dir():
                    continue
            except OSError:
                continue
            pids.append(int(entry.name))
        return pids

    def _scan(self, path: str) -> OwnerSlot:
        pids = self.list_pids()
        matcher = PathMatcher(path, self._match_mode)
        slot = OwnerSlot()
        my_pid = os.getpid()

        def inspect(pid: int) -> None:
            if pid != my_pid and holds_path(self._proc_root, pid, matcher):
                logger.debug("pid=%d holds %s", pid, path)
                slot.offer(pid)

        with ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="pfinder-scan"
        ) as pool:
            futures = [pool.submit(inspect, pid) for pid in pids]
            # Leaving the block waits for every task; result() re-raises
            # anything other than the OSErrors the inspection swallows.
            for future in futures:
                future.result()

        logger.debug("Scanned %d pids under %s for %s", len(pids), self._proc_root, path)
        return slot
