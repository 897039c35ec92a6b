"""Argument classification and result aggregation."""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pfinder.ports import is_decimal, parse_port, pids_on_port
from pfinder.processes import find_by_pid, match_executable
from pfinder.scanners import get_scanner
from pfinder.scanners.base import PathResolutionError, PfinderError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from pfinder.config import ScanConfig
    from pfinder.scanners.base import FdScanner, ProcessRecord

logger = logging.getLogger(__name__)


class ArgKind(enum.Enum):
    PORT = "port"
    PATH = "path"
    PID = "pid"
    TEXT = "text"


def classify(arg: str) -> ArgKind:
    """Decide how *arg* is interpreted.

    Precedence: ``:``-prefixed port, existing filesystem path, integer PID,
    free text.  A file literally named ``123`` is therefore a path.
    """
    if arg.startswith(":"):
        return ArgKind.PORT
    try:
        os.stat(arg)
    except (OSError, ValueError):
        pass
    else:
        return ArgKind.PATH
    if is_decimal(arg):
        return ArgKind.PID
    return ArgKind.TEXT


def normalize_query_path(arg: str) -> str:
    """Return the path descriptor targets are compared against.

    Existing non-directories become absolute.  Directories are returned
    unchanged, so only file ownership is resolved.
    """
    try:
        if os.path.isdir(arg):
            return arg
        return os.path.abspath(arg)
    except OSError as exc:
        raise PathResolutionError(f"Cannot resolve absolute path for {arg!r}: {exc}") from exc


@dataclass(slots=True)
class QueryResult:
    """Matched processes keyed by PID, in order of first match."""

    records: dict[int, ProcessRecord] = field(default_factory=dict)
    failures: list[tuple[str, PfinderError]] = field(default_factory=list)

    def add(self, record: ProcessRecord) -> None:
        self.records.setdefault(record.pid, record)


class QueryDispatcher:
    """Routes each argument to its resolver and merges the matches.

    The descriptor scanner is created on the first path argument, so an
    unsupported platform only fails path queries.
    """

    def __init__(
        self,
        processes: Sequence[ProcessRecord],
        *,
        scanner: FdScanner | None = None,
        scan_config: ScanConfig | None = None,
        all_owners: bool = False,
    ) -> None:
        self._processes = processes
        self._scanner = scanner
        self._scan_config = scan_config
        self._all_owners = all_owners

    def run(self, args: Iterable[str]) -> QueryResult:
        """Resolve every argument; one failing argument never stops the batch."""
        result = QueryResult()
        for arg in args:
            try:
                pids = self.resolve(arg)
            except PfinderError as exc:
                logger.warning("Skipping %r: %s", arg, exc)
                result.failures.append((arg, exc))
                continue
            for pid in pids:
                record = find_by_pid(pid, self._processes)
                if record is None:
                    logger.debug("pid=%d matched %r but is not in the process list", pid, arg)
                    continue
                result.add(record)
        return result

    def resolve(self, arg: str) -> list[int]:
        """Return candidate PIDs for a single argument."""
        kind = classify(arg)
        logger.debug("Argument %r classified as %s", arg, kind.value)

        if kind is ArgKind.PORT:
            return pids_on_port(parse_port(arg[1:]))
        if kind is ArgKind.PATH:
            return self._resolve_path(normalize_query_path(arg))
        if kind is ArgKind.PID:
            return [int(arg, 10)]
        return match_executable(arg, self._processes)

    def _get_scanner(self) -> FdScanner:
        if self._scanner is None:
            self._scanner = get_scanner(self._scan_config)
            logger.debug("Using %s scanner", self._scanner.name)
        return self._scanner

    def _resolve_path(self, path: str) -> list[int]:
        scanner = self._get_scanner()
        if self._all_owners:
            return scanner.find_owners(path, self._processes)
        pid = scanner.find_owner(path, self._processes)
        return [pid] if pid is not None else []
