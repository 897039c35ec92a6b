"""Process enumeration and name/PID lookups backed by psutil."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

import psutil  # type: ignore[import-untyped]

from pfinder.scanners.base import EnumerationError, ProcessRecord

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

_ATTRS = ["pid", "ppid", "name", "username"]


def list_processes() -> list[ProcessRecord]:
    """Snapshot every running process as a :class:`ProcessRecord`.

    Attributes psutil cannot read (access denied, zombie) come back as
    None; the process is still listed.
    """
    records: list[ProcessRecord] = []
    try:
        for proc in psutil.process_iter(_ATTRS, ad_value=None):
            info = proc.info
            records.append(ProcessRecord(
                pid=info["pid"],
                ppid=info["ppid"] if info["ppid"] is not None else 0,
                executable=info["name"] or "",
                username=info["username"],
            ))
    except (psutil.Error, OSError) as exc:
        raise EnumerationError(f"Cannot enumerate processes: {exc}") from exc

    logger.debug("Enumerated %d processes", len(records))
    return records


def find_by_pid(pid: int, processes: Sequence[ProcessRecord]) -> ProcessRecord | None:
    """Return the record for *pid*, or None if it is not in the list."""
    for proc in processes:
        if proc.pid == pid:
            return proc
    return None


def match_executable(pattern: str, processes: Sequence[ProcessRecord]) -> list[int]:
    """PIDs whose executable name matches *pattern*, case-insensitive.

    *pattern* is a regular expression searched anywhere in the name.  If it
    does not compile it is matched as a plain substring instead.
    """
    try:
        regex = re.compile(pattern, re.IGNORECASE)
    except re.error:
        logger.debug("Not a valid regex, using substring match: %r", pattern)
        needle = pattern.lower()
        return [p.pid for p in processes if needle in p.executable.lower()]

    return [p.pid for p in processes if regex.search(p.executable)]
