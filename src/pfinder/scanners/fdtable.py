"""Per-process descriptor table inspection via <proc_root>/<pid>/fd/ readlinks."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

MatchMode = Literal["literal", "canonical"]


class PathMatcher:
    """Compares descriptor targets against a query path.

    ``literal`` is an exact string comparison: symlinks and trailing
    separators on either side are not normalized.  ``canonical`` compares
    ``os.path.realpath`` of both sides; targets that are not absolute paths
    (``pipe:[…]``, ``socket:[…]``, ``anon_inode:[…]``) are compared literally.
    """

    __slots__ = ("path", "mode", "_wanted")

    def __init__(self, path: str, mode: MatchMode = "literal") -> None:
        self.path = path
        self.mode = mode
        self._wanted = os.path.realpath(path) if mode == "canonical" else path

    def __call__(self, target: str) -> bool:
        if self.mode == "canonical" and os.path.isabs(target):
            return os.path.realpath(target) == self._wanted
        return target == self._wanted


def fd_dir(proc_root: str, pid: int) -> str:
    return os.path.join(proc_root, str(pid), "fd")


def iter_fd_targets(proc_root: str, pid: int) -> Iterator[tuple[str, str]]:
    """Yield ``(fd, target)`` for each open descriptor of *pid*.

    A process that exited or whose table is unreadable yields nothing.
    Descriptors closed between listing and readlink are skipped.
    """
    directory = fd_dir(proc_root, pid)
    try:
        entries = os.listdir(directory)
    except OSError as exc:
        logger.debug("Skipping pid=%d: cannot list %s (%s)", pid, directory, exc)
        return

    for entry in entries:
        try:
            target = os.readlink(os.path.join(directory, entry))
        except OSError:
            continue
        yield entry, target


def holds_path(proc_root: str, pid: int, matcher: PathMatcher) -> bool:
    """True if any descriptor of *pid* resolves to the matcher's path."""
    return any(matcher(target) for _fd, target in iter_fd_targets(proc_root, pid))
