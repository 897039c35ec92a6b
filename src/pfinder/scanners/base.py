"""Core data types, scanner ABC, and exception hierarchy."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

# --- Exceptions ---


class PfinderError(Exception):
    """Base exception for all pfinder errors."""


class ScanError(PfinderError):
    """A descriptor scan could not even begin (query path or process root unreadable)."""


class UnsupportedPlatformError(ScanError):
    """No descriptor scanning strategy exists for this operating system."""


class PathResolutionError(PfinderError):
    """A path argument could not be converted to an absolute path."""


class InvalidArgumentError(PfinderError):
    """A query argument is malformed (e.g. a non-numeric port)."""


class EnumerationError(PfinderError):
    """The running process list could not be read."""


class PortLookupError(PfinderError):
    """TCP connections could not be read."""


class ConfigError(PfinderError):
    """Configuration loading or validation failure."""


# --- Data Types (frozen, slotted) ---


@dataclass(frozen=True, slots=True)
class ProcessRecord:
    """A running process as reported by the process enumerator."""

    pid: int
    ppid: int
    executable: str
    username: str | None = None


# --- Scanner ABC ---


class FdScanner(ABC):
    """Finds which process holds an open descriptor on a path."""

    name: str = "abstract"

    @abstractmethod
    def find_owners(self, path: str, processes: Sequence[ProcessRecord]) -> list[int]:
        """Return every PID holding *path* open, sorted ascending.

        Raises :class:`ScanError` when the scan cannot begin.
        """

    def find_owner(self, path: str, processes: Sequence[ProcessRecord]) -> int | None:
        """Return one PID holding *path* open, or None if nobody does."""
        owners = self.find_owners(path, processes)
        return owners[0] if owners else None
