"""pfinder: find the process behind a file, PID, name or port."""

from __future__ import annotations

__version__ = "0.1.0"
