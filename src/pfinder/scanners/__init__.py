"""Descriptor scanning strategies and platform factory."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from pfinder.scanners.base import (
    ConfigError,
    EnumerationError,
    FdScanner,
    InvalidArgumentError,
    PathResolutionError,
    PfinderError,
    PortLookupError,
    ProcessRecord,
    ScanError,
    UnsupportedPlatformError,
)

if TYPE_CHECKING:
    from pfinder.config import ScanConfig

__all__ = [
    "ConfigError",
    "EnumerationError",
    "FdScanner",
    "InvalidArgumentError",
    "PathResolutionError",
    "PfinderError",
    "PortLookupError",
    "ProcessRecord",
    "ScanError",
    "UnsupportedPlatformError",
    "get_scanner",
]

_PLATFORM_STRATEGIES = {
    "linux": "proc-root",
    "darwin": "process-list",
}


def get_scanner(config: ScanConfig | None = None, platform: str | None = None) -> FdScanner:
    """Create the scanner for *platform* (default: the running OS).

    ``strategy = "auto"`` picks by platform and raises
    :class:`UnsupportedPlatformError` where none applies.  An explicit
    strategy is honoured on any platform.
    """
    from pfinder.config import ScanConfig
    from pfinder.scanners.proc_root import ProcRootScanner
    from pfinder.scanners.process_list import ProcessListScanner

    cfg = config if config is not None else ScanConfig()
    strategy = cfg.strategy
    if strategy == "auto":
        plat = platform if platform is not None else sys.platform
        key = "linux" if plat.startswith("linux") else plat
        strategy = _PLATFORM_STRATEGIES.get(key)
        if strategy is None:
            raise UnsupportedPlatformError(f"Unsupported platform: {plat}")

    if strategy == "proc-root":
        return ProcRootScanner(
            proc_root=cfg.proc_root,
            match_mode=cfg.match_mode,
            max_workers=cfg.max_workers,
        )
    return ProcessListScanner(proc_root=cfg.proc_root, match_mode=cfg.match_mode)
