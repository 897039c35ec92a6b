"""Pydantic-validated config loaded from TOML.

TOML loading uses ``tomllib`` (3.11+) with ``tomli`` fallback.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from pfinder.scanners.base import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

_CONFIG_DIR = Path("~/.config/pfinder").expanduser()
_DEFAULT_CONFIG_PATH = _CONFIG_DIR / "config.toml"


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------


class ScanConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    strategy: Literal["auto", "proc-root", "process-list"] = "auto"
    max_workers: int = 32
    match_mode: Literal["literal", "canonical"] = "literal"
    proc_root: str = "/proc"

    @field_validator("max_workers")
    @classmethod
    def _check_max_workers(cls, v: int) -> int:
        if v < 1 or v > 1024:
            msg = "max_workers must be between 1 and 1024"
            raise ValueError(msg)
        return v

    @field_validator("proc_root")
    @classmethod
    def _check_proc_root(cls, v: str) -> str:
        if not v:
            msg = "proc_root must not be empty"
            raise ValueError(msg)
        return v


class OutputConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    table: bool = False
    show_user: bool = True


class PfinderConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    scan: ScanConfig = ScanConfig()
    output: OutputConfig = OutputConfig()


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_config(path: Path | None = None) -> PfinderConfig:
    """Return the ``[scan]``/``[output]`` settings pfinder should run with.

    An explicit *path* (``--config``) must exist and parse.  Without one,
    ``~/.config/pfinder/config.toml`` is read when present; otherwise every
    setting keeps its default (auto strategy, literal matching, ``/proc``).

    Raises :class:`ConfigError` when the file cannot be used.
    """
    source = path if path is not None else _DEFAULT_CONFIG_PATH
    if path is None and not source.is_file():
        return PfinderConfig()
    return _parse_config_file(source)


def _parse_config_file(path: Path) -> PfinderConfig:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"pfinder config {path} is unreadable: {exc}") from exc

    try:
        sections = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"pfinder config {path} is not valid TOML: {exc}") from exc

    try:
        config = PfinderConfig.model_validate(sections)
    except ValidationError as exc:
        raise ConfigError(
            f"pfinder config {path} has bad [scan]/[output] settings: {exc}"
        ) from exc

    logger.debug(
        "Config %s: strategy=%s match_mode=%s proc_root=%s",
        path, config.scan.strategy, config.scan.match_mode, config.scan.proc_root,
    )
    return config

