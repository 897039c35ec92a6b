"""Human-facing rendering of matched processes."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from rich.table import Table
from rich.text import Text

if TYPE_CHECKING:
    from collections.abc import Iterable

    from rich.console import Console

    from pfinder.scanners.base import ProcessRecord

_MAX_NAME_LENGTH = 256
_UNKNOWN_USER = "unknown"

NO_MATCHES = "No matching processes found."

# ANSI escape sequences: ESC[ ... final byte, or ESC followed by other sequences
_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]|\x1b[()][AB012]|\x1b\].*?\x07|\x1b[^[\]()]")

# Every C0 control character plus DEL; a process name never needs tab or newline.
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


def clean_name(name: str) -> str:
    """Strip terminal escapes and control characters, truncate.

    Idempotent: clean_name(clean_name(x)) == clean_name(x).
    """
    result = _ANSI_RE.sub("", name)
    result = _CONTROL_RE.sub("", result)
    return result[:_MAX_NAME_LENGTH]


def format_record(record: ProcessRecord, *, show_user: bool = True) -> str:
    """One-line summary: ``[PID:1] [PPID:0] [USER:root] init``."""
    parts = [f"[PID:{record.pid}]", f"[PPID:{record.ppid}]"]
    if show_user:
        parts.append(f"[USER:{record.username or _UNKNOWN_USER}]")
    parts.append(clean_name(record.executable))
    return " ".join(parts)


def build_table(records: Iterable[ProcessRecord], *, show_user: bool = True) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("PID", justify="right")
    table.add_column("PPID", justify="right")
    if show_user:
        table.add_column("USER")
    table.add_column("EXECUTABLE")

    for record in records:
        row: list[str | Text] = [str(record.pid), str(record.ppid)]
        if show_user:
            row.append(Text(record.username or _UNKNOWN_USER))
        row.append(Text(clean_name(record.executable)))
        table.add_row(*row)
    return table


def render(
    console: Console,
    records: Iterable[ProcessRecord],
    *,
    table: bool = False,
    show_user: bool = True,
) -> None:
    """Print matched records, or the no-match notice when there are none."""
    records = list(records)
    if not records:
        console.print(NO_MATCHES, markup=False, highlight=False, emoji=False)
        return

    if table:
        console.print(build_table(records, show_user=show_user))
        return

    for record in records:
        console.print(
            format_record(record, show_user=show_user),
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )
