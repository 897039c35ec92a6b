"""Tests for result rendering."""

from __future__ import annotations

import io

from rich.console import Console

from pfinder.report import NO_MATCHES, build_table, clean_name, format_record, render
from pfinder.scanners.base import ProcessRecord


def _console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=200, color_system=None), buf


class TestFormatRecord:
    def test_full_line(self) -> None:
        rec = ProcessRecord(pid=42, ppid=1, executable="nginx", username="www-data")
        assert format_record(rec) == "[PID:42] [PPID:1] [USER:www-data] nginx"

    def test_unknown_user(self) -> None:
        rec = ProcessRecord(pid=42, ppid=1, executable="nginx")
        assert format_record(rec) == "[PID:42] [PPID:1] [USER:unknown] nginx"

    def test_hide_user(self) -> None:
        rec = ProcessRecord(pid=42, ppid=1, executable="nginx", username="root")
        assert format_record(rec, show_user=False) == "[PID:42] [PPID:1] nginx"

    def test_escape_sequences_stripped(self) -> None:
        rec = ProcessRecord(pid=1, ppid=0, executable="\x1b[31mevil\x1b[0m\x07")
        assert format_record(rec, show_user=False) == "[PID:1] [PPID:0] evil"


class TestCleanName:
    def test_truncates(self) -> None:
        assert len(clean_name("x" * 1000)) == 256

    def test_strips_newlines(self) -> None:
        assert clean_name("a\nb\tc") == "abc"


class TestRender:
    def test_no_records(self) -> None:
        console, buf = _console()
        render(console, [])
        assert buf.getvalue().strip() == NO_MATCHES

    def test_lines_in_order(self) -> None:
        console, buf = _console()
        render(console, [
            ProcessRecord(pid=2, ppid=1, executable="b", username="u"),
            ProcessRecord(pid=1, ppid=0, executable="a", username="u"),
        ])
        assert buf.getvalue().splitlines() == [
            "[PID:2] [PPID:1] [USER:u] b",
            "[PID:1] [PPID:0] [USER:u] a",
        ]

    def test_brackets_not_treated_as_markup(self) -> None:
        console, buf = _console()
        render(console, [ProcessRecord(pid=3, ppid=1, executable="[bold]kworker[/bold]", username="root")])
        assert "[bold]kworker[/bold]" in buf.getvalue()

    def test_emoji_codes_printed_verbatim(self) -> None:
        console, buf = _console()
        render(console, [ProcessRecord(pid=1, ppid=0, executable="a:fire:b", username="root")])
        assert buf.getvalue().splitlines() == ["[PID:1] [PPID:0] [USER:root] a:fire:b"]

    def test_emoji_codes_verbatim_in_table(self) -> None:
        console, buf = _console()
        render(console, [ProcessRecord(pid=1, ppid=0, executable=":fire:", username="root")], table=True)
        assert ":fire:" in buf.getvalue()

    def test_table(self) -> None:

        console, buf = _console()
        render(console, [ProcessRecord(pid=7, ppid=1, executable="[kthreadd]", username="root")], table=True)
        out = buf.getvalue()
        assert "PID" in out
        assert "EXECUTABLE" in out
        assert "[kthreadd]" in out
        assert "root" in out

    def test_table_without_user_column(self) -> None:
        table = build_table([ProcessRecord(pid=7, ppid=1, executable="x")], show_user=False)
        assert [c.header for c in table.columns] == ["PID", "PPID", "EXECUTABLE"]
