"""CLI entry point for pfinder."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from pfinder import __version__

logger = logging.getLogger(__name__)

_ARGUMENT_HELP = """\
Arguments can be:
  a path    If the argument is an existing file, the process holding it
            open (if any) is reported. Directories never match.
  a number  Report the process with that PID.
  a string  Running processes are filtered, case insensitive, on their
            executable name containing the string.
  a regex   As above, with regular expression search. Use "." (not "?")
            or ".+" (not "*").
  a port    Prefixed with ':', processes with a TCP socket on that local
            port are reported.

Multiple arguments can be given; results are merged and each process is
reported once. Quote arguments containing whitespace.
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pfinder",
        description="Find processes by open file, PID, name or TCP port.",
        epilog=_ARGUMENT_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"pfinder {__version__}",
    )
    parser.add_argument(
        "queries",
        nargs="*",
        metavar="ARG",
        help="Path, PID, name/regex, or :PORT",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="PATH",
        help="Path to config TOML file",
    )
    parser.add_argument(
        "--strategy",
        choices=["auto", "proc-root", "process-list"],
        default=None,
        help="Descriptor scanning strategy (default: by platform)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        metavar="N",
        help="Thread pool size for the proc-root scanner",
    )
    parser.add_argument(
        "--canonical",
        action="store_true",
        default=False,
        help="Compare resolved real paths instead of literal descriptor targets",
    )
    parser.add_argument(
        "--all-owners",
        action="store_true",
        default=False,
        help="Report every process holding a path open, not just one",
    )
    parser.add_argument(
        "--table",
        action="store_true",
        default=False,
        help="Render results as a table",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )
    return parser


def _setup_logging(verbose: bool) -> None:
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[handler],
        force=True,
    )


def _run(args: argparse.Namespace, console: Console) -> int:
    from pfinder.config import ScanConfig, load_config
    from pfinder.processes import list_processes
    from pfinder.query import QueryDispatcher
    from pfinder.report import render
    from pfinder.scanners.base import ConfigError, EnumerationError

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    # Override config with CLI args
    overrides: dict[str, object] = {}
    if args.strategy is not None:
        overrides["strategy"] = args.strategy
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    if args.canonical:
        overrides["match_mode"] = "canonical"
    try:
        scan_config = ScanConfig.model_validate({**config.scan.model_dump(), **overrides})
    except ValueError as exc:
        print(f"Error: invalid option: {exc}", file=sys.stderr)
        return 1

    try:
        processes = list_processes()
    except EnumerationError as exc:
        print(f"Error fetching processes: {exc}", file=sys.stderr)
        return 1

    dispatcher = QueryDispatcher(
        processes, scan_config=scan_config, all_owners=args.all_owners
    )
    result = dispatcher.run(args.queries)

    render(
        console,
        result.records.values(),
        table=args.table or config.output.table,
        show_user=config.output.show_user,
    )
    return 0


def main(argv: list[str] | None = None) -> None:
    """Entry point for the pfinder CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.queries:
        parser.print_help()
        raise SystemExit(0)

    _setup_logging(args.verbose)
    raise SystemExit(_run(args, Console()))
