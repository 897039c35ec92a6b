"""TCP port to PID mapping via psutil."""

from __future__ import annotations

import logging

import psutil  # type: ignore[import-untyped]

from pfinder.scanners.base import InvalidArgumentError, PortLookupError

logger = logging.getLogger(__name__)

_MAX_PORT = 65535


def is_decimal(text: str) -> bool:
    """True for an optionally signed run of ASCII digits.

    Stricter than ``int()``: whitespace, underscores and non-ASCII digits
    are rejected.
    """
    digits = text[1:] if text[:1] in ("+", "-") else text
    return digits.isascii() and digits.isdigit()


def parse_port(text: str) -> int:
    """Parse the part of a ``:PORT`` argument after the colon."""
    if not is_decimal(text):
        raise InvalidArgumentError(f"Invalid port: {text!r}")
    port = int(text, 10)
    if port < 0 or port > _MAX_PORT:
        raise InvalidArgumentError(f"Port out of range: {port}")
    return port


def pids_on_port(port: int) -> list[int]:
    """PIDs owning a TCP socket whose local port is *port*.

    Every connection state counts, not only LISTEN.  Sockets psutil cannot
    attribute to a process (pid None) are skipped.  Order is that of the
    connection table, without duplicates.
    """
    try:
        connections = psutil.net_connections(kind="tcp")
    except (psutil.AccessDenied, OSError) as exc:
        raise PortLookupError(f"Cannot read TCP connections: {exc}") from exc

    pids: list[int] = []
    for conn in connections:
        if not conn.laddr or conn.laddr.port != port:
            continue
        if conn.pid is None or conn.pid in pids:
            continue
        pids.append(conn.pid)

    logger.debug("Port %d -> pids %s", port, pids)
    return pids
