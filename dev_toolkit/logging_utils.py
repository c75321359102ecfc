"""
Logging and console helpers shared by the command handlers.

Diagnostics go through :mod:`logging`; user-facing messages go through the two
rich consoles below (stdout for results, stderr for errors and warnings).
"""

from __future__ import annotations

import logging

from rich.console import Console

console = Console(soft_wrap=True, highlight=False, emoji=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False, emoji=False)

_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    # httpx logs every request at INFO; keep it quiet unless debugging.
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def status_style(status: int) -> str:
    if 200 <= status < 300:
        return "green"
    if 300 <= status < 400:
        return "yellow"
    return "red"
