"""Logging setup for the command line."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(verbose: int = 0, console: Console | None = None) -> None:
    """Route log records of this package through rich.

    WARNING by default, INFO with one ``-v`` and DEBUG with more.
    """
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    logger = logging.getLogger("fleet_release")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
