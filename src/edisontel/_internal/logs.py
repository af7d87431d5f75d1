"""Logging setup for the CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(verbose: bool) -> None:
    """Route log records to stderr via Rich; DEBUG when *verbose*, else WARNING."""
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # websockets logs every frame at DEBUG; keep it out of verbose output
    logging.getLogger("websockets").setLevel(logging.INFO)
