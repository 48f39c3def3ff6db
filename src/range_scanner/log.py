"""Logging setup for the CLI and the dashboard."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(name)s - %(message)s"


def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """Attach a rich console handler to the package logger once."""
    logger = logging.getLogger("range_scanner")
    logger.setLevel(level)
    if not logger.handlers:
        handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(level)
    return logger
