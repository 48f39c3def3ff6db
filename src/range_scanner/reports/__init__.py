"""Rendering helpers for batch results."""

from .table import (
    COLUMNS,
    EXAMPLE_TICKERS,
    build_batch_summary,
    build_rows,
    last_updated,
    outcome_row,
    status_message,
)

__all__ = [
    "COLUMNS",
    "EXAMPLE_TICKERS",
    "build_batch_summary",
    "build_rows",
    "last_updated",
    "outcome_row",
    "status_message",
]
