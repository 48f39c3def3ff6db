"""Trailing-range statistics."""

from .reduction import StatisticsRecord, reduce_series

__all__ = ["StatisticsRecord", "reduce_series"]
