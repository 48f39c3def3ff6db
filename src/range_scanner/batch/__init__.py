"""Ticker batch pipeline."""

from .aggregator import BatchResult, Failure, Outcome, Success, TickerBatchAggregator, parse_symbols
from .rate_limit import LimiterState, RateLimiter, RateLimitMode

__all__ = [
    "BatchResult",
    "Failure",
    "LimiterState",
    "Outcome",
    "RateLimitMode",
    "RateLimiter",
    "Success",
    "TickerBatchAggregator",
    "parse_symbols",
]
