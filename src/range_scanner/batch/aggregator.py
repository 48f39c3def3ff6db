"""Batch orchestration: parse tickers, fetch, reduce and collect outcomes."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional, Union

from ..errors import EmptyInputError, EmptySeriesError, ErrorKind, SourceError
from ..providers.base import PriceSeriesSource
from ..stats import StatisticsRecord, reduce_series
from .rate_limit import RateLimiter, RateLimitMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Success:
    record: StatisticsRecord

    @property
    def symbol(self) -> str:
        return self.record.symbol


@dataclass(frozen=True)
class Failure:
    symbol: str
    reason: ErrorKind
    detail: str = ""


Outcome = Union[Success, Failure]


@dataclass
class BatchResult:
    symbols: list[str]
    outcomes: list[Outcome] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for outcome in self.outcomes if isinstance(outcome, Success))

    @property
    def total_count(self) -> int:
        return len(self.symbols)

    @property
    def skipped(self) -> list[str]:
        """Symbols never attempted because a fail-fast budget stopped the batch."""
        return self.symbols[len(self.outcomes):]


def parse_symbols(raw_input: str) -> list[str]:
    symbols = [token.strip() for token in (raw_input or "").split(",")]
    symbols = [symbol for symbol in symbols if symbol]
    if not symbols:
        raise EmptyInputError(raw_input)
    return symbols


class TickerBatchAggregator:
    """Fetch and reduce a batch of tickers against one price source.

    Without a limiter the symbols are fetched concurrently and the outcomes
    are returned in input order. With a limiter they are fetched one at a
    time so the budget check sees the running count.
    """

    def __init__(
        self,
        source: PriceSeriesSource,
        limiter: Optional[RateLimiter] = None,
        max_workers: int = 8,
    ):
        self.source = source
        self.limiter = limiter
        self.max_workers = max_workers

    def run(self, raw_input: str) -> BatchResult:
        symbols = parse_symbols(raw_input)
        result = BatchResult(symbols=symbols)
        if self.limiter is None:
            result.outcomes = self._run_concurrent(symbols)
        else:
            result.outcomes = self._run_sequential(symbols, self.limiter)
        logger.info(
            "Batch via %s: %d of %d tickers succeeded",
            self.source.name,
            result.success_count,
            result.total_count,
        )
        return result

    def _run_concurrent(self, symbols: list[str]) -> list[Outcome]:
        workers = max(1, min(self.max_workers, len(symbols)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(self._attempt, symbols))

    def _run_sequential(self, symbols: list[str], limiter: RateLimiter) -> list[Outcome]:
        outcomes: list[Outcome] = []
        for index, symbol in enumerate(symbols):
            if not limiter.try_acquire():
                remaining = symbols[index:]
                if limiter.mode is RateLimitMode.FAIL_FAST:
                    logger.warning("Rate budget exhausted; skipping %d ticker(s)", len(remaining))
                    break
                logger.warning("Rate budget exhausted; rejecting %d ticker(s)", len(remaining))
                outcomes.extend(
                    Failure(symbol=s, reason=ErrorKind.RATE_LIMITED, detail="Client rate budget exhausted")
                    for s in remaining
                )
                break
            limiter.wait_turn()
            outcomes.append(self._attempt(symbol))
        return outcomes

    def _attempt(self, symbol: str) -> Outcome:
        try:
            series = self.source.fetch(symbol)
            return Success(reduce_series(series))
        except (SourceError, EmptySeriesError) as exc:
            logger.warning("Ticker %s failed: %s", symbol, exc)
            return Failure(symbol=symbol, reason=exc.kind, detail=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error fetching %s", symbol)
            return Failure(symbol=symbol, reason=ErrorKind.TRANSPORT, detail=str(exc))
