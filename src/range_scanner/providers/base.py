"""Source abstraction to isolate market data providers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Mapping, Protocol

import pandas as pd

from ..errors import ErrorKind, SourceError

DEFAULT_LIMIT = 365
PRICE_FIELDS = ("high", "low", "close")


@dataclass(frozen=True)
class PricePoint:
    date: date
    high: float
    low: float
    close: float


@dataclass(frozen=True)
class PriceSeries:
    symbol: str
    points: tuple[PricePoint, ...] = field(default_factory=tuple)

    def to_frame(self) -> pd.DataFrame:
        """Points as a frame in iteration order, rows with missing prices dropped."""
        frame = pd.DataFrame(
            {
                "date": [p.date for p in self.points],
                "high": [p.high for p in self.points],
                "low": [p.low for p in self.points],
                "close": [p.close for p in self.points],
            },
            columns=["date", *PRICE_FIELDS],
        )
        return frame.dropna().reset_index(drop=True)


class PriceSeriesSource(Protocol):
    name: str

    def fetch(self, symbol: str) -> PriceSeries:
        """Fetch the trailing daily series for a symbol or raise SourceError."""


def build_series(symbol: str, rows: Iterable[Mapping[str, Any]]) -> PriceSeries:
    """Build a series from provider rows carrying date/high/low/close keys.

    Rows missing any price field are skipped. A series left empty after
    filtering is a NO_DATA failure.
    """
    points = []
    for row in rows:
        if not row or any(row.get(key) is None for key in PRICE_FIELDS):
            continue
        try:
            point = PricePoint(
                date=_to_date(row["date"]),
                high=float(row["high"]),
                low=float(row["low"]),
                close=float(row["close"]),
            )
        except (KeyError, TypeError, ValueError):
            continue
        points.append(point)
    if not points:
        raise SourceError(ErrorKind.NO_DATA, f"Missing price fields for symbol: {symbol}")
    return PriceSeries(symbol=symbol, points=tuple(points))


def _to_date(value: Any) -> date:
    if isinstance(value, date):
        return value if type(value) is date else value.date()
    return pd.Timestamp(value).date()


__all__ = [
    "DEFAULT_LIMIT",
    "PricePoint",
    "PriceSeries",
    "PriceSeriesSource",
    "build_series",
]
