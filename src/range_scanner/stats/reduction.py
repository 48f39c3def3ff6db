"""Reduce a daily price series to its trailing-range statistics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

import pandas as pd

from ..errors import EmptySeriesError
from ..providers.base import PriceSeries


@dataclass(frozen=True)
class StatisticsRecord:
    symbol: str
    current_price: float
    period_low: float
    period_high: float
    low_date: date
    high_date: date
    distance_from_low: Optional[float]
    distance_from_high: Optional[float]
    percent_to_low: Optional[float]


def reduce_series(series: PriceSeries) -> StatisticsRecord:
    df = series.to_frame()
    if df.empty:
        raise EmptySeriesError(series.symbol)

    # Recency comes from the dates themselves; provider order is not trusted.
    dates = pd.to_datetime(df["date"])
    latest = df.loc[dates.idxmax()]
    current_price = float(latest["close"])
    latest_date = latest["date"]

    period_low = float(df["low"].min())
    period_high = float(df["high"].max())
    low_date = _first_date_where(df, "low", period_low, latest_date)
    high_date = _first_date_where(df, "high", period_high, latest_date)

    return StatisticsRecord(
        symbol=series.symbol,
        current_price=current_price,
        period_low=period_low,
        period_high=period_high,
        low_date=low_date,
        high_date=high_date,
        distance_from_low=distance_from_low(current_price, period_low),
        distance_from_high=distance_from_high(current_price, period_high),
        percent_to_low=percent_to_low(current_price, period_low),
    )


def distance_from_low(current: float, low: float) -> float | None:
    if low <= 0:
        return None
    return (current - low) / low


def distance_from_high(current: float, high: float) -> float | None:
    if high == 0:
        return None
    return (current - high) / high


def percent_to_low(current: float, low: float) -> float | None:
    if low <= 0:
        return None
    return current / low - 1


def _first_date_where(df: pd.DataFrame, column: str, value: float, fallback: date) -> date:
    matches = df.loc[df[column] == value, "date"]
    if matches.empty:
        return fallback
    return matches.iloc[0]
