"""Yahoo Finance source backed by the yfinance library."""

from __future__ import annotations

import logging

import pandas as pd
import yfinance as yf

from ..config import ProviderConfig
from ..errors import ErrorKind, SourceError
from .base import DEFAULT_LIMIT, PriceSeries, PriceSeriesSource, build_series

logger = logging.getLogger(__name__)


class YFinanceSource(PriceSeriesSource):
    name = "yfinance"

    def __init__(self, period: str = "1y", limit: int = DEFAULT_LIMIT, downloader=yf.download):
        self.period = period
        self.limit = limit
        self._download = downloader

    def fetch(self, symbol: str) -> PriceSeries:
        try:
            data = self._download(symbol, period=self.period, interval="1d", progress=False, auto_adjust=False)
        except Exception as exc:
            logger.warning("yfinance download failed for %s: %s", symbol, exc)
            raise SourceError(ErrorKind.TRANSPORT, str(exc)) from exc
        if data is None or data.empty:
            raise SourceError(ErrorKind.NO_DATA, f"No data returned from yfinance for {symbol}")
        if isinstance(data.columns, pd.MultiIndex):
            data.columns = data.columns.get_level_values(0)
        data = data.rename(columns=lambda c: c.lower().replace(" ", "_")).tail(self.limit)
        rows = (
            {"date": idx, "high": row.get("high"), "low": row.get("low"), "close": row.get("close")}
            for idx, row in _without_nan(data).iterrows()
        )
        return build_series(symbol, rows)


def _without_nan(data: pd.DataFrame) -> pd.DataFrame:
    return data.astype(object).where(pd.notna(data), None)


def build_provider(config: ProviderConfig) -> PriceSeriesSource:
    return YFinanceSource(limit=config.limit)
