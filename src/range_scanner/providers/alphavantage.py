"""Alpha Vantage daily time-series source.

The free tier allows a handful of calls per minute and reports throttling
inside a 200 response, so this provider is normally paired with a client-side
rate budget (see ``configs/providers.yml``).
"""

from __future__ import annotations

import logging

import httpx

from ..config import ProviderConfig
from ..errors import ErrorKind, SourceError
from .base import DEFAULT_LIMIT, PriceSeries, PriceSeriesSource, build_series
from .http import build_client, get_json

logger = logging.getLogger(__name__)

BASE_URL = "https://www.alphavantage.co/query"
SERIES_KEY = "Time Series (Daily)"
NOTICE_KEYS = ("Error Message", "Note", "Information")
# Alpha Vantage "compact" output covers the latest 100 bars.
COMPACT_SIZE = 100


class AlphaVantageSource(PriceSeriesSource):
    name = "alphavantage"

    def __init__(
        self,
        api_key: str | None,
        base_url: str = BASE_URL,
        limit: int = DEFAULT_LIMIT,
        client: httpx.Client | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.limit = limit
        self.client = client or build_client()

    def fetch(self, symbol: str) -> PriceSeries:
        if not self.api_key:
            raise SourceError(ErrorKind.UPSTREAM_REJECTED, "Alpha Vantage API key is not configured")
        params = {
            "function": "TIME_SERIES_DAILY",
            "symbol": symbol,
            "outputsize": "compact" if self.limit <= COMPACT_SIZE else "full",
            "apikey": self.api_key,
        }
        payload = get_json(self.client, self.base_url, params=params, label=f"Alpha Vantage {symbol}")
        if not isinstance(payload, dict):
            raise SourceError(ErrorKind.NO_DATA, "No data returned from Alpha Vantage")
        for key in NOTICE_KEYS:
            if payload.get(key):
                logger.warning("Alpha Vantage notice for %s: %s", symbol, payload[key])
                raise SourceError(ErrorKind.UPSTREAM_REJECTED, str(payload[key]))
        series = payload.get(SERIES_KEY)
        if not isinstance(series, dict) or not series:
            raise SourceError(ErrorKind.NO_DATA, f"No daily series for {symbol}")
        days = sorted(series, reverse=True)[: self.limit]
        return build_series(symbol, (_parse_bar(day, series[day]) for day in days))


def _parse_bar(day: str, bar: dict) -> dict:
    bar = bar if isinstance(bar, dict) else {}
    return {
        "date": day,
        "high": bar.get("2. high"),
        "low": bar.get("3. low"),
        "close": bar.get("4. close"),
    }


def build_provider(config: ProviderConfig) -> PriceSeriesSource:
    return AlphaVantageSource(
        api_key=config.api_key(),
        base_url=config.base_url or BASE_URL,
        limit=config.limit,
        client=build_client(timeout=config.timeout),
    )
