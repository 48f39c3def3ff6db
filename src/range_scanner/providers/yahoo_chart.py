"""Direct Yahoo Finance client using the v8 chart API.

The chart endpoint works without auth or crumb, so no credential is needed.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import httpx

from ..config import ProviderConfig
from ..errors import ErrorKind, SourceError
from .base import DEFAULT_LIMIT, PriceSeries, PriceSeriesSource, build_series
from .http import build_client, get_json

logger = logging.getLogger(__name__)

BASE_URL = "https://query1.finance.yahoo.com"


class YahooChartSource(PriceSeriesSource):
    name = "yahoo_chart"

    def __init__(
        self,
        base_url: str = BASE_URL,
        range_: str = "1y",
        limit: int = DEFAULT_LIMIT,
        client: httpx.Client | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.range_ = range_
        self.limit = limit
        self.client = client or build_client()

    def fetch(self, symbol: str) -> PriceSeries:
        url = f"{self.base_url}/v8/finance/chart/{symbol}"
        params = {"range": self.range_, "interval": "1d", "includePrePost": "false"}
        payload = get_json(self.client, url, params=params, label=f"Yahoo chart {symbol}")
        chart = (payload.get("chart") if isinstance(payload, dict) else None) or {}
        if not isinstance(chart, dict):
            raise SourceError(ErrorKind.NO_DATA, f"Malformed chart payload for {symbol}")
        if chart.get("error"):
            error = chart["error"]
            detail = error.get("description") if isinstance(error, dict) else str(error)
            logger.warning("Yahoo chart error for %s: %s", symbol, detail)
            raise SourceError(ErrorKind.UPSTREAM_REJECTED, detail or "Yahoo chart error")
        results = chart.get("result") or []
        if not isinstance(results, list) or not results:
            raise SourceError(ErrorKind.NO_DATA, f"No chart result for {symbol}")
        if not isinstance(results[0], dict):
            raise SourceError(ErrorKind.NO_DATA, f"Malformed chart result for {symbol}")
        try:
            rows = _parse_chart_result(results[0])
        except (AttributeError, IndexError, TypeError, ValueError, OverflowError, OSError) as exc:
            raise SourceError(ErrorKind.NO_DATA, f"Malformed chart result for {symbol}: {exc}") from exc
        return build_series(symbol, rows[-self.limit:])


def _parse_chart_result(result: dict) -> list[dict]:
    timestamps = result.get("timestamp") or []
    quotes = ((result.get("indicators") or {}).get("quote") or [{}])[0]
    highs = quotes.get("high") or []
    lows = quotes.get("low") or []
    closes = quotes.get("close") or []

    rows = []
    for i, ts in enumerate(timestamps):
        rows.append(
            {
                "date": datetime.fromtimestamp(ts, tz=timezone.utc).date(),
                "high": highs[i] if i < len(highs) else None,
                "low": lows[i] if i < len(lows) else None,
                "close": closes[i] if i < len(closes) else None,
            }
        )
    return rows


def build_provider(config: ProviderConfig) -> PriceSeriesSource:
    return YahooChartSource(
        base_url=config.base_url or BASE_URL,
        limit=config.limit,
        client=build_client(timeout=config.timeout),
    )
