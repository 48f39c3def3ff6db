"""Marketstack end-of-day source, optionally routed through a raw-URL proxy.

The free Marketstack plan only serves plain HTTP, so requests can be wrapped
in a proxy such as ``https://api.allorigins.win/raw?url=`` that fetches the
encoded upstream URL on our behalf.
"""

from __future__ import annotations

import logging
from urllib.parse import quote, urlencode

import httpx

from ..config import ProviderConfig
from ..errors import ErrorKind, SourceError
from .base import DEFAULT_LIMIT, PriceSeries, PriceSeriesSource, build_series
from .http import build_client, get_json

logger = logging.getLogger(__name__)

BASE_URL = "http://api.marketstack.com/v1/eod"


class MarketstackSource(PriceSeriesSource):
    name = "marketstack"

    def __init__(
        self,
        api_key: str | None,
        base_url: str = BASE_URL,
        proxy_url: str | None = None,
        limit: int = DEFAULT_LIMIT,
        client: httpx.Client | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.proxy_url = proxy_url
        self.limit = limit
        self.client = client or build_client()

    def request_url(self, symbol: str) -> str:
        query = urlencode(
            {
                "access_key": self.api_key or "",
                "symbols": symbol,
                "limit": self.limit,
                "sort": "DESC",
            }
        )
        api_url = f"{self.base_url}?{query}"
        if not self.proxy_url:
            return api_url
        return self.proxy_url + quote(api_url, safe="")

    def fetch(self, symbol: str) -> PriceSeries:
        if not self.api_key:
            raise SourceError(ErrorKind.UPSTREAM_REJECTED, "Marketstack access key is not configured")
        payload = get_json(self.client, self.request_url(symbol), label=f"Marketstack {symbol}")
        if not isinstance(payload, dict):
            raise SourceError(ErrorKind.NO_DATA, "No data returned from Marketstack")
        error = payload.get("error")
        if error:
            detail = error.get("message") if isinstance(error, dict) else str(error)
            logger.warning("Marketstack rejected %s: %s", symbol, detail)
            raise SourceError(ErrorKind.UPSTREAM_REJECTED, detail or "Marketstack error")
        rows = payload.get("data")
        if not isinstance(rows, list) or not rows:
            raise SourceError(ErrorKind.NO_DATA, "No data returned from Marketstack")
        return build_series(symbol, (row for row in rows if isinstance(row, dict)))


def build_provider(config: ProviderConfig) -> PriceSeriesSource:
    return MarketstackSource(
        api_key=config.api_key(),
        base_url=config.base_url or BASE_URL,
        proxy_url=config.proxy_url,
        limit=config.limit,
        client=build_client(timeout=config.timeout),
    )
