"""Shared HTTP plumbing for the JSON-over-HTTP sources."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..errors import ErrorKind, SourceError

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
}


def build_client(timeout: float = 30, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    return httpx.Client(headers=HEADERS, follow_redirects=True, timeout=timeout, transport=transport)


def get_json(client: httpx.Client, url: str, params: dict | None = None, label: str = "") -> Any:
    """GET a JSON document, mapping transport and decoding problems to SourceError."""
    try:
        resp = client.get(url, params=params)
    except httpx.HTTPError as exc:
        logger.warning("%s request failed: %s", label or url, exc)
        raise SourceError(ErrorKind.TRANSPORT, f"{type(exc).__name__}: {exc}") from exc
    if not resp.is_success:
        logger.warning("%s returned %s", label or url, resp.status_code)
        raise SourceError(ErrorKind.TRANSPORT, f"HTTP error! status: {resp.status_code}")
    try:
        return resp.json()
    except ValueError as exc:
        raise SourceError(ErrorKind.NO_DATA, f"Malformed JSON payload: {exc}") from exc
