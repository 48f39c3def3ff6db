"""Error taxonomy shared by sources, reduction and the batch aggregator."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    TRANSPORT = "transport"
    NO_DATA = "no_data"
    UPSTREAM_REJECTED = "upstream_rejected"
    RATE_LIMITED = "rate_limited"


class EmptyInputError(ValueError):
    """Raised when a raw ticker string yields no symbols."""

    def __init__(self, raw_input: str):
        super().__init__(f"No ticker symbols found in {raw_input!r}")
        self.raw_input = raw_input


class SourceError(Exception):
    def __init__(self, kind: ErrorKind, detail: str):
        super().__init__(f"{kind.value}: {detail}")
        self.kind = kind
        self.detail = detail


class EmptySeriesError(ValueError):
    """Raised by the reduction when a series has no usable points."""

    kind = ErrorKind.NO_DATA

    def __init__(self, symbol: str):
        super().__init__(f"No usable price points for {symbol}")
        self.symbol = symbol


__all__ = ["ErrorKind", "EmptyInputError", "SourceError", "EmptySeriesError"]
