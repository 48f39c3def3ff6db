import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from range_scanner.errors import ErrorKind, SourceError  # noqa: E402
from range_scanner.providers.base import PricePoint, PriceSeries  # noqa: E402


class StubSource:
    """Serves canned series; symbols listed in ``errors`` raise instead."""

    name = "stub"

    def __init__(self, series=None, errors=None):
        self.series = series or {}
        self.errors = errors or {}
        self.calls = []

    def fetch(self, symbol):
        self.calls.append(symbol)
        if symbol in self.errors:
            raise self.errors[symbol]
        if symbol in self.series:
            return self.series[symbol]
        return flat_series(symbol, price=100.0)


class FakeClock:
    def __init__(self, start=1_000.0):
        self.now = start
        self.slept = []

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds

    def sleep(self, seconds):
        self.slept.append(seconds)
        self.now += seconds


def flat_series(symbol, price=100.0, days=3):
    start = date(2024, 1, 2)
    points = tuple(
        PricePoint(date=start + timedelta(days=i), high=price, low=price, close=price) for i in range(days)
    )
    return PriceSeries(symbol=symbol, points=points)


@pytest.fixture()
def stub_source():
    return StubSource(
        errors={
            "BAD": SourceError(ErrorKind.UPSTREAM_REJECTED, "Invalid API call"),
            "DOWN": SourceError(ErrorKind.TRANSPORT, "HTTP error! status: 503"),
        }
    )


@pytest.fixture()
def clock():
    return FakeClock()
