from datetime import date

import pytest

from range_scanner.errors import EmptySeriesError
from range_scanner.providers.base import PricePoint, PriceSeries
from range_scanner.stats import reduce_series

from conftest import flat_series


def test_reduce_picks_most_recent_close_and_extremes():
    series = PriceSeries(
        symbol="AAPL",
        points=(
            PricePoint(date=date(2024, 1, 1), high=110, low=100, close=105),
            PricePoint(date=date(2024, 1, 2), high=120, low=90, close=95),
        ),
    )
    record = reduce_series(series)
    assert record.current_price == 95
    assert record.period_low == 90
    assert record.period_high == 120
    assert record.low_date == date(2024, 1, 2)
    assert record.high_date == date(2024, 1, 2)
    assert record.distance_from_low == pytest.approx(5 / 90)
    assert record.distance_from_high == pytest.approx(-25 / 120)
    assert record.percent_to_low == pytest.approx(95 / 90 - 1)


def test_recency_is_decided_by_date_not_position():
    series = PriceSeries(
        symbol="MSFT",
        points=(
            PricePoint(date=date(2024, 3, 1), high=50, low=40, close=41),
            PricePoint(date=date(2024, 5, 1), high=55, low=45, close=52),
            PricePoint(date=date(2024, 1, 1), high=60, low=30, close=33),
        ),
    )
    record = reduce_series(series)
    assert record.current_price == 52
    assert record.low_date == date(2024, 1, 1)
    assert record.high_date == date(2024, 1, 1)


def test_tie_break_uses_first_point_in_iteration_order():
    series = PriceSeries(
        symbol="T",
        points=(
            PricePoint(date=date(2024, 2, 1), high=10, low=5, close=7),
            PricePoint(date=date(2024, 1, 1), high=10, low=5, close=6),
        ),
    )
    record = reduce_series(series)
    assert record.low_date == date(2024, 2, 1)
    assert record.high_date == date(2024, 2, 1)


def test_flat_series_has_zero_distances():
    record = reduce_series(flat_series("ONE", price=42.0, days=1))
    assert record.distance_from_low == 0
    assert record.distance_from_high == 0
    assert record.percent_to_low == 0


def test_non_positive_low_yields_absent_ratios():
    series = PriceSeries(
        symbol="ODD",
        points=(
            PricePoint(date=date(2024, 1, 1), high=10, low=0, close=5),
            PricePoint(date=date(2024, 1, 2), high=12, low=-1, close=6),
        ),
    )
    record = reduce_series(series)
    assert record.period_low == -1
    assert record.distance_from_low is None
    assert record.percent_to_low is None
    assert record.distance_from_high == pytest.approx(-0.5)


def test_zero_high_yields_absent_distance_from_high():
    series = PriceSeries(symbol="Z", points=(PricePoint(date=date(2024, 1, 1), high=0, low=0, close=0),))
    record = reduce_series(series)
    assert record.distance_from_high is None
    assert record.distance_from_low is None


def test_inverted_low_high_does_not_crash():
    series = PriceSeries(symbol="INV", points=(PricePoint(date=date(2024, 1, 1), high=5, low=10, close=7),))
    record = reduce_series(series)
    assert record.period_low == 10
    assert record.period_high == 5


def test_missing_prices_are_ignored():
    series = PriceSeries(
        symbol="GAP",
        points=(
            PricePoint(date=date(2024, 1, 1), high=float("nan"), low=1, close=1),
            PricePoint(date=date(2024, 1, 2), high=9, low=8, close=8.5),
        ),
    )
    record = reduce_series(series)
    assert record.period_low == 8
    assert record.current_price == 8.5


def test_empty_series_raises():
    with pytest.raises(EmptySeriesError):
        reduce_series(PriceSeries(symbol="NONE"))


def test_reduce_is_idempotent():
    series = PriceSeries(
        symbol="IDEM",
        points=(
            PricePoint(date=date(2024, 1, 1), high=1.1, low=0.3, close=0.7),
            PricePoint(date=date(2024, 1, 2), high=1.7, low=0.9, close=1.3),
        ),
    )
    assert reduce_series(series) == reduce_series(series)
