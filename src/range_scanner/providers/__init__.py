"""Price series sources, one adapter module per provider."""

from .base import PricePoint, PriceSeries, PriceSeriesSource, build_series

__all__ = ["PricePoint", "PriceSeries", "PriceSeriesSource", "build_series"]
