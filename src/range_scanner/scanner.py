"""Wire configuration, sources and the batch aggregator together."""

from __future__ import annotations

import importlib
from typing import Optional

from .batch import RateLimitMode, TickerBatchAggregator
from .config import ConfigBundle, ProviderConfig, RateLimitConfig
from .providers.base import PriceSeriesSource


def build_source(provider: ProviderConfig) -> PriceSeriesSource:
    module = importlib.import_module(provider.module)
    if not hasattr(module, "build_provider"):
        raise ValueError(f"Provider module {provider.module} does not define build_provider")
    return module.build_provider(provider)


def resolve_rate_limit(
    provider: ProviderConfig,
    rate_budget: Optional[int] = None,
    mode: Optional[RateLimitMode] = None,
    window_ms: Optional[int] = None,
    min_interval_ms: Optional[int] = None,
) -> RateLimitConfig:
    """Apply caller overrides on top of the provider's configured rate limit."""
    updates = {
        "budget": rate_budget,
        "mode": mode,
        "window_ms": window_ms,
        "min_interval_ms": min_interval_ms,
    }
    updates = {key: value for key, value in updates.items() if value is not None}
    return RateLimitConfig(**{**provider.rate_limit.model_dump(), **updates})


def build_aggregator(
    config: ConfigBundle,
    provider_id: Optional[str] = None,
    rate_limit: Optional[RateLimitConfig] = None,
    max_workers: Optional[int] = None,
    source: Optional[PriceSeriesSource] = None,
) -> TickerBatchAggregator:
    provider = config.provider(provider_id)
    limits = rate_limit or provider.rate_limit
    return TickerBatchAggregator(
        source=source or build_source(provider),
        limiter=limits.build_limiter(),
        max_workers=max_workers or config.batch.max_workers,
    )
