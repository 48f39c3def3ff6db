"""Configuration bundle loading."""

from .loader import BatchConfig, ConfigBundle, ProviderConfig, RateLimitConfig, load_config_bundle

__all__ = ["BatchConfig", "ConfigBundle", "ProviderConfig", "RateLimitConfig", "load_config_bundle"]
