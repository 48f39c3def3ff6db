"""Load YAML configuration bundles for the scanner."""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ..batch.rate_limit import RateLimiter, RateLimitMode

CONFIG_DIR = Path("configs")
CONFIG_PATH = CONFIG_DIR / "providers.yml"
CONFIG_ENV = "RANGE_SCANNER_CONFIG"

DEFAULTS: Dict[str, Any] = {
    "batch": {"default_provider": "yahoo_chart", "max_workers": 8},
    "providers": [
        {
            "id": "marketstack",
            "module": "range_scanner.providers.marketstack",
            "base_url": "http://api.marketstack.com/v1/eod",
            "proxy_url": "https://api.allorigins.win/raw?url=",
            "api_key_env": "MARKETSTACK_API_KEY",
        },
        {
            "id": "yahoo_chart",
            "module": "range_scanner.providers.yahoo_chart",
            "base_url": "https://query1.finance.yahoo.com",
        },
        {
            "id": "alphavantage",
            "module": "range_scanner.providers.alphavantage",
            "base_url": "https://www.alphavantage.co/query",
            "api_key_env": "ALPHAVANTAGE_API_KEY",
            "rate_limit": {"budget": 5, "mode": "fail_fast", "window_ms": 60_000, "min_interval_ms": 12_000},
        },
        {
            "id": "yfinance",
            "module": "range_scanner.providers.yahoo",
        },
    ],
}


class RateLimitConfig(BaseModel):
    budget: Optional[int] = Field(None, ge=0, description="Attempts per window; None is unbounded")
    mode: RateLimitMode = RateLimitMode.FAIL_FAST
    window_ms: int = Field(60_000, gt=0)
    min_interval_ms: int = Field(0, ge=0)

    @property
    def enabled(self) -> bool:
        return self.budget is not None or self.min_interval_ms > 0

    def build_limiter(self) -> RateLimiter | None:
        if not self.enabled:
            return None
        return RateLimiter(
            budget=self.budget,
            mode=self.mode,
            window_ms=self.window_ms,
            min_interval_ms=self.min_interval_ms,
        )


class ProviderConfig(BaseModel):
    id: str = Field(..., description="Provider identifier, e.g., marketstack")
    module: str = Field(..., description="Python path to provider implementation")
    base_url: Optional[str] = None
    proxy_url: Optional[str] = None
    api_key_env: Optional[str] = None
    limit: int = Field(365, gt=0, description="Maximum number of daily bars requested")
    timeout: int = 30
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)

    def api_key(self) -> str | None:
        if not self.api_key_env:
            return None
        load_dotenv()
        return os.getenv(self.api_key_env) or None


class BatchConfig(BaseModel):
    default_provider: str = "yahoo_chart"
    max_workers: int = Field(8, gt=0)


class ConfigBundle(BaseModel):
    batch: BatchConfig = Field(default_factory=BatchConfig)
    providers: list[ProviderConfig]

    def provider(self, provider_id: str | None = None) -> ProviderConfig:
        wanted = provider_id or self.batch.default_provider
        for provider in self.providers:
            if provider.id == wanted:
                return provider
        known = ", ".join(p.id for p in self.providers)
        raise ValueError(f"Unknown provider {wanted!r} (configured: {known})")


def load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle) or {}


def _merge_dict(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge_dict(base.get(key, {}), value)
        else:
            base[key] = value
    return base


def _merge_providers(base: list[Dict[str, Any]], overrides: list[Dict[str, Any]]) -> list[Dict[str, Any]]:
    merged = {entry["id"]: entry for entry in base}
    for entry in overrides:
        current = merged.get(entry["id"], {})
        merged[entry["id"]] = _merge_dict(current, entry)
    return list(merged.values())


def load_config_bundle(path: Path | None = None) -> ConfigBundle:
    data = copy.deepcopy(DEFAULTS)
    file_path = Path(path or os.getenv(CONFIG_ENV) or CONFIG_PATH)
    if file_path.exists():
        file_cfg = load_yaml(file_path)
        if file_cfg.get("batch"):
            data["batch"] = _merge_dict(data["batch"], file_cfg["batch"])
        if file_cfg.get("providers"):
            data["providers"] = _merge_providers(data["providers"], file_cfg["providers"])
    elif path is not None:
        raise FileNotFoundError(f"Config file {file_path} not found")
    return ConfigBundle(**data)
