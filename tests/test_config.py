import pytest

from range_scanner.batch import RateLimitMode
from range_scanner.config import RateLimitConfig, load_config_bundle
from range_scanner.config import ProviderConfig
from range_scanner.providers.yahoo_chart import YahooChartSource
from range_scanner.scanner import build_aggregator, build_source, resolve_rate_limit

from conftest import StubSource


def test_defaults_used_without_config_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("RANGE_SCANNER_CONFIG", raising=False)
    config = load_config_bundle()
    assert config.batch.default_provider == "yahoo_chart"
    assert {p.id for p in config.providers} == {"marketstack", "yahoo_chart", "alphavantage", "yfinance"}
    alpha = config.provider("alphavantage")
    assert alpha.rate_limit.budget == 5
    assert alpha.rate_limit.mode is RateLimitMode.FAIL_FAST
    assert alpha.limit == 365


def test_yaml_overrides_merge_by_provider_id(tmp_path):
    path = tmp_path / "providers.yml"
    path.write_text(
        "batch:\n"
        "  default_provider: alphavantage\n"
        "providers:\n"
        "  - id: alphavantage\n"
        "    rate_limit:\n"
        "      mode: reject_remaining\n",
        encoding="utf-8",
    )
    config = load_config_bundle(path)
    limits = config.provider().rate_limit
    assert config.provider().id == "alphavantage"
    assert limits.mode is RateLimitMode.REJECT_REMAINING
    assert limits.budget == 5
    assert config.provider("marketstack").proxy_url.startswith("https://")


def test_missing_explicit_config_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config_bundle(tmp_path / "nope.yml")


def test_unknown_provider_raises(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ValueError):
        load_config_bundle().provider("bloomberg")


def test_api_key_comes_from_environment(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MARKETSTACK_API_KEY", "abc123")
    assert load_config_bundle().provider("marketstack").api_key() == "abc123"


def test_cli_style_overrides_build_a_limiter(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config = load_config_bundle()
    provider = config.provider("yahoo_chart")
    assert build_aggregator(config, "yahoo_chart", source=StubSource()).limiter is None

    limits = resolve_rate_limit(provider, rate_budget=3, mode=RateLimitMode.REJECT_REMAINING)
    aggregator = build_aggregator(config, "yahoo_chart", rate_limit=limits, source=StubSource())
    assert aggregator.limiter.budget == 3
    assert aggregator.limiter.mode is RateLimitMode.REJECT_REMAINING
    assert aggregator.max_workers == 8


def test_rate_limit_config_disabled_by_default():
    assert RateLimitConfig().build_limiter() is None


def test_build_source_uses_module_factory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    source = build_source(load_config_bundle().provider("yahoo_chart"))
    assert isinstance(source, YahooChartSource)


def test_build_source_rejects_module_without_factory():
    provider = ProviderConfig(id="broken", module="range_scanner.errors")
    with pytest.raises(ValueError, match="build_provider"):
        build_source(provider)
