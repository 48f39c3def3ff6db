"""Range Scanner: 52-week range statistics for batches of tickers."""

from importlib.metadata import version as _version

__all__ = ["get_version"]


def get_version() -> str:
    """Return the installed package version."""
    try:
        return _version("range-scanner")
    except Exception:  # pragma: no cover - fallback for editable installs
        return "0.0.0"
