"""Turn batch results into display rows and summaries."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..batch import BatchResult, Failure, Outcome, Success
from ..errors import ErrorKind

COLUMNS = [
    "Ticker",
    "Current Price",
    "52W Low",
    "52W High",
    "Distance from Low",
    "Distance from High",
    "% to Low",
    "Low Date",
    "High Date",
]

ERROR_LABELS = {
    ErrorKind.NO_DATA: "No data",
    ErrorKind.TRANSPORT: "API Error",
    ErrorKind.UPSTREAM_REJECTED: "Rejected",
    ErrorKind.RATE_LIMITED: "Rate limited",
}

EXAMPLE_TICKERS = {
    "Tech": "AAPL, MSFT, GOOGL, AMZN",
    "Banks": "JPM, BAC, WFC, C",
    "Index ETFs": "SPY, QQQ, DIA, IWM",
}

NA = "N/A"


def format_currency(value: Optional[float]) -> str:
    return f"${value:.2f}" if value is not None else NA


def format_ratio(value: Optional[float]) -> str:
    return f"{value:.4f}" if value is not None else NA


def format_percent(value: Optional[float]) -> str:
    return f"{value * 100:.2f}%" if value is not None else NA


def format_date(value: Optional[date]) -> str:
    return value.isoformat() if isinstance(value, date) else NA


def error_label(reason: ErrorKind) -> str:
    return ERROR_LABELS.get(reason, "Error")


def outcome_row(outcome: Outcome) -> list[str]:
    """Nine display cells for one outcome."""
    if isinstance(outcome, Failure):
        label = error_label(outcome.reason)
        return [outcome.symbol] + [label] * (len(COLUMNS) - 1)
    record = outcome.record
    return [
        record.symbol,
        format_currency(record.current_price),
        format_currency(record.period_low),
        format_currency(record.period_high),
        format_ratio(record.distance_from_low),
        format_ratio(record.distance_from_high),
        format_percent(record.percent_to_low),
        format_date(record.low_date),
        format_date(record.high_date),
    ]


def build_rows(result: BatchResult) -> list[list[str]]:
    return [outcome_row(outcome) for outcome in result.outcomes]


def status_message(result: BatchResult) -> tuple[str, str]:
    """Status line and its level (``success`` or ``error``)."""
    if result.success_count > 0:
        return (
            f"Data fetch complete. {result.success_count} of {result.total_count} "
            "tickers processed successfully.",
            "success",
        )
    return "Failed to fetch data for any tickers. Please check your symbols.", "error"


def last_updated(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return f"Last updated: {now.strftime('%Y-%m-%d %H:%M:%S')}"


def build_batch_summary(result: BatchResult) -> dict:
    outcomes = []
    for outcome in result.outcomes:
        if isinstance(outcome, Success):
            record = outcome.record
            outcomes.append(
                {
                    "symbol": record.symbol,
                    "status": "success",
                    "current_price": record.current_price,
                    "period_low": record.period_low,
                    "period_high": record.period_high,
                    "low_date": record.low_date.isoformat(),
                    "high_date": record.high_date.isoformat(),
                    "distance_from_low": record.distance_from_low,
                    "distance_from_high": record.distance_from_high,
                    "percent_to_low": record.percent_to_low,
                }
            )
        else:
            outcomes.append(
                {
                    "symbol": outcome.symbol,
                    "status": "failure",
                    "reason": outcome.reason.value,
                    "detail": outcome.detail,
                }
            )
    return {
        "total_count": result.total_count,
        "success_count": result.success_count,
        "skipped": result.skipped,
        "outcomes": outcomes,
    }
