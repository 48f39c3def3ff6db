from datetime import date, datetime

from range_scanner.batch import BatchResult, Failure, Success
from range_scanner.errors import ErrorKind
from range_scanner.reports import build_batch_summary, build_rows, last_updated, outcome_row, status_message
from range_scanner.stats import StatisticsRecord


def _record(symbol="AAPL", low=90.0, high=120.0, current=95.0):
    return StatisticsRecord(
        symbol=symbol,
        current_price=current,
        period_low=low,
        period_high=high,
        low_date=date(2024, 1, 2),
        high_date=date(2024, 3, 4),
        distance_from_low=(current - low) / low if low > 0 else None,
        distance_from_high=(current - high) / high,
        percent_to_low=current / low - 1 if low > 0 else None,
    )


def test_success_row_has_nine_formatted_columns():
    row = outcome_row(Success(_record()))
    assert row == [
        "AAPL",
        "$95.00",
        "$90.00",
        "$120.00",
        "0.0556",
        "-0.2083",
        "5.56%",
        "2024-01-02",
        "2024-03-04",
    ]


def test_absent_ratios_render_as_na():
    row = outcome_row(Success(_record(low=0.0)))
    assert row[4] == "N/A"
    assert row[6] == "N/A"


def test_failure_row_repeats_error_label():
    row = outcome_row(Failure(symbol="ZZZ", reason=ErrorKind.NO_DATA))
    assert row == ["ZZZ"] + ["No data"] * 8
    assert outcome_row(Failure(symbol="X", reason=ErrorKind.TRANSPORT))[1] == "API Error"
    assert outcome_row(Failure(symbol="X", reason=ErrorKind.RATE_LIMITED))[1] == "Rate limited"


def test_status_message_and_summary():
    result = BatchResult(
        symbols=["AAPL", "ZZZ", "MSFT"],
        outcomes=[Success(_record()), Failure(symbol="ZZZ", reason=ErrorKind.UPSTREAM_REJECTED, detail="bad")],
    )
    message, level = status_message(result)
    assert level == "success"
    assert message == "Data fetch complete. 1 of 3 tickers processed successfully."
    assert len(build_rows(result)) == 2

    summary = build_batch_summary(result)
    assert summary["total_count"] == 3
    assert summary["success_count"] == 1
    assert summary["skipped"] == ["MSFT"]
    assert summary["outcomes"][0]["low_date"] == "2024-01-02"
    assert summary["outcomes"][1] == {"symbol": "ZZZ", "status": "failure", "reason": "upstream_rejected", "detail": "bad"}


def test_status_message_when_nothing_succeeds():
    result = BatchResult(symbols=["ZZZ"], outcomes=[Failure(symbol="ZZZ", reason=ErrorKind.NO_DATA)])
    assert status_message(result)[1] == "error"


def test_last_updated_stamp():
    assert last_updated(datetime(2024, 5, 1, 9, 30)) == "Last updated: 2024-05-01 09:30:00"
