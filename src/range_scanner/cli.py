"""Typer CLI for the Range Scanner."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .batch import BatchResult, RateLimitMode, Success
from .config import load_config_bundle
from .errors import EmptyInputError
from .log import setup_logging
from .reports import COLUMNS, build_batch_summary, build_rows, last_updated, status_message
from .scanner import build_aggregator, resolve_rate_limit

app = typer.Typer(help="Range Scanner CLI")


def _render_table(result: BatchResult) -> Table:
    table = Table(*COLUMNS, title="52-Week Range")
    for outcome, row in zip(result.outcomes, build_rows(result)):
        if isinstance(outcome, Success):
            pct = outcome.record.percent_to_low
            style = "green" if pct is not None and pct >= 0 else "red"
            cells = [f"[bold]{row[0]}[/bold]", *row[1:6], f"[{style}]{row[6]}[/{style}]", *row[7:]]
        else:
            cells = [f"[bold]{row[0]}[/bold]", *(f"[red]{cell}[/red]" for cell in row[1:])]
        table.add_row(*cells)
    return table


@app.command()
def fetch(
    tickers: str = typer.Argument(..., help="Comma-separated ticker symbols, e.g. 'AAPL, MSFT'"),
    provider: Optional[str] = typer.Option(None, help="Configured provider id"),
    rate_budget: Optional[int] = typer.Option(None, help="Requests allowed per window"),
    mode: Optional[RateLimitMode] = typer.Option(None, help="What to do once the budget is spent"),
    window_ms: Optional[int] = typer.Option(None, help="Rate window length in milliseconds"),
    min_interval_ms: Optional[int] = typer.Option(None, help="Minimum spacing between requests"),
    workers: Optional[int] = typer.Option(None, help="Concurrent fetches when no rate limit applies"),
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to providers.yml"),
    as_json: bool = typer.Option(False, "--json", help="Print the batch summary as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log each request"),
) -> None:
    """Fetch trailing-year price ranges for TICKERS."""
    setup_logging(logging.DEBUG if verbose else logging.ERROR)
    config = load_config_bundle(Path(config_path) if config_path else None)
    try:
        provider_cfg = config.provider(provider)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--provider") from exc
    limits = resolve_rate_limit(provider_cfg, rate_budget, mode, window_ms, min_interval_ms)
    aggregator = build_aggregator(config, provider_cfg.id, rate_limit=limits, max_workers=workers)
    try:
        result = aggregator.run(tickers)
    except EmptyInputError as exc:
        raise typer.BadParameter("Please enter at least one stock ticker.", param_hint="TICKERS") from exc

    console = Console()
    if as_json:
        typer.echo(json.dumps(build_batch_summary(result), indent=2))
    else:
        console.print(_render_table(result))
        message, level = status_message(result)
        color = "green" if level == "success" else "red"
        console.print(f"[{color}]{message}[/{color}]")
        if result.skipped:
            console.print(f"[yellow]Rate budget exhausted, not attempted: {', '.join(result.skipped)}[/yellow]")
        console.print(f"[dim]{last_updated()}[/dim]")
    if result.success_count == 0:
        raise typer.Exit(code=1)


@app.command()
def providers(
    config_path: Optional[str] = typer.Option(None, "--config", help="Path to providers.yml"),
) -> None:
    """List configured providers and their rate limits."""
    config = load_config_bundle(Path(config_path) if config_path else None)
    console = Console()
    table = Table("Provider", "Module", "Credential", "Rate limit")
    for entry in config.providers:
        limits = entry.rate_limit
        if limits.enabled:
            budget = "unbounded" if limits.budget is None else f"{limits.budget}/{limits.window_ms}ms"
            rate = f"{budget} ({limits.mode.value}, spacing {limits.min_interval_ms}ms)"
        else:
            rate = "none"
        marker = " (default)" if entry.id == config.batch.default_provider else ""
        table.add_row(f"{entry.id}{marker}", entry.module, entry.api_key_env or "-", rate)
    console.print(table)


if __name__ == "__main__":
    app()
