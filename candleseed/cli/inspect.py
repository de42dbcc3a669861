"""Commands for inspecting the store and the supported layouts."""

from pathlib import Path
from typing import Optional

import click
from rich.table import Table

from candleseed.cli.main import console, dsn_option, env_file_option, fail, get_settings
from candleseed.db.store import CandleStore
from candleseed.exceptions import SeedError
from candleseed.ingest.layouts import LAYOUTS
from candleseed.logging import setup_logging


@click.command()
@dsn_option
@env_file_option
def status(dsn: Optional[str], env_file: Path) -> None:
    """Show the tickers stored in the database."""
    settings = get_settings(env_file, dsn=dsn)
    setup_logging("WARNING")

    try:
        with CandleStore(settings.dsn) as store:
            tickers = store.get_tickers()
    except SeedError as e:
        fail(e)

    if not tickers:
        console.print("[yellow]No candles stored yet.[/yellow]")
        return

    table = Table(title="Stored tickers", show_header=True, header_style="bold cyan")
    table.add_column("Ticker", style="bold")
    table.add_column("Rows", justify="right")
    table.add_column("From", style="dim")
    table.add_column("To", style="dim")
    for summary in tickers:
        table.add_row(summary.ticker, str(summary.rows), summary.first_date, summary.last_date)
    table.caption = f"{sum(s.rows for s in tickers)} candles across {len(tickers)} tickers"
    console.print(table)


@click.command()
def layouts() -> None:
    """List the CSV layouts the seeder understands."""
    table = Table(title="CSV layouts", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold")
    table.add_column("Date format")
    table.add_column("Columns")
    table.add_column("Description", style="dim")

    for layout in LAYOUTS.values():
        columns = ", ".join(
            f"{column.index}:{column.field}"
            for column in sorted(layout.columns, key=lambda c: c.index)
        )
        table.add_row(layout.name, layout.date_format, columns, layout.description)
    console.print(table)
