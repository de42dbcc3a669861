"""The seed command."""

from pathlib import Path
from typing import Optional

import click
from rich.table import Table

from candleseed.cli.main import console, dsn_option, env_file_option, fail, get_settings
from candleseed.config import MAX_BATCH_SIZE
from candleseed.db.store import CandleStore
from candleseed.exceptions import SeedError
from candleseed.ingest.layouts import LAYOUTS
from candleseed.logging import setup_logging
from candleseed.seeder import SeedReport, Seeder


@click.command()
@click.option(
    "-d", "--data-dir",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory of <TICKER>.csv files (default: SEED_DATA_DIR or ./data).",
)
@click.option(
    "-l", "--layout",
    default=None,
    type=click.Choice(sorted(LAYOUTS), case_sensitive=False),
    help="CSV column layout (default: SEED_LAYOUT or yahoo).",
)
@click.option(
    "--batch-size",
    default=None,
    type=click.IntRange(1, MAX_BATCH_SIZE),
    help="Rows per INSERT statement (default: 50).",
)
@click.option(
    "--statements-per-tx",
    default=None,
    type=click.IntRange(min=1),
    help="INSERT statements per transaction (default: 10).",
)
@dsn_option
@env_file_option
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def seed(
    data_dir: Optional[Path],
    layout: Optional[str],
    batch_size: Optional[int],
    statements_per_tx: Optional[int],
    dsn: Optional[str],
    env_file: Path,
    verbose: bool,
) -> None:
    """Load every <TICKER>.csv in the data directory into the database.

    Tickers that already have rows are skipped. The first error stops
    the run and exits with status 1.

    \b
    Examples:
      candleseed seed                          # Use settings from .env
      candleseed seed -d ./nasdaq -l nasdaq    # US-dated Nasdaq exports
      candleseed seed --batch-size 100         # Bigger INSERT statements
    """
    settings = get_settings(
        env_file,
        dsn=dsn,
        data_dir=data_dir,
        layout=layout,
        batch_size=batch_size,
        statements_per_tx=statements_per_tx,
        log_level="DEBUG" if verbose else None,
    )
    setup_logging(settings.log_level)

    try:
        with CandleStore(
            settings.dsn,
            batch_size=settings.batch_size,
            statements_per_tx=settings.statements_per_tx,
        ) as store:
            report = Seeder(settings, store).run()
    except SeedError as e:
        fail(e)

    console.print(_report_table(report))


def _report_table(report: SeedReport) -> Table:
    table = Table(title="Seed summary", show_header=True, header_style="bold cyan")
    table.add_column("Result")
    table.add_column("Tickers", justify="right")
    table.add_column("Symbols", style="dim")

    table.add_row("[green]Loaded[/green]", str(len(report.loaded)), ", ".join(report.loaded) or "-")
    table.add_row("[yellow]Skipped[/yellow]", str(len(report.skipped)), ", ".join(report.skipped) or "-")
    if report.empty:
        table.add_row("Empty", str(len(report.empty)), ", ".join(report.empty))

    table.caption = (
        f"{report.inserts.rows} rows in {report.inserts.statements} statements, "
        f"{report.inserts.transactions} transactions"
    )
    return table
