"""Seed the candles table from a directory of per-ticker CSV files.

Each ``<TICKER>.csv`` file is handled in turn: tickers already in the
store are skipped without opening the file, the rest are read, parsed in
full and inserted. The first error stops the run.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Protocol, Sequence

from candleseed.config import SeedSettings
from candleseed.db.batch import InsertStats
from candleseed.exceptions import DataFileError
from candleseed.ingest.layouts import get_layout
from candleseed.ingest.parser import parse_candles
from candleseed.ingest.reader import read_rows
from candleseed.logging import get_logger
from candleseed.models import Candle

logger = get_logger(__name__)

CSV_SUFFIX = ".csv"


class Store(Protocol):
    """What the seeder needs from a candle store."""

    def has_ticker(self, ticker: str) -> bool: ...

    def insert_candles(
        self,
        candles: Sequence[Candle],
        batch_size: int,
        statements_per_tx: int,
    ) -> InsertStats: ...


@dataclass
class SeedReport:
    """Outcome of a seeding run."""

    loaded: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    empty: list[str] = field(default_factory=list)
    inserts: InsertStats = field(default_factory=InsertStats)

    @property
    def rows_inserted(self) -> int:
        return self.inserts.rows


def ticker_from_path(path: Path) -> str:
    """Ticker symbol for a CSV file: its name without the extension."""
    return path.stem


def list_csv_files(data_dir: Path) -> list[Path]:
    """CSV files in ``data_dir`` sorted by name.

    Raises:
        DataFileError: If the directory is missing or cannot be listed.
    """
    data_dir = Path(data_dir)
    if not data_dir.is_dir():
        raise DataFileError(f"Data directory '{data_dir}' does not exist", path=data_dir)
    try:
        entries = sorted(data_dir.iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise DataFileError(f"Could not list '{data_dir}': {e.strerror or e}", path=data_dir) from e

    files = []
    for entry in entries:
        if entry.suffix.lower() == CSV_SUFFIX and entry.is_file():
            files.append(entry)
        else:
            logger.debug("Ignoring %s", entry.name)
    return files


class Seeder:
    """Drive existence check, read, parse and insert for every ticker file."""

    def __init__(
        self,
        settings: SeedSettings,
        store: Store,
        read_rows: Callable[[Path], list[list[str]]] = read_rows,
    ):
        """Initialize the seeder.

        Args:
            settings: Run settings (data directory and layout are used here).
            store: Candle store, already connected.
            read_rows: CSV reader, replaceable in tests.
        """
        self.settings = settings
        self.store = store
        self.read_rows = read_rows
        self.layout = get_layout(settings.layout)

    def run(self) -> SeedReport:
        """Seed every ticker file in the data directory.

        Returns:
            What was loaded and skipped.

        Raises:
            SeedError: On the first failure from any stage.
        """
        report = SeedReport()

        for path in list_csv_files(self.settings.data_dir):
            ticker = ticker_from_path(path)

            if self.store.has_ticker(ticker):
                logger.info("Data for ticker '%s' already exists. Skipping.", ticker)
                report.skipped.append(ticker)
                continue

            logger.info("Inserting data for '%s'.", ticker)
            stats = self.seed_file(ticker, path)
            if stats.rows == 0:
                report.empty.append(ticker)
                continue

            report.loaded.append(ticker)
            report.inserts = report.inserts + stats

        if not report.loaded:
            logger.info("No data to seed.")
        else:
            logger.info(
                "Inserted %d rows for %d tickers (%d skipped).",
                report.rows_inserted, len(report.loaded), len(report.skipped),
            )
        return report

    def seed_file(self, ticker: str, path: Path) -> InsertStats:
        """Read, parse and insert one file.

        The file is parsed completely before anything is inserted, so a bad
        row leaves no rows behind for this ticker.
        """
        rows = self.read_rows(path)
        if not rows:
            logger.warning("%s has no data rows.", path.name)
            return InsertStats()

        candles = parse_candles(ticker, rows, self.layout)
        stats = self.store.insert_candles(
            candles,
            batch_size=self.settings.batch_size,
            statements_per_tx=self.settings.statements_per_tx,
        )
        logger.info(
            "Inserted %d rows for '%s' in %d statements.", stats.rows, ticker, stats.statements
        )
        return stats
