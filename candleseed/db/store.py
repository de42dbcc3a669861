"""SQLite candle store for candleseed."""

import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from candleseed.db.batch import BatchInserter, InsertStats
from candleseed.exceptions import ConfigError, DatabaseConnectionError, StoreError
from candleseed.logging import get_logger
from candleseed.models import Candle

logger = get_logger(__name__)

MEMORY = ":memory:"

_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS candles (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    ticker TEXT NOT NULL,
    date TEXT NOT NULL,
    open REAL NOT NULL,
    high REAL NOT NULL,
    low REAL NOT NULL,
    close REAL NOT NULL,
    volume INTEGER NOT NULL
)
"""

_CREATE_INDEX_SQL = "CREATE INDEX IF NOT EXISTS idx_candles_ticker ON candles(ticker)"


def resolve_dsn(dsn: str) -> tuple[str, bool]:
    """Translate a DSN into arguments for ``sqlite3.connect``.

    Accepted forms are ``sqlite:///relative.db``, ``sqlite:////abs/path.db``,
    ``sqlite://`` or ``:memory:`` for an in-memory database, ``file:`` URIs
    and plain filesystem paths.

    Returns:
        The database argument and whether it must be opened as a URI.

    Raises:
        ConfigError: For an empty DSN or any other URL scheme.
    """
    dsn = dsn.strip()
    if not dsn:
        raise ConfigError("DSN is empty")
    if dsn in (MEMORY, "sqlite://", "sqlite:///:memory:"):
        return MEMORY, False
    if dsn.startswith("sqlite:///"):
        return dsn[len("sqlite:///"):], False
    if dsn.startswith("file:"):
        return dsn, True
    if "://" in dsn:
        scheme = dsn.split("://", 1)[0]
        raise ConfigError(f"Unsupported DSN scheme '{scheme}' (only sqlite is supported)")
    return dsn, False


@dataclass(frozen=True)
class TickerSummary:
    """Row count and date range stored for one ticker."""

    ticker: str
    rows: int
    first_date: str
    last_date: str


class CandleStore:
    """SQLite-backed store for the candles table.

    Holds a single connection for its lifetime. The schema is created on
    connect if it does not exist.

    Usage:
        with CandleStore("sqlite:///candles.db") as store:
            if not store.has_ticker("AAPL"):
                store.insert_candles(candles)
    """

    def __init__(self, dsn: str, batch_size: int = 50, statements_per_tx: int = 10):
        """Initialize the store without connecting.

        Args:
            dsn: Database DSN, see ``resolve_dsn``.
            batch_size: Rows per INSERT statement.
            statements_per_tx: INSERT statements per transaction.
        """
        self.database, self._uri = resolve_dsn(dsn)
        self.batch_size = batch_size
        self.statements_per_tx = statements_per_tx
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        """The open connection.

        Raises:
            DatabaseConnectionError: If ``connect()`` has not been called.
        """
        if self._conn is None:
            raise DatabaseConnectionError("Database not connected. Call connect() first.")
        return self._conn

    def connect(self) -> None:
        """Open the connection, ping it and create the schema."""
        try:
            if not self._uri and self.database != MEMORY:
                Path(self.database).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.database, uri=self._uri, isolation_level=None)
            self._conn.row_factory = sqlite3.Row
        except (sqlite3.Error, OSError) as e:
            raise DatabaseConnectionError(f"Could not open database '{self.database}': {e}") from e
        logger.info("Opened database %s", self.database)

        try:
            self.ping()
            self._init_schema()
        except DatabaseConnectionError:
            self.close()
            raise

    def close(self) -> None:
        """Close the connection if open."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("Closed database %s", self.database)

    def ping(self) -> None:
        """Run a trivial query to prove the database is usable."""
        try:
            self.conn.execute("SELECT 1").fetchone()
        except sqlite3.Error as e:
            raise DatabaseConnectionError(f"Could not ping database '{self.database}': {e}") from e
        logger.debug("Pinged database %s", self.database)

    def _init_schema(self) -> None:
        """Create the candles table and ticker index if missing."""
        try:
            self.conn.execute(_CREATE_TABLE_SQL)
            self.conn.execute(_CREATE_INDEX_SQL)
        except sqlite3.Error as e:
            raise DatabaseConnectionError(f"Could not create schema: {e}") from e

    # ==================== Queries ====================

    def has_ticker(self, ticker: str) -> bool:
        """Return True if at least one candle exists for ``ticker``."""
        try:
            return self.count(ticker) > 0
        except StoreError as e:
            raise StoreError(f"Existence check for '{ticker}' failed: {e}") from e

    def count(self, ticker: Optional[str] = None) -> int:
        """Count candles, optionally for one ticker."""
        if ticker is None:
            return self._scalar("SELECT COUNT(1) FROM candles")
        return self._scalar("SELECT COUNT(1) FROM candles WHERE ticker = ?", (ticker,))

    def get_tickers(self) -> list[TickerSummary]:
        """Summaries of every ticker in the store, ordered by ticker."""
        try:
            rows = self.conn.execute(
                """
                SELECT ticker, COUNT(1) AS row_count, MIN(date) AS first_date, MAX(date) AS last_date
                FROM candles
                GROUP BY ticker
                ORDER BY ticker
                """
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Could not list tickers: {e}") from e
        return [
            TickerSummary(
                ticker=row["ticker"],
                rows=row["row_count"],
                first_date=row["first_date"],
                last_date=row["last_date"],
            )
            for row in rows
        ]

    def get_candles(self, ticker: str) -> list[Candle]:
        """All candles for ``ticker`` in date order."""
        try:
            rows = self.conn.execute(
                """
                SELECT id, ticker, date, open, high, low, close, volume
                FROM candles
                WHERE ticker = ?
                ORDER BY date, id
                """,
                (ticker,),
            ).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Could not read candles for '{ticker}': {e}") from e
        return [Candle(**dict(row)) for row in rows]

    # ==================== Inserts ====================

    def insert_candles(
        self,
        candles: Sequence[Candle],
        batch_size: Optional[int] = None,
        statements_per_tx: Optional[int] = None,
    ) -> InsertStats:
        """Insert candles in batched transactions.

        Args:
            candles: Candles to persist.
            batch_size: Rows per statement, defaults to the store's.
            statements_per_tx: Statements per transaction, defaults to the store's.
        """
        inserter = BatchInserter(
            self.conn,
            batch_size or self.batch_size,
            statements_per_tx or self.statements_per_tx,
        )
        return inserter.insert(candles)

    def _scalar(self, sql: str, params: tuple = ()) -> int:
        try:
            return self.conn.execute(sql, params).fetchone()[0]
        except sqlite3.Error as e:
            raise StoreError(f"Query failed: {e}") from e

    def __enter__(self) -> "CandleStore":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
