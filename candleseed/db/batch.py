"""Batched multi-row inserts for candles."""

import sqlite3
from dataclasses import dataclass
from typing import Sequence

from candleseed.exceptions import InsertError
from candleseed.logging import get_logger
from candleseed.models import Candle

logger = get_logger(__name__)

INSERT_COLUMNS = ("date", "ticker", "open", "high", "low", "close", "volume")


def insert_statement(rows: int) -> str:
    """Build a parameterized INSERT for ``rows`` candles."""
    placeholders = "(" + ",".join("?" * len(INSERT_COLUMNS)) + ")"
    return (
        f"INSERT INTO candles ({', '.join(INSERT_COLUMNS)}) VALUES "
        + ",".join([placeholders] * rows)
    )


@dataclass
class InsertStats:
    """What an insert run sent to the database."""

    rows: int = 0
    statements: int = 0
    transactions: int = 0

    def __add__(self, other: "InsertStats") -> "InsertStats":
        return InsertStats(
            rows=self.rows + other.rows,
            statements=self.statements + other.statements,
            transactions=self.transactions + other.transactions,
        )


class BatchInserter:
    """Insert candles with multi-row statements grouped into transactions.

    Candles are split into statements of ``batch_size`` rows and the
    statements into transactions of ``statements_per_tx``. The last
    statement carries whatever remains. A failing statement rolls back its
    transaction and raises; nothing is retried.

    The connection must be in autocommit mode (``isolation_level=None``)
    because transactions are opened and closed explicitly here.
    """

    def __init__(self, conn: sqlite3.Connection, batch_size: int = 50, statements_per_tx: int = 10):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if statements_per_tx < 1:
            raise ValueError("statements_per_tx must be at least 1")
        self.conn = conn
        self.batch_size = batch_size
        self.statements_per_tx = statements_per_tx

    def insert(self, candles: Sequence[Candle]) -> InsertStats:
        """Insert all candles in order.

        Args:
            candles: Candles to persist.

        Returns:
            Counts of rows, statements and transactions issued.

        Raises:
            InsertError: If any statement or commit fails.
        """
        stats = InsertStats()
        tx_size = self.batch_size * self.statements_per_tx

        for start in range(0, len(candles), tx_size):
            chunk = candles[start:start + tx_size]
            stats.statements += self._insert_transaction(chunk)
            stats.transactions += 1
            stats.rows += len(chunk)
            logger.debug(
                "Committed %d rows (%d/%d)", len(chunk), stats.rows, len(candles)
            )

        return stats

    def _insert_transaction(self, candles: Sequence[Candle]) -> int:
        """Insert one transaction's worth of candles, returning statements issued."""
        ticker = candles[0].ticker
        statements = 0
        try:
            self.conn.execute("BEGIN")
            for start in range(0, len(candles), self.batch_size):
                batch = candles[start:start + self.batch_size]
                params = [value for candle in batch for value in candle.as_row()]
                self.conn.execute(insert_statement(len(batch)), params)
                statements += 1
            self.conn.execute("COMMIT")
        except sqlite3.Error as e:
            self._rollback()
            raise InsertError(f"Insert for '{ticker}' failed: {e}", ticker=ticker) from e
        return statements

    def _rollback(self) -> None:
        if self.conn.in_transaction:
            self.conn.execute("ROLLBACK")
