"""Exceptions raised while seeding candles.

Every error carries a ``stage`` label so the CLI can tell the user which
part of the pipeline failed. All of them abort the run.
"""

from pathlib import Path
from typing import Optional


class SeedError(Exception):
    """Base exception for all seeding errors."""

    stage = "seed"


class ConfigError(SeedError):
    """Raised when configuration is missing or invalid."""

    stage = "config"


class DatabaseConnectionError(SeedError):
    """Raised when the database cannot be opened or pinged."""

    stage = "connect"


class DataFileError(SeedError):
    """Raised when the data directory or a CSV file cannot be read."""

    stage = "read"

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class CsvFormatError(DataFileError):
    """Raised when a CSV file is malformed."""


class CandleParseError(SeedError):
    """Raised when a CSV row cannot be turned into a candle."""

    stage = "parse"

    def __init__(
        self,
        ticker: str,
        field: str,
        value: Optional[str],
        reason: str,
        line: Optional[int] = None,
    ):
        self.ticker = ticker
        self.field = field
        self.value = value
        self.reason = reason
        self.line = line
        location = f" at data line {line}" if line is not None else ""
        super().__init__(
            f"{ticker}{location}: invalid {field} {value!r} ({reason})"
        )


class StoreError(SeedError):
    """Raised when a query against the candle store fails."""

    stage = "query"


class InsertError(StoreError):
    """Raised when an insert statement or its transaction fails."""

    stage = "insert"

    def __init__(self, message: str, ticker: Optional[str] = None):
        super().__init__(message)
        self.ticker = ticker
