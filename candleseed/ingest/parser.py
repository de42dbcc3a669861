"""Turn raw CSV rows into candles according to a layout."""

from datetime import datetime
from typing import Iterable, Optional

from pydantic import ValidationError

from candleseed.exceptions import CandleParseError
from candleseed.ingest.layouts import ColumnSpec, Layout
from candleseed.models import Candle


def strip_currency(value: str) -> str:
    """Remove dollar signs from a numeric field."""
    return value.replace("$", "")


def parse_candle(
    ticker: str,
    row: list[str],
    layout: Layout,
    line: Optional[int] = None,
) -> Candle:
    """Parse one CSV row into a candle.

    Args:
        ticker: Ticker symbol, usually the CSV file name stem.
        row: Raw string fields of one data row.
        layout: Column layout of the file.
        line: 1-based data line, used in error messages.

    Returns:
        The parsed candle.

    Raises:
        CandleParseError: If the date or a price cannot be parsed or a
            column is missing. An unparseable volume becomes 0 instead.
    """
    values = {}
    for column in layout.columns:
        if column.index >= len(row):
            raise CandleParseError(
                ticker, column.field, None,
                f"row has {len(row)} columns, need column {column.index}",
                line,
            )
        values[column.field] = _convert(ticker, column, row[column.index], layout, line)

    try:
        return Candle(ticker=ticker, **values)
    except ValidationError as e:
        # Only ticker can still be rejected here; fields were checked above
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "candle"
        raise CandleParseError(ticker, field, first.get("input"), first["msg"], line) from e


def parse_candles(ticker: str, rows: Iterable[list[str]], layout: Layout) -> list[Candle]:
    """Parse all data rows of a file, stopping at the first bad row."""
    return [
        parse_candle(ticker, row, layout, line=line)
        for line, row in enumerate(rows, start=1)
    ]


def _convert(ticker: str, column: ColumnSpec, raw: str, layout: Layout, line: Optional[int]):
    if column.transform == "date":
        try:
            return datetime.strptime(raw.strip(), layout.date_format).date()
        except ValueError as e:
            raise CandleParseError(ticker, column.field, raw, str(e), line) from e

    if column.transform == "price":
        try:
            price = float(strip_currency(raw))
        except ValueError as e:
            raise CandleParseError(ticker, column.field, raw, "not a number", line) from e
        if not price >= 0:
            raise CandleParseError(ticker, column.field, raw, "must be non-negative", line)
        return price

    # Volume is lenient: anything but plain ASCII digits counts as 0
    if raw.isascii() and raw.isdigit():
        return int(raw)
    return 0
