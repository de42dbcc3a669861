"""Reading and parsing of per-ticker candle CSV files."""

from candleseed.ingest.layouts import LAYOUTS, ColumnSpec, Layout, get_layout
from candleseed.ingest.parser import parse_candle, parse_candles, strip_currency
from candleseed.ingest.reader import read_rows

__all__ = [
    "LAYOUTS",
    "ColumnSpec",
    "Layout",
    "get_layout",
    "parse_candle",
    "parse_candles",
    "strip_currency",
    "read_rows",
]
