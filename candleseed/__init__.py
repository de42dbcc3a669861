"""candleseed - load per-ticker OHLCV CSV files into a candles table."""

__version__ = "0.1.0"
