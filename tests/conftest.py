"""Shared helpers for candleseed tests."""

from datetime import date, timedelta

import pytest

from candleseed.models import Candle

YAHOO_HEADER = "Date,Open,High,Low,Close,Adj Close,Volume"
NASDAQ_HEADER = "Date,Close/Last,Volume,Open,High,Low"

AAPL_ROWS = [
    "2023-01-03,$130.28,$130.90,$124.17,$125.07,$124.22,112117500",
    "2023-01-04,$126.89,$128.66,$125.08,$126.36,$125.50,89113600",
    "2023-01-05,$127.13,$127.77,$124.76,$125.02,$124.17,80962700",
]


def make_candles(count: int, ticker: str = "TEST", start: date = date(2020, 1, 1)) -> list[Candle]:
    """Build ``count`` consecutive daily candles."""
    return [
        Candle(
            ticker=ticker,
            date=start + timedelta(days=i),
            open=100.0 + i,
            high=105.0 + i,
            low=97.0 + i,
            close=102.0 + i,
            volume=10000 + i,
        )
        for i in range(count)
    ]


def write_csv(path, header: str, rows: list[str]) -> None:
    path.write_text("\n".join([header, *rows]) + "\n", encoding="utf-8")


@pytest.fixture
def clean_env(monkeypatch):
    """Keep settings from the developer's shell out of the tests."""
    for name in (
        "DSN", "SEED_DSN", "SEED_DATA_DIR", "SEED_LAYOUT",
        "SEED_BATCH_SIZE", "SEED_STATEMENTS_PER_TX", "SEED_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
