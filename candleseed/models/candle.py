"""Candle (OHLCV) data model."""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field


class Candle(BaseModel):
    """Represents a single daily OHLCV candle for one ticker."""

    id: Optional[int] = Field(None, description="Row id assigned by the database")
    ticker: str = Field(..., min_length=1, description="Ticker symbol")
    date: dt.date = Field(..., description="Trading date")
    open: float = Field(..., ge=0, description="Opening price")
    high: float = Field(..., ge=0, description="High price")
    low: float = Field(..., ge=0, description="Low price")
    close: float = Field(..., ge=0, description="Closing price")
    volume: int = Field(0, ge=0, description="Trading volume")

    model_config = {"frozen": True}

    def as_row(self) -> tuple:
        """Values in the column order used by the insert statement."""
        return (
            self.date.isoformat(),
            self.ticker,
            self.open,
            self.high,
            self.low,
            self.close,
            self.volume,
        )
