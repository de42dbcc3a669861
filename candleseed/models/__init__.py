"""Data models for candleseed."""

from candleseed.models.candle import Candle

__all__ = [
    "Candle",
]
