"""Column layouts for the CSV formats the seeder understands.

A layout is pure data: which column holds which candle field, how that
column is converted, and the date format. Supporting another provider
means adding an entry to ``LAYOUTS``.
"""

from dataclasses import dataclass
from typing import Literal

from candleseed.exceptions import ConfigError

Transform = Literal["date", "price", "volume"]


@dataclass(frozen=True)
class ColumnSpec:
    """Maps one candle field to a CSV column."""

    field: str
    index: int
    transform: Transform


@dataclass(frozen=True)
class Layout:
    """A named column-to-field mapping for one CSV provider format."""

    name: str
    description: str
    date_format: str
    columns: tuple[ColumnSpec, ...]


YAHOO = Layout(
    name="yahoo",
    description="Date,Open,High,Low,Close,Adj Close,Volume (ISO dates)",
    date_format="%Y-%m-%d",
    columns=(
        ColumnSpec("date", 0, "date"),
        ColumnSpec("open", 1, "price"),
        ColumnSpec("high", 2, "price"),
        ColumnSpec("low", 3, "price"),
        ColumnSpec("close", 4, "price"),
        ColumnSpec("volume", 6, "volume"),
    ),
)

NASDAQ = Layout(
    name="nasdaq",
    description="Date,Close/Last,Volume,Open,High,Low (US dates)",
    date_format="%m/%d/%Y",
    columns=(
        ColumnSpec("date", 0, "date"),
        ColumnSpec("close", 1, "price"),
        ColumnSpec("volume", 2, "volume"),
        ColumnSpec("open", 3, "price"),
        ColumnSpec("high", 4, "price"),
        ColumnSpec("low", 5, "price"),
    ),
)

LAYOUTS: dict[str, Layout] = {layout.name: layout for layout in (YAHOO, NASDAQ)}


def get_layout(name: str) -> Layout:
    """Look up a built-in layout by name (case-insensitive).

    Raises:
        ConfigError: If no layout has that name.
    """
    try:
        return LAYOUTS[name.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(LAYOUTS))
        raise ConfigError(f"Unknown layout '{name}' (expected one of: {known})") from None
