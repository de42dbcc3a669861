"""Configuration loaded from the environment with pydantic-settings.

The database DSN comes from ``DSN`` (or ``SEED_DSN``); every other setting
uses the ``SEED_`` prefix. Values may also come from a ``.env`` file in the
working directory.
"""

from pathlib import Path
from typing import Any, Optional

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from candleseed.exceptions import ConfigError
from candleseed.ingest.layouts import LAYOUTS

# SQLite caps bound parameters per statement at 32766; seven per candle
MAX_BATCH_SIZE = 1000


class SeedSettings(BaseSettings):
    """Settings for a seeding run."""

    model_config = SettingsConfigDict(
        env_prefix="SEED_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    dsn: str = Field(..., min_length=1, validation_alias=AliasChoices("DSN", "SEED_DSN"))
    data_dir: Path = Path("data")
    layout: str = "yahoo"
    batch_size: int = Field(50, ge=1, le=MAX_BATCH_SIZE)  # rows per INSERT
    statements_per_tx: int = Field(10, ge=1)
    log_level: str = "INFO"

    @field_validator("layout")
    @classmethod
    def _known_layout(cls, value: str) -> str:
        name = value.strip().lower()
        if name not in LAYOUTS:
            known = ", ".join(sorted(LAYOUTS))
            raise ValueError(f"unknown layout '{value}' (expected one of: {known})")
        return name


def load_settings(env_file: Optional[Path] = Path(".env"), **overrides: Any) -> SeedSettings:
    """Load settings from the environment and apply explicit overrides.

    Args:
        env_file: Dotenv file to read, or None to read only the process
            environment.
        **overrides: Field values that win over the environment. ``None``
            values are ignored so CLI options can be passed straight through.

    Returns:
        The validated settings.

    Raises:
        ConfigError: If a required setting is missing or a value is invalid.
    """
    updates = {key: value for key, value in overrides.items() if value is not None}
    # Init values outrank the environment; dsn is only accepted by its alias
    if "dsn" in updates:
        updates["DSN"] = updates.pop("dsn")
    try:
        return SeedSettings(_env_file=env_file, **updates)
    except ValidationError as e:
        raise ConfigError(_describe(e)) from e


def _describe(error: ValidationError) -> str:
    """Flatten a pydantic validation error into one line."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "settings"
        if item["type"] == "missing" and location.lower() in ("dsn", "seed_dsn"):
            parts.append("DSN is not set (export DSN or add it to .env)")
        else:
            parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)
