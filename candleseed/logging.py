"""Logging setup routed through rich."""

import logging

from rich.console import Console
from rich.logging import RichHandler

# Log output goes to stderr so command output on stdout stays clean
err_console = Console(stderr=True)


def setup_logging(log_level: str = "INFO") -> None:
    """Configure the root logger with a rich handler.

    Args:
        log_level: Level name such as ``DEBUG`` or ``INFO``. Unknown names
            fall back to ``INFO``.
    """
    handler = RichHandler(
        console=err_console,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def get_logger(name: str) -> logging.Logger:
    """Return a logger with the given name."""
    return logging.getLogger(name)
