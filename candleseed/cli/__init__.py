"""Command-line interface for candleseed.

Provides the ``seed`` command plus ``status`` and ``layouts`` for
inspecting the store and the supported CSV formats.
"""

from candleseed.cli.main import cli, main

__all__ = ["cli", "main"]
