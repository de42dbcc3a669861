"""Main CLI entry point for candleseed."""

from pathlib import Path
from typing import Any, NoReturn, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from candleseed.config import SeedSettings, load_settings
from candleseed.exceptions import SeedError
from candleseed.logging import err_console

# Console for rich output
console = Console()

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

dsn_option = click.option(
    "--dsn",
    default=None,
    help="Database DSN, overrides the DSN environment variable.",
)
env_file_option = click.option(
    "--env-file",
    default=".env",
    show_default=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Dotenv file to load settings from.",
)


def get_settings(env_file: Optional[Path], **overrides: Any) -> SeedSettings:
    """Load settings, exiting with an error panel if they are invalid."""
    try:
        return load_settings(env_file=env_file, **overrides)
    except SeedError as e:
        fail(e)


def fail(error: SeedError) -> NoReturn:
    """Print an error panel to stderr and exit with status 1."""
    err_console.print(Panel(
        f"[red]Seed failed during {error.stage}:[/red]\n\n{escape(str(error))}",
        title="[bold red]Error[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="candleseed")
def cli() -> None:
    """candleseed - load per-ticker OHLCV CSV files into a candles table.

    \b
    Quick Start:
      export DSN=sqlite:///candles.db
      candleseed seed --data-dir data     # Load every <TICKER>.csv
      candleseed status                   # Show what is stored
    """


def _register_commands() -> None:
    from candleseed.cli.inspect import layouts, status
    from candleseed.cli.seed import seed

    cli.add_command(seed)
    cli.add_command(status)
    cli.add_command(layouts)


_register_commands()


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
