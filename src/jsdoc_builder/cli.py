import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from jsdoc_builder import __version__
from jsdoc_builder.pipeline import GenerateOptions, generate_jsdoc_for_files

app = typer.Typer(
    help="Generate JSDoc comments for JavaScript and TypeScript files",
    add_completion=False,
)

console = Console()


def _configure_logging():
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, show_time=False)],
        force=True,
    )


def _version_callback(value: bool):
    """Show version and exit."""
    if value:
        console.print(f"jsdoc-builder version {__version__}")
        raise typer.Exit()


@app.command()
def main(
    files: list[Path] = typer.Argument(
        ...,
        help="The TypeScript or JavaScript file(s) to process",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the config file (default: ./jsdoc-builder.config.json)",
    ),
    no_ai: bool = typer.Option(
        False,
        "--no-ai",
        help="Disable AI descriptions for this run",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """Add JSDoc comments to undocumented functions in the given files.

    Functions that already carry a /** ... */ comment are left alone.
    """
    _configure_logging()

    options = GenerateOptions(config_path=config, no_ai=no_ai)
    results = asyncio.run(generate_jsdoc_for_files(files, options))

    failed = False
    for path, result in zip(files, results):
        if isinstance(result, BaseException):
            typer.echo(f"Error: {path}: {result}", err=True)
            failed = True
        elif result:
            console.print(f"[green]✓[/green] Updated {path}")
        else:
            console.print(f"No changes needed for {path}")

    if failed:
        raise typer.Exit(code=1)
