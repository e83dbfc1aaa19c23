"""Main CLI entry point using Typer.

This module defines the top-level CLI commands:
- precache-build generate: Build the precache manifest
- precache-build validate: Validate the manifest configuration
"""

from __future__ import annotations

import sys
from pathlib import Path  # noqa: TC003 - Typer requires runtime access
from typing import Annotated

import structlog
import typer
from rich.console import Console

from precache_build import __version__
from precache_build.cli.config import get_settings

app = typer.Typer(
    name="precache-build",
    help="precache-build - Precache manifest generator",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"precache-build {__version__}")
        raise typer.Exit()


def configure_logging(level: int) -> None:
    """Send structlog output to stderr so stdout stays machine-readable."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


@app.callback()
def main(
    version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output."),
    ] = False,
) -> None:
    """precache-build - Precache manifest generator.

    Use 'precache-build COMMAND --help' for information on specific commands.
    """
    settings = get_settings()
    configure_logging(10 if verbose else settings.log_level_number)


@app.command()
def generate(
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="JSON config file (default: precache-config.json)."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write manifest to file."),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output file format: json or js."),
    ] = "json",
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output raw JSON."),
    ] = False,
) -> None:
    """Generate the precache manifest.

    Globs the configured directory, computes a revision for every asset
    and prints the resulting manifest.

    Examples:
        precache-build generate

        precache-build generate --config build/precache.json --output manifest.json

        precache-build generate --format js --output precache-manifest.js
    """
    from precache_build.cli.commands.generate import run_generate  # noqa: PLC0415

    run_generate(
        config_file=config,
        output=output,
        output_format=output_format,
        json_output=json_output,
    )


@app.command()
def validate(
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="JSON config file (default: precache-config.json)."),
    ] = None,
) -> None:
    """Validate the manifest configuration.

    Checks option types, legacy option conflicts and templated URL shapes
    without reading the glob directory.

    Examples:
        precache-build validate

        precache-build validate --config build/precache.json
    """
    from precache_build.cli.commands.validate import run_validate  # noqa: PLC0415

    run_validate(config_file=config)


if __name__ == "__main__":
    app()
