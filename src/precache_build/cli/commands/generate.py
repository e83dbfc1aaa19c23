"""Generate command implementation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer
from rich.console import Console
from rich.table import Table

from precache_build.cli.config import get_settings
from precache_build.errors import PrecacheError
from precache_build.manifest.builder import ManifestBuilder
from precache_build.manifest.config import PrecacheConfig
from precache_build.manifest.serialization import render_manifest_module, serialize_manifest_json

if TYPE_CHECKING:
    from pathlib import Path

    from precache_build.manifest.model import ManifestResult

console = Console()
err_console = Console(stderr=True)

OUTPUT_FORMATS = ("json", "js")


def run_generate(
    *,
    config_file: Path | None,
    output: Path | None,
    output_format: str,
    json_output: bool,
) -> None:
    """Execute generate command.

    Args:
        config_file: JSON config file; falls back to PRECACHE_CONFIG_FILE.
        output: Path to write the serialized manifest.
        output_format: "json" or "js" for the written file.
        json_output: Print raw JSON instead of a summary.
    """
    if output_format not in OUTPUT_FORMATS:
        err_console.print(
            f"[red]✗[/red] Unknown format {output_format!r}; use one of {', '.join(OUTPUT_FORMATS)}"
        )
        raise SystemExit(1)

    path = config_file or get_settings().config_file
    if not json_output:
        console.print(f"[blue]i[/blue] Building precache manifest from {path}...")

    try:
        config = PrecacheConfig.from_file(path)
        result = ManifestBuilder(config).build()
    except PrecacheError as e:
        err_console.print(f"[red]✗[/red] Manifest generation failed: {e}")
        raise SystemExit(1) from None

    if json_output:
        typer.echo(result.to_canonical_json())
    else:
        _print_summary(config.glob_directory, result)

    if output:
        if output_format == "js":
            output.write_text(render_manifest_module(result.manifest_entries), encoding="utf-8")
        else:
            text = serialize_manifest_json(result.manifest_entries, indent=2) + "\n"
            output.write_text(text, encoding="utf-8")
        if not json_output:
            console.print(f"[green]✓[/green] Manifest written to {output}")


def _print_summary(glob_directory: str, result: ManifestResult) -> None:
    """Print manifest summary and size warnings.

    Args:
        glob_directory: Directory the manifest was built from.
        result: The generated manifest.
    """
    table = Table(title="Manifest Summary")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Glob Directory", glob_directory)
    table.add_row("Entries", str(result.count))
    table.add_row("Total Size", f"{result.size} bytes")
    table.add_row("Fingerprint", result.fingerprint()[:12])
    if result.warnings:
        table.add_row("Skipped", f"[yellow]{len(result.warnings)} too large[/yellow]")

    console.print(table)

    if result.manifest_entries:
        entries = Table(title="Entries")
        entries.add_column("URL", style="cyan")
        entries.add_column("Revision")
        entries.add_column("Size", justify="right")
        for entry in result.manifest_entries:
            entries.add_row(
                entry.url,
                entry.revision or "[dim]-[/dim]",
                str(entry.size) if entry.size is not None else "[dim]-[/dim]",
            )
        console.print(entries)

    for warning in result.warnings:
        console.print(f"[yellow]![/yellow] {warning}")

    console.print(
        f"[green]✓[/green] The manifest will precache {result.count} files, "
        f"totaling {result.size} bytes."
    )
