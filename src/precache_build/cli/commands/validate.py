"""Validate command implementation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console

from precache_build.cli.config import get_settings
from precache_build.errors import ManifestConfigError
from precache_build.manifest.config import GlobDependencies, PrecacheConfig

if TYPE_CHECKING:
    from pathlib import Path

console = Console()
err_console = Console(stderr=True)


def run_validate(*, config_file: Path | None) -> None:
    """Execute validate command."""
    path = config_file or get_settings().config_file
    console.print(f"[blue]i[/blue] Validating {path}...")

    try:
        config = PrecacheConfig.from_file(path)
    except ManifestConfigError as e:
        err_console.print(f"[red]✗[/red] Invalid configuration: {e}")
        raise SystemExit(1) from None

    composite = sum(isinstance(d, GlobDependencies) for d in config.templated_urls.values())
    console.print(f"  Glob directory: {config.glob_directory}")
    console.print(f"  Glob patterns: {len(config.glob_patterns)}")
    console.print(
        f"  Templated URLs: {len(config.templated_urls)} "
        f"({composite} composite, {len(config.templated_urls) - composite} string)"
    )
    console.print("[green]✓[/green] Configuration valid")
