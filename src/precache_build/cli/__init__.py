"""CLI module."""

from __future__ import annotations

from precache_build.cli.config import PrecacheSettings, get_settings
from precache_build.cli.main import app

__all__ = ["PrecacheSettings", "app", "get_settings"]
