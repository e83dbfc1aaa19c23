"""Shared fixtures."""
from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import structlog

FileTree = Callable[[dict[str, str | bytes]], Path]


@pytest.fixture(autouse=True)
def _reset_logging_and_settings() -> Iterator[None]:
    """CLI runs reconfigure structlog and cache settings; undo both after each test."""
    from precache_build.cli.config import clear_settings_cache

    clear_settings_cache()
    yield
    structlog.reset_defaults()
    clear_settings_cache()


@pytest.fixture
def make_files(tmp_path: Path) -> FileTree:
    """Create files under `tmp_path / "dist"` from a {relative_path: content} map."""
    root = tmp_path / "dist"
    root.mkdir(exist_ok=True)

    def _make(files: dict[str, str | bytes]) -> Path:
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root

    return _make
