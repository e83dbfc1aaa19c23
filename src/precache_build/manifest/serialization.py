"""Serialization of manifest entries.

Canonical output:
- Object keys sorted lexicographically
- No whitespace unless an indent is requested
- UTF-8 output (ensure_ascii=False)
- Identical output for identical input (fingerprint-safe)
"""
from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from precache_build.manifest.model import ManifestEntry

DEFAULT_MANIFEST_VARIABLE = "self.__precacheManifest"


def _entry_to_dict(entry: ManifestEntry | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(entry, Mapping):
        return dict(entry)
    return entry.to_dict()


def serialize_manifest_json(
    entries: Iterable[ManifestEntry | Mapping[str, Any]],
    *,
    indent: int | None = None,
) -> str:
    """Serialize manifest entries to JSON.

    Entry order is preserved; only object keys are sorted.

    Args:
        entries: Manifest entries or plain dicts.
        indent: Pretty-print indentation. Compact canonical form when None.

    Returns:
        JSON array string.

    Example:
        >>> serialize_manifest_json([{"url": "/app.js", "revision": "abc"}])
        '[{"revision":"abc","url":"/app.js"}]'
    """
    data = [_entry_to_dict(e) for e in entries]
    if indent is None:
        return json.dumps(data, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
    return json.dumps(data, indent=indent, sort_keys=True, ensure_ascii=False)


def render_manifest_module(
    entries: Iterable[ManifestEntry | Mapping[str, Any]],
    *,
    variable: str = DEFAULT_MANIFEST_VARIABLE,
) -> str:
    """Render the manifest as a JavaScript assignment statement.

    Args:
        entries: Manifest entries or plain dicts.
        variable: Left-hand side of the assignment.

    Returns:
        Source text ending in a newline.
    """
    if not variable:
        msg = "variable must be a non-empty string"
        raise ValueError(msg)
    body = serialize_manifest_json(entries, indent=2)
    return f"{variable} = {body};\n"
