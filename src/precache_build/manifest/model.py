"""Precache manifest model.

The manifest lists every asset a cache layer should fetch, with the
revision token it uses to detect stale copies.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass, field, replace
from typing import Any

from precache_build.manifest.serialization import serialize_manifest_json


@dataclass(frozen=True, slots=True)
class FileDetails:
    """One resolved asset before it becomes a manifest entry.

    `file` is the POSIX path relative to the glob directory, or the
    templated URL for composite and string details.
    """

    file: str
    hash: str
    size: int | None = None


@dataclass(frozen=True)
class ManifestEntry:
    """A (url, revision) pair in the precache manifest.

    `revision` is None once cache busting has been disabled for the URL.
    `size` is None for entries derived from a string.
    """

    url: str
    revision: str | None = None
    size: int | None = None

    def with_url(self, url: str) -> ManifestEntry:
        """Return a copy pointing at a different URL."""
        return replace(self, url=url)

    def without_revision(self) -> ManifestEntry:
        """Return a copy with the revision removed."""
        return replace(self, revision=None)

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire form (size is a build-time detail and is omitted)."""
        data: dict[str, Any] = {"url": self.url}
        if self.revision is not None:
            data["revision"] = self.revision
        return data


@dataclass(frozen=True)
class SizeWarning:
    """An asset left out of the manifest because it is too large."""

    url: str
    size: int
    maximum_size: int

    def __str__(self) -> str:
        return (
            f"{self.url} is {self.size} bytes, and won't be precached. "
            f"Configure maximumFileSizeToCacheInBytes to change this limit "
            f"(currently {self.maximum_size})."
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"url": self.url, "size": self.size, "maximum_size": self.maximum_size}


@dataclass
class ManifestResult:
    """Output of a manifest build."""

    manifest_entries: list[ManifestEntry] = field(default_factory=list)
    warnings: list[SizeWarning] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.manifest_entries)

    @property
    def size(self) -> int:
        """Total bytes of the entries that have an on-disk size."""
        return sum(e.size for e in self.manifest_entries if e.size is not None)

    @property
    def urls(self) -> list[str]:
        return [e.url for e in self.manifest_entries]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for reporting."""
        return {
            "manifest_entries": [e.to_dict() for e in self.manifest_entries],
            "count": self.count,
            "size": self.size,
            "warnings": [w.to_dict() for w in self.warnings],
        }

    def to_canonical_json(self) -> str:
        """Serialize the entries to canonical JSON (sorted keys, no whitespace)."""
        return serialize_manifest_json(self.manifest_entries)

    def fingerprint(self) -> str:
        """Compute SHA-256 fingerprint of the canonical entries.

        Returns:
            64-character hex string.
        """
        canonical = self.to_canonical_json()
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
