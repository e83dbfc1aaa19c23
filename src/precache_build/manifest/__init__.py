"""Precache manifest generation."""

from __future__ import annotations

from precache_build.manifest.builder import (
    ManifestBuilder,
    build_manifest,
    get_file_manifest_entries,
)
from precache_build.manifest.config import (
    GlobDependencies,
    PrecacheConfig,
    StringDependency,
    load_config,
)
from precache_build.manifest.discovery import (
    get_composite_details,
    get_file_details,
    get_string_details,
    match_files,
)
from precache_build.manifest.filters import (
    filter_files,
    modify_url_prefix_transform,
    no_revision_for_urls_matching,
)
from precache_build.manifest.model import FileDetails, ManifestEntry, ManifestResult, SizeWarning
from precache_build.manifest.serialization import render_manifest_module, serialize_manifest_json

__all__ = [
    "FileDetails",
    "GlobDependencies",
    "ManifestBuilder",
    "ManifestEntry",
    "ManifestResult",
    "PrecacheConfig",
    "SizeWarning",
    "StringDependency",
    "build_manifest",
    "filter_files",
    "get_composite_details",
    "get_file_details",
    "get_file_manifest_entries",
    "get_string_details",
    "load_config",
    "match_files",
    "modify_url_prefix_transform",
    "no_revision_for_urls_matching",
    "render_manifest_module",
    "serialize_manifest_json",
]
