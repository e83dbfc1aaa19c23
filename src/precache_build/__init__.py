"""precache-build.

Generates precache manifests (URL + content revision) for a cache layer,
and decides which HTTP responses are cacheable.

Example:
    >>> from precache_build import build_manifest
    >>> result = build_manifest(
    ...     {
    ...         "globDirectory": "dist",
    ...         "globPatterns": ["**/*.{js,css,html}"],
    ...         "modifyUrlPrefix": {"": "/"},
    ...     }
    ... )
    >>> [e.to_dict() for e in result.manifest_entries]
"""

from __future__ import annotations

__version__ = "0.1.0"

from precache_build.cacheable_response import CacheableResponse, CacheableResponsePlugin
from precache_build.errors import (
    CacheableResponseError,
    ManifestBuildError,
    ManifestConfigError,
    ManifestTransformError,
    MissingDependencyError,
    PrecacheError,
    TemplatedUrlCollisionError,
)
from precache_build.manifest import (
    ManifestBuilder,
    ManifestEntry,
    ManifestResult,
    PrecacheConfig,
    SizeWarning,
    build_manifest,
    get_file_manifest_entries,
)

__all__ = [
    "CacheableResponse",
    "CacheableResponseError",
    "CacheableResponsePlugin",
    "ManifestBuildError",
    "ManifestBuilder",
    "ManifestConfigError",
    "ManifestEntry",
    "ManifestResult",
    "ManifestTransformError",
    "MissingDependencyError",
    "PrecacheConfig",
    "PrecacheError",
    "SizeWarning",
    "TemplatedUrlCollisionError",
    "__version__",
    "build_manifest",
    "get_file_manifest_entries",
]
