"""Filter/transform pipeline turning file details into the final manifest.

Every stage takes the whole entry list and returns a new one, so later
transforms can reason about the complete set (e.g. duplicates created by
URL rewriting).

Stage order:
1. modifyUrlPrefix rewriting
2. dontCacheBustUrlsMatching revision removal
3. caller-supplied manifestTransforms, in order
4. maximumFileSizeToCacheInBytes filtering
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

import structlog

from precache_build.errors import ManifestTransformError
from precache_build.manifest.model import (
    FileDetails,
    ManifestEntry,
    ManifestResult,
    SizeWarning,
)

if TYPE_CHECKING:
    import re

    from precache_build.manifest.config import PrecacheConfig

logger = structlog.get_logger()

Transform = Callable[[list[ManifestEntry]], Any]


def modify_url_prefix_transform(prefixes: Mapping[str, str]) -> Transform:
    """Build a transform replacing URL prefixes.

    The first key (in mapping order) that prefixes a URL wins, and it is
    applied at most once per entry.

    Example:
        >>> transform = modify_url_prefix_transform({"/build/": "/"})
        >>> transform([ManifestEntry("/build/app.js", "abc")])
        [ManifestEntry(url='/app.js', revision='abc', size=None)]
    """
    ordered = list(prefixes.items())

    def transform(entries: list[ManifestEntry]) -> list[ManifestEntry]:
        rewritten: list[ManifestEntry] = []
        for entry in entries:
            for prefix, replacement in ordered:
                if entry.url.startswith(prefix):
                    entry = entry.with_url(replacement + entry.url[len(prefix) :])  # noqa: PLW2901
                    break
            rewritten.append(entry)
        return rewritten

    return transform


def no_revision_for_urls_matching(pattern: re.Pattern[str]) -> Transform:
    """Build a transform dropping revisions of URLs that already embed a version."""

    def transform(entries: list[ManifestEntry]) -> list[ManifestEntry]:
        return [e.without_revision() if pattern.search(e.url) else e for e in entries]

    return transform


def _apply(transform: Transform, entries: list[ManifestEntry], index: int) -> list[ManifestEntry]:
    result = transform(list(entries))
    if isinstance(result, (str, bytes)) or not isinstance(result, Sequence):
        msg = (
            f"manifestTransforms[{index}] must return a list of ManifestEntry, "
            f"got {type(result).__name__}"
        )
        raise ManifestTransformError(msg)
    for item in result:
        if not isinstance(item, ManifestEntry):
            msg = (
                f"manifestTransforms[{index}] returned a {type(item).__name__}; "
                "every item must be a ManifestEntry"
            )
            raise ManifestTransformError(msg)
    return list(result)


def filter_by_size(
    entries: list[ManifestEntry], maximum_size: int
) -> tuple[list[ManifestEntry], list[SizeWarning]]:
    """Split entries into those within `maximum_size` and warnings for the rest.

    Entries without a size are never filtered.
    """
    kept: list[ManifestEntry] = []
    warnings: list[SizeWarning] = []
    for entry in entries:
        if entry.size is not None and entry.size > maximum_size:
            warning = SizeWarning(url=entry.url, size=entry.size, maximum_size=maximum_size)
            logger.warning("file_too_large", url=entry.url, size=entry.size, maximum_size=maximum_size)
            warnings.append(warning)
            continue
        kept.append(entry)
    return kept, warnings


def filter_files(file_details: Sequence[FileDetails], config: PrecacheConfig) -> ManifestResult:
    """Run the pipeline over resolved file details.

    Args:
        file_details: Deduplicated details in manifest order.
        config: Validated build configuration.

    Returns:
        ManifestResult with the surviving entries and size warnings.

    Raises:
        ManifestTransformError: If a custom transform returns a bad value.
    """
    entries = [ManifestEntry(url=d.file, revision=d.hash, size=d.size) for d in file_details]

    if config.modify_url_prefix:
        entries = modify_url_prefix_transform(config.modify_url_prefix)(entries)
    if config.dont_cache_bust_urls_matching is not None:
        entries = no_revision_for_urls_matching(config.dont_cache_bust_urls_matching)(entries)

    for index, transform in enumerate(config.manifest_transforms):
        entries = _apply(transform, entries, index)

    kept, warnings = filter_by_size(entries, config.maximum_file_size_to_cache_in_bytes)
    return ManifestResult(manifest_entries=kept, warnings=warnings)
