"""Manifest builder: glob patterns and templated URLs to a precache manifest."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from precache_build.errors import MissingDependencyError, TemplatedUrlCollisionError
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
)
from precache_build.manifest.filters import filter_files
from precache_build.manifest.model import FileDetails, ManifestResult
from precache_build.manifest.revision import HashFunction, md5_hex

logger = structlog.get_logger()


class ManifestBuilder:
    """Builds a precache manifest from a validated configuration.

    Example:
        >>> builder = ManifestBuilder({"globDirectory": "dist", "globPatterns": ["**/*.js"]})
        >>> result = builder.build()
        >>> print(f"{result.count} files, {result.size} bytes")
    """

    def __init__(
        self,
        config: PrecacheConfig | Mapping[str, Any],
        *,
        hash_fn: HashFunction = md5_hex,
    ) -> None:
        """Initialize the builder.

        The configuration is validated here, before any filesystem access.

        Args:
            config: A PrecacheConfig or a raw option mapping.
            hash_fn: Hash primitive used for every revision.

        Raises:
            ManifestConfigError: If the configuration is invalid.
        """
        self.config = load_config(config)
        self.hash_fn = hash_fn

    def build(self) -> ManifestResult:
        """Resolve every asset and run the filter/transform pipeline.

        Returns:
            ManifestResult with entries, count, size and size warnings.

        Raises:
            TemplatedUrlCollisionError: If a templated URL is also globbed.
            MissingDependencyError: If a templated URL dependency matches no file.
            ManifestBuildError: If the filesystem cannot be read.
        """
        details = self._resolve_globs()
        details.extend(self._resolve_templated_urls({d.file for d in details}))

        result = filter_files(details, self.config)
        logger.info(
            "manifest_built",
            glob_directory=self.config.glob_directory,
            count=result.count,
            size=result.size,
            warning_count=len(result.warnings),
        )
        return result

    def _resolve_globs(self) -> list[FileDetails]:
        """Resolve glob patterns in declaration order; the first pattern to match a URL wins."""
        config = self.config
        seen: set[str] = set()
        details: list[FileDetails] = []
        for pattern in config.glob_patterns:
            for detail in get_file_details(
                config.glob_directory, pattern, config.glob_ignores, hash_fn=self.hash_fn
            ):
                if detail.file in seen:
                    logger.debug("duplicate_url_skipped", url=detail.file, pattern=pattern)
                    continue
                seen.add(detail.file)
                details.append(detail)
        return details

    def _resolve_templated_urls(self, globbed_urls: set[str]) -> list[FileDetails]:
        config = self.config
        details: list[FileDetails] = []
        for url, dependency in config.templated_urls.items():
            if url in globbed_urls:
                raise TemplatedUrlCollisionError(url)

            match dependency:
                case GlobDependencies(patterns=patterns):
                    dependency_details: list[FileDetails] = []
                    for pattern in patterns:
                        matched = get_file_details(
                            config.glob_directory,
                            pattern,
                            config.glob_ignores,
                            hash_fn=self.hash_fn,
                        )
                        if not matched:
                            raise MissingDependencyError(pattern, url)
                        dependency_details.extend(matched)
                    details.append(
                        get_composite_details(url, dependency_details, hash_fn=self.hash_fn)
                    )
                case StringDependency(content=content):
                    details.append(get_string_details(url, content, hash_fn=self.hash_fn))
        return details


def build_manifest(
    config: PrecacheConfig | Mapping[str, Any],
    *,
    hash_fn: HashFunction = md5_hex,
) -> ManifestResult:
    """Build a precache manifest in one call.

    Args:
        config: A PrecacheConfig or a raw option mapping (camelCase or snake_case keys).
        hash_fn: Hash primitive used for every revision.

    Returns:
        ManifestResult with entries, count, size and size warnings.
    """
    return ManifestBuilder(config, hash_fn=hash_fn).build()


# Name used by the tool this one replaces.
get_file_manifest_entries = build_manifest
