"""Exceptions raised while building a precache manifest."""

from __future__ import annotations


class PrecacheError(Exception):
    """Base class for all precache-build errors."""


class ManifestConfigError(PrecacheError, ValueError):
    """Configuration is invalid; no manifest is produced.

    Attributes:
        field: Public (camelCase) name of the offending option, if known.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        if field:
            message = f"{field}: {message}"
        super().__init__(message)


class TemplatedUrlCollisionError(ManifestConfigError):
    """A templated URL is also produced by a glob pattern."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(
            f"the URL {url!r} is already matched by globPatterns; "
            "remove it from one of the two options",
            field="templatedUrls",
        )


class MissingDependencyError(ManifestConfigError):
    """A templated URL dependency pattern did not match any file."""

    def __init__(self, pattern: str, url: str) -> None:
        self.pattern = pattern
        self.url = url
        super().__init__(
            f"the dependency pattern {pattern!r} of templated URL {url!r} "
            "did not match any files",
            field="templatedUrls",
        )


class ManifestBuildError(PrecacheError):
    """Reading the glob directory or one of its files failed."""


class ManifestTransformError(PrecacheError, TypeError):
    """A manifest transform returned something other than a list of entries."""


class CacheableResponseError(PrecacheError, ValueError):
    """CacheableResponse was constructed or called with invalid arguments."""
