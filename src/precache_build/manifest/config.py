"""Manifest build configuration.

Options are accepted under their snake_case names or the camelCase names
used in JSON config files. Two legacy spellings are folded into their
modern equivalents while parsing:

- staticFileGlobs -> globPatterns
- dynamicUrlToDependencies -> templatedUrls
"""
from __future__ import annotations

import json
import os
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from precache_build.errors import ManifestConfigError

DEFAULT_GLOB_PATTERNS: tuple[str, ...] = ("**/*.{js,css,html}",)
DEFAULT_GLOB_IGNORES: tuple[str, ...] = ("node_modules/**/*",)
DEFAULT_MAXIMUM_FILE_SIZE = 2 * 1024 * 1024

# legacy key -> modern key
LEGACY_ALIASES: dict[str, str] = {
    "staticFileGlobs": "globPatterns",
    "dynamicUrlToDependencies": "templatedUrls",
}

# Unset means "use the defaults"; an explicit null is a mistake.
NON_NULLABLE_KEYS: tuple[str, ...] = ("globPatterns", "glob_patterns", "staticFileGlobs")


@dataclass(frozen=True)
class GlobDependencies:
    """Templated URL whose content depends on the files matched by `patterns`."""

    patterns: tuple[str, ...]


@dataclass(frozen=True)
class StringDependency:
    """Templated URL whose content is versioned by a literal string."""

    content: str


TemplatedUrlDependency = GlobDependencies | StringDependency

ManifestTransform = Callable[[list[Any]], Any]


def _to_dependency(url: str, value: object) -> TemplatedUrlDependency:
    if isinstance(value, (GlobDependencies, StringDependency)):
        return value
    if isinstance(value, str):
        return StringDependency(value)
    if isinstance(value, (list, tuple)):
        if not value:
            msg = f"templated URL {url!r} has an empty dependency list"
            raise ValueError(msg)
        if not all(isinstance(p, str) for p in value):
            msg = f"dependencies of templated URL {url!r} must all be strings"
            raise ValueError(msg)
        for pattern in value:
            if not pattern or pattern.startswith("/"):
                msg = f"dependency {pattern!r} of templated URL {url!r} must be a relative glob"
                raise ValueError(msg)
        return GlobDependencies(tuple(value))
    msg = (
        f"templated URL {url!r} must map to a list of glob patterns or a string, "
        f"got {type(value).__name__}"
    )
    raise ValueError(msg)


class PrecacheConfig(BaseModel):
    """Validated configuration for a manifest build.

    Example:
        >>> config = PrecacheConfig.model_validate(
        ...     {"globDirectory": "dist", "globPatterns": ["**/*.js"]}
        ... )
        >>> config.glob_patterns
        ('**/*.js',)
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    glob_directory: Annotated[str, Field(min_length=1, alias="globDirectory")]
    glob_patterns: tuple[str, ...] = Field(default=DEFAULT_GLOB_PATTERNS, alias="globPatterns")
    glob_ignores: tuple[str, ...] = Field(default=DEFAULT_GLOB_IGNORES, alias="globIgnores")
    templated_urls: dict[str, TemplatedUrlDependency] = Field(
        default_factory=dict, alias="templatedUrls"
    )
    modify_url_prefix: dict[str, str] = Field(default_factory=dict, alias="modifyUrlPrefix")
    maximum_file_size_to_cache_in_bytes: int = Field(
        default=DEFAULT_MAXIMUM_FILE_SIZE, gt=0, alias="maximumFileSizeToCacheInBytes"
    )
    dont_cache_bust_urls_matching: re.Pattern[str] | None = Field(
        default=None, alias="dontCacheBustUrlsMatching"
    )
    manifest_transforms: tuple[ManifestTransform, ...] = Field(
        default=(), alias="manifestTransforms"
    )

    @model_validator(mode="before")
    @classmethod
    def canonicalize_aliases(cls, data: Any) -> Any:
        """Fold legacy option names into the modern ones and drop unset values."""
        if not isinstance(data, Mapping):
            msg = f"configuration must be a mapping, got {type(data).__name__}"
            raise ValueError(msg)  # noqa: TRY004

        for key in NON_NULLABLE_KEYS:
            if key in data and data[key] is None:
                msg = f"'{key}' must be a list of glob patterns, not null"
                raise ValueError(msg)

        canonical = {key: value for key, value in data.items() if value is not None}
        for legacy, modern in LEGACY_ALIASES.items():
            if legacy not in canonical:
                continue
            if modern in canonical:
                msg = f"'{modern}' and '{legacy}' cannot both be set; use '{modern}'"
                raise ValueError(msg)
            canonical[modern] = canonical.pop(legacy)
        return canonical

    @field_validator("glob_directory", mode="before")
    @classmethod
    def coerce_path(cls, v: Any) -> Any:
        if isinstance(v, os.PathLike):
            return os.fspath(v)
        return v

    @field_validator("glob_patterns", "glob_ignores", mode="before")
    @classmethod
    def check_patterns(cls, v: Any) -> Any:
        """Patterns are relative, non-empty strings in a list."""
        if isinstance(v, str):
            # A single string is a common mistake for a one-item list.
            msg = "must be a list of glob patterns, not a string"
            raise ValueError(msg)  # noqa: TRY004
        if isinstance(v, (list, tuple)):
            for pattern in v:
                if not isinstance(pattern, str):
                    msg = f"glob patterns must be strings, got {type(pattern).__name__}"
                    raise ValueError(msg)  # noqa: TRY004
                if not pattern or pattern.startswith("/"):
                    msg = f"glob pattern {pattern!r} must be a non-empty relative path"
                    raise ValueError(msg)
        return v

    @field_validator("templated_urls", mode="before")
    @classmethod
    def parse_templated_urls(cls, v: Any) -> Any:
        if not isinstance(v, Mapping):
            msg = f"must be a mapping of URL to dependencies, got {type(v).__name__}"
            raise ValueError(msg)  # noqa: TRY004
        return {url: _to_dependency(url, deps) for url, deps in v.items()}

    @field_validator("modify_url_prefix", mode="before")
    @classmethod
    def check_prefix_map(cls, v: Any) -> Any:
        if not isinstance(v, Mapping):
            msg = f"must be a mapping of prefix to replacement, got {type(v).__name__}"
            raise ValueError(msg)  # noqa: TRY004
        return v

    @classmethod
    def from_file(cls, path: str | Path) -> PrecacheConfig:
        """Load configuration from a JSON file.

        Args:
            path: Path to the JSON config file.

        Returns:
            Validated PrecacheConfig.

        Raises:
            ManifestConfigError: If the file is unreadable or invalid.
        """
        path = Path(path)
        try:
            with path.open(encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            msg = f"config file not found: {path}"
            raise ManifestConfigError(msg) from None
        except (OSError, json.JSONDecodeError) as e:
            msg = f"could not read config file {path}: {e}"
            raise ManifestConfigError(msg) from None
        return load_config(raw)


def _config_error(err: ValidationError) -> ManifestConfigError:
    """Translate the first pydantic error into a ManifestConfigError."""
    first = err.errors()[0]
    loc = [str(part) for part in first.get("loc", ())]
    message = str(first.get("msg", "invalid value")).removeprefix("Value error, ")
    if first.get("type") == "missing":
        message = "is required"
    return ManifestConfigError(message, field=".".join(loc) or None)


def load_config(raw: PrecacheConfig | Mapping[str, Any]) -> PrecacheConfig:
    """Validate and canonicalize a configuration mapping.

    No filesystem access happens here.

    Raises:
        ManifestConfigError: On the first invalid option.
    """
    if isinstance(raw, PrecacheConfig):
        return raw
    try:
        return PrecacheConfig.model_validate(raw)
    except ValidationError as err:
        raise _config_error(err) from None
