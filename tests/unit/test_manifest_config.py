"""Tests for manifest configuration parsing."""
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import pytest

from precache_build.errors import ManifestConfigError
from precache_build.manifest.config import (
    DEFAULT_GLOB_IGNORES,
    DEFAULT_GLOB_PATTERNS,
    DEFAULT_MAXIMUM_FILE_SIZE,
    GlobDependencies,
    PrecacheConfig,
    StringDependency,
    load_config,
)


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self) -> None:
        config = load_config({"globDirectory": "dist"})

        assert config.glob_directory == "dist"
        assert config.glob_patterns == DEFAULT_GLOB_PATTERNS
        assert config.glob_ignores == DEFAULT_GLOB_IGNORES
        assert config.maximum_file_size_to_cache_in_bytes == DEFAULT_MAXIMUM_FILE_SIZE == 2097152
        assert config.templated_urls == {}
        assert config.modify_url_prefix == {}
        assert config.dont_cache_bust_urls_matching is None
        assert config.manifest_transforms == ()

    def test_snake_case_names_accepted(self) -> None:
        config = load_config({"glob_directory": "dist", "glob_patterns": ["*.js"]})

        assert config.glob_patterns == ("*.js",)

    def test_path_directory(self, tmp_path: Path) -> None:
        config = load_config({"globDirectory": tmp_path})

        assert config.glob_directory == str(tmp_path)

    def test_none_values_mean_unset(self) -> None:
        config = load_config({"globDirectory": "dist", "globIgnores": None})

        assert config.glob_ignores == DEFAULT_GLOB_IGNORES

    @pytest.mark.parametrize("key", ["globPatterns", "glob_patterns", "staticFileGlobs"])
    def test_null_glob_patterns_rejected(self, key: str) -> None:
        """An explicit null for the patterns is an error, not the defaults."""
        with pytest.raises(ManifestConfigError, match=f"'{key}' must be a list of glob patterns"):
            load_config({"globDirectory": "dist", key: None})

    def test_passthrough_instance(self) -> None:
        config = load_config({"globDirectory": "dist"})

        assert load_config(config) is config

    def test_regex_string_is_compiled(self) -> None:
        config = load_config({"globDirectory": "dist", "dontCacheBustUrlsMatching": r"\.\w{8}\."})

        assert isinstance(config.dont_cache_bust_urls_matching, re.Pattern)
        assert config.dont_cache_bust_urls_matching.search("app.1234abcd.js")

    @pytest.mark.parametrize(
        ("raw", "field"),
        [
            ({}, "globDirectory"),
            ({"globDirectory": ""}, "globDirectory"),
            ({"globDirectory": 5}, "globDirectory"),
            ({"globDirectory": "dist", "globPatterns": "**/*.js"}, "globPatterns"),
            ({"globDirectory": "dist", "globPatterns": [1]}, "globPatterns"),
            ({"globDirectory": "dist", "globPatterns": ["/abs/*.js"]}, "globPatterns"),
            ({"globDirectory": "dist", "globIgnores": ["ok", 3]}, "globIgnores"),
            ({"globDirectory": "dist", "templatedUrls": ["/a"]}, "templatedUrls"),
            ({"globDirectory": "dist", "templatedUrls": {"/a": 5}}, "templatedUrls"),
            ({"globDirectory": "dist", "templatedUrls": {"/a": ["x", 1]}}, "templatedUrls"),
            ({"globDirectory": "dist", "templatedUrls": {"/a": []}}, "templatedUrls"),
            ({"globDirectory": "dist", "modifyUrlPrefix": "/"}, "modifyUrlPrefix"),
            ({"globDirectory": "dist", "maximumFileSizeToCacheInBytes": 0}, "maximumFileSizeToCacheInBytes"),
            ({"globDirectory": "dist", "dontCacheBustUrlsMatching": "("}, "dontCacheBustUrlsMatching"),
        ],
    )
    def test_invalid_field_is_named(self, raw: dict[str, Any], field: str) -> None:
        """Each invalid option fails with an error naming that option."""
        with pytest.raises(ManifestConfigError) as exc_info:
            load_config(raw)

        assert exc_info.value.field is not None
        assert exc_info.value.field.split(".")[0] == field
        assert field in str(exc_info.value)

    def test_non_mapping_rejected(self) -> None:
        with pytest.raises(ManifestConfigError, match="mapping"):
            load_config(["globDirectory"])  # type: ignore[arg-type]

    def test_non_callable_transform_rejected(self) -> None:
        with pytest.raises(ManifestConfigError) as exc_info:
            load_config({"globDirectory": "dist", "manifestTransforms": ["nope"]})

        assert exc_info.value.field == "manifestTransforms.0"


class TestTemplatedUrls:
    """Templated URL values become explicit dependency variants."""

    def test_list_becomes_glob_dependencies(self) -> None:
        config = load_config(
            {"globDirectory": "dist", "templatedUrls": {"/shell": ["a.html", "b/*.html"]}}
        )

        assert config.templated_urls["/shell"] == GlobDependencies(("a.html", "b/*.html"))

    def test_string_becomes_string_dependency(self) -> None:
        config = load_config({"globDirectory": "dist", "templatedUrls": {"/about": "v2"}})

        assert config.templated_urls["/about"] == StringDependency("v2")

    def test_declaration_order_preserved(self) -> None:
        config = load_config(
            {"globDirectory": "dist", "templatedUrls": {"/z": "1", "/a": "2", "/m": ["x"]}}
        )

        assert list(config.templated_urls) == ["/z", "/a", "/m"]


class TestLegacyAliases:
    """Legacy option names are canonicalized once at parse time."""

    def test_static_file_globs(self) -> None:
        config = load_config({"globDirectory": "dist", "staticFileGlobs": ["*.css"]})

        assert config.glob_patterns == ("*.css",)

    def test_dynamic_url_to_dependencies(self) -> None:
        config = load_config(
            {"globDirectory": "dist", "dynamicUrlToDependencies": {"/page": "content"}}
        )

        assert config.templated_urls == {"/page": StringDependency("content")}

    @pytest.mark.parametrize(
        ("modern", "legacy", "value"),
        [
            ("globPatterns", "staticFileGlobs", ["*.js"]),
            ("templatedUrls", "dynamicUrlToDependencies", {"/a": "x"}),
        ],
    )
    def test_both_spellings_rejected(self, modern: str, legacy: str, value: object) -> None:
        with pytest.raises(ManifestConfigError) as exc_info:
            load_config({"globDirectory": "dist", modern: value, legacy: value})

        assert modern in str(exc_info.value)
        assert legacy in str(exc_info.value)


class TestFromFile:
    """Tests for PrecacheConfig.from_file."""

    def test_loads_json(self, tmp_path: Path) -> None:
        path = tmp_path / "precache-config.json"
        path.write_text(json.dumps({"globDirectory": "dist", "globPatterns": ["**/*.js"]}))

        config = PrecacheConfig.from_file(path)

        assert config.glob_patterns == ("**/*.js",)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestConfigError, match="not found"):
            PrecacheConfig.from_file(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with pytest.raises(ManifestConfigError, match="could not read"):
            PrecacheConfig.from_file(path)
