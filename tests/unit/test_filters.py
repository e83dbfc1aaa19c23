"""Tests for the filter/transform pipeline."""
from __future__ import annotations

import re
from typing import Any

import pytest

from precache_build.errors import ManifestTransformError
from precache_build.manifest.config import load_config
from precache_build.manifest.filters import (
    filter_by_size,
    filter_files,
    modify_url_prefix_transform,
    no_revision_for_urls_matching,
)
from precache_build.manifest.model import FileDetails, ManifestEntry


def _details() -> list[FileDetails]:
    return [
        FileDetails(file="/build/app.js", hash="rev-app", size=100),
        FileDetails(file="/build/app.1a2b3c4d.css", hash="rev-css", size=200),
        FileDetails(file="/about", hash="rev-about"),
    ]


def _config(**options: Any) -> Any:
    return load_config({"globDirectory": "dist", **options})


class TestModifyUrlPrefix:
    """Prefix rewriting."""

    def test_rewrites_prefix_keeps_revision(self) -> None:
        transform = modify_url_prefix_transform({"/build/": "/"})

        result = transform([ManifestEntry("/build/app.js", "abc", 10)])

        assert result == [ManifestEntry("/app.js", "abc", 10)]

    def test_first_matching_key_wins(self) -> None:
        transform = modify_url_prefix_transform({"/build/": "/a/", "/build/js/": "/b/"})

        result = transform([ManifestEntry("/build/js/app.js", "r")])

        assert result[0].url == "/a/js/app.js"

    def test_applied_at_most_once(self) -> None:
        """A replacement that itself starts with a key is not rewritten again."""
        transform = modify_url_prefix_transform({"/x/": "/x/x/"})

        result = transform([ManifestEntry("/x/app.js", "r")])

        assert result[0].url == "/x/x/app.js"

    def test_non_matching_untouched(self) -> None:
        transform = modify_url_prefix_transform({"/build/": "/"})
        entry = ManifestEntry("/other/app.js", "r")

        assert transform([entry]) == [entry]


class TestDontCacheBust:
    """Revision removal for URLs that embed a version."""

    def test_matching_entries_lose_revision(self) -> None:
        transform = no_revision_for_urls_matching(re.compile(r"\.\w{8}\."))

        result = transform(
            [ManifestEntry("app.1a2b3c4d.css", "r1", 5), ManifestEntry("app.js", "r2", 5)]
        )

        assert result[0] == ManifestEntry("app.1a2b3c4d.css", None, 5)
        assert result[1] == ManifestEntry("app.js", "r2", 5)
        assert result[0].to_dict() == {"url": "app.1a2b3c4d.css"}


class TestFilterFiles:
    """The full pipeline."""

    def test_no_options(self) -> None:
        result = filter_files(_details(), _config())

        assert [(e.url, e.revision) for e in result.manifest_entries] == [
            ("/build/app.js", "rev-app"),
            ("/build/app.1a2b3c4d.css", "rev-css"),
            ("/about", "rev-about"),
        ]
        assert result.count == 3
        assert result.size == 300

    def test_builtins_run_before_custom_transforms(self) -> None:
        seen: list[list[ManifestEntry]] = []

        def record(entries: list[ManifestEntry]) -> list[ManifestEntry]:
            seen.append(entries)
            return entries

        filter_files(
            _details(),
            _config(
                modifyUrlPrefix={"/build/": "/"},
                dontCacheBustUrlsMatching=r"\.\w{8}\.",
                manifestTransforms=[record],
            ),
        )

        assert [(e.url, e.revision) for e in seen[0]] == [
            ("/app.js", "rev-app"),
            ("/app.1a2b3c4d.css", None),
            ("/about", "rev-about"),
        ]

    def test_custom_transforms_chain(self) -> None:
        """Each transform sees the previous transform's output."""

        def drop_about(entries: list[ManifestEntry]) -> list[ManifestEntry]:
            return [e for e in entries if e.url != "/about"]

        def inject(entries: list[ManifestEntry]) -> list[ManifestEntry]:
            assert all(e.url != "/about" for e in entries)
            return [*entries, ManifestEntry("/extra", "x")]

        result = filter_files(_details(), _config(manifestTransforms=[drop_about, inject]))

        assert result.urls == ["/build/app.js", "/build/app.1a2b3c4d.css", "/extra"]

    def test_transform_can_reorder(self) -> None:
        result = filter_files(
            _details(), _config(manifestTransforms=[lambda entries: list(reversed(entries))])
        )

        assert result.urls == ["/about", "/build/app.1a2b3c4d.css", "/build/app.js"]

    def test_size_filter_runs_after_transforms(self) -> None:
        """A transform may shrink an entry below the limit before filtering."""

        def shrink(entries: list[ManifestEntry]) -> list[ManifestEntry]:
            return [ManifestEntry(e.url, e.revision, 1 if e.size else None) for e in entries]

        result = filter_files(
            _details(), _config(maximumFileSizeToCacheInBytes=50, manifestTransforms=[shrink])
        )

        assert result.count == 3
        assert result.warnings == []

    def test_size_warnings(self) -> None:
        result = filter_files(_details(), _config(maximumFileSizeToCacheInBytes=150))

        assert result.urls == ["/build/app.js", "/about"]
        assert len(result.warnings) == 1
        warning = result.warnings[0]
        assert (warning.url, warning.size, warning.maximum_size) == (
            "/build/app.1a2b3c4d.css",
            200,
            150,
        )
        assert "200 bytes" in str(warning)

    @pytest.mark.parametrize("bad", [None, "nope", {"url": "/x"}, [{"url": "/x"}]])
    def test_bad_transform_result(self, bad: object) -> None:
        with pytest.raises(ManifestTransformError, match=r"manifestTransforms\[0\]"):
            filter_files(_details(), _config(manifestTransforms=[lambda entries: bad]))


class TestFilterBySize:
    """Tests for filter_by_size."""

    def test_exact_limit_is_kept(self) -> None:
        kept, warnings = filter_by_size([ManifestEntry("/a", "r", 10)], 10)

        assert [e.url for e in kept] == ["/a"]
        assert warnings == []

    def test_entries_without_size_exempt(self) -> None:
        kept, warnings = filter_by_size([ManifestEntry("/a", "r")], 0)

        assert len(kept) == 1
        assert warnings == []
