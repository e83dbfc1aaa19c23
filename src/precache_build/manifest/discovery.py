"""Asset discovery from a glob directory.

Resolves glob patterns to files and computes the details (URL, content
hash, size) that become manifest entries. Templated URLs resolve to a
single composite or string detail.
"""

from __future__ import annotations

import fnmatch
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from precache_build.errors import ManifestBuildError
from precache_build.manifest.model import FileDetails
from precache_build.manifest.revision import (
    HashFunction,
    hash_composite,
    hash_file,
    hash_string,
    md5_hex,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class MatchedFile:
    """A regular file matched by a glob pattern."""

    path: str
    size: int


def _find_closing_brace(pattern: str, start: int) -> int:
    depth = 0
    for i in range(start, len(pattern)):
        if pattern[i] == "{":
            depth += 1
        elif pattern[i] == "}":
            depth -= 1
            if depth == 0:
                return i
    return -1


def _split_alternatives(body: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current = ""
    for char in body:
        if char == "," and depth == 0:
            parts.append(current)
            current = ""
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        current += char
    parts.append(current)
    return parts


def expand_braces(pattern: str) -> list[str]:
    """Expand `{a,b}` alternatives, including nested ones.

    Example:
        >>> expand_braces("**/*.{js,css}")
        ['**/*.js', '**/*.css']
    """
    start = pattern.find("{")
    if start == -1:
        return [pattern]
    end = _find_closing_brace(pattern, start)
    if end == -1:
        return [pattern]

    alternatives = _split_alternatives(pattern[start + 1 : end])
    if len(alternatives) == 1:
        # "{js}" has nothing to expand; keep the braces literally.
        return [pattern[: end + 1] + rest for rest in expand_braces(pattern[end + 1 :])]

    prefix, suffix = pattern[:start], pattern[end + 1 :]
    expanded: list[str] = []
    for alternative in alternatives:
        for candidate in expand_braces(prefix + alternative + suffix):
            if candidate not in expanded:
                expanded.append(candidate)
    return expanded


def _normalize(pattern: str) -> str:
    """Make a trailing `**` match files at any depth, not only directories."""
    if pattern == "**":
        return "**/*"
    if pattern.endswith("/**"):
        return pattern + "/*"
    return pattern


def _is_hidden_match(relative: str, pattern: str) -> bool:
    """True when a dot-named component was matched by a wildcard segment.

    Dot files and directories are only matched by pattern segments that
    themselves start with a dot.
    """
    dot_segments = [s for s in pattern.split("/") if s.startswith(".")]
    for part in relative.split("/"):
        if not part.startswith("."):
            continue
        if not any(fnmatch.fnmatchcase(part, seg) for seg in dot_segments):
            return True
    return False


def _glob(root: Path, pattern: str) -> Iterator[str]:
    """Yield POSIX paths relative to `root` matched by `pattern`."""
    for candidate in expand_braces(pattern):
        relative = _normalize(candidate.removeprefix("./"))
        if not relative:
            continue
        for path in root.glob(relative):
            rel = path.relative_to(root).as_posix()
            if not _is_hidden_match(rel, relative):
                yield rel


def match_files(directory: str | Path, pattern: str, ignores: Sequence[str]) -> list[MatchedFile]:
    """Match regular files under `directory`.

    Args:
        directory: Directory the pattern is evaluated against.
        pattern: Glob pattern (`**` and `{a,b}` supported).
        ignores: Patterns whose matches are excluded.

    Returns:
        Matched files sorted by relative path, so the result does not
        depend on filesystem iteration order.

    Raises:
        ManifestBuildError: If the directory cannot be read.
    """
    root = Path(directory)
    if not root.is_dir():
        msg = f"glob directory {str(root)!r} does not exist or is not a directory"
        raise ManifestBuildError(msg)

    try:
        ignored = {rel for ignore in ignores for rel in _glob(root, ignore)}
        candidates = sorted(set(_glob(root, pattern)) - ignored)
    except OSError as e:
        msg = f"unable to glob {pattern!r} in {str(root)!r}: {e}"
        raise ManifestBuildError(msg) from e

    matched: list[MatchedFile] = []
    for rel in candidates:
        try:
            st = (root / rel).stat()
        except OSError as e:
            msg = f"unable to stat {rel!r} in {str(root)!r}: {e}"
            raise ManifestBuildError(msg) from e
        if stat.S_ISREG(st.st_mode):
            matched.append(MatchedFile(path=rel, size=st.st_size))
    return matched


def get_file_details(
    directory: str | Path,
    pattern: str,
    ignores: Sequence[str],
    *,
    hash_fn: HashFunction = md5_hex,
) -> list[FileDetails]:
    """Resolve a glob pattern to file details.

    A pattern that matches nothing is not an error; it is logged so that
    typos in optional patterns are still visible.
    """
    logger.debug("resolving_glob_pattern", glob_directory=str(directory), pattern=pattern)
    matched = match_files(directory, pattern, ignores)
    if not matched:
        logger.warning(
            "useless_glob_pattern",
            glob_directory=str(directory),
            pattern=pattern,
            ignores=list(ignores),
        )
        return []

    root = Path(directory)
    details: list[FileDetails] = []
    for match in matched:
        try:
            file_hash = hash_file(root / match.path, hash_fn)
        except OSError as e:
            msg = f"unable to read {match.path!r} in {str(root)!r}: {e}"
            raise ManifestBuildError(msg) from e
        details.append(FileDetails(file=match.path, hash=file_hash, size=match.size))
    return details


def get_composite_details(
    url: str,
    dependency_details: Sequence[FileDetails],
    *,
    hash_fn: HashFunction = md5_hex,
) -> FileDetails:
    """Merge several files into one detail for a templated URL.

    The revision hashes the dependency hashes in the given order, so
    reordering the declared dependencies changes it.
    """
    return FileDetails(
        file=url,
        hash=hash_composite((d.hash for d in dependency_details), hash_fn),
        size=sum(d.size or 0 for d in dependency_details),
    )


def get_string_details(
    url: str,
    content: str,
    *,
    hash_fn: HashFunction = md5_hex,
) -> FileDetails:
    """Version a templated URL by a literal string. String details carry no size."""
    return FileDetails(file=url, hash=hash_string(content, hash_fn))
