"""Content-derived revision hashing."""
from __future__ import annotations

import hashlib
from collections.abc import Callable, Iterable
from pathlib import Path

HashFunction = Callable[[bytes], str]

_CHUNK_SIZE = 64 * 1024


def md5_hex(data: bytes) -> str:
    """Default hash primitive: MD5 hex digest."""
    return hashlib.md5(data, usedforsecurity=False).hexdigest()


def hash_file(path: Path, hash_fn: HashFunction = md5_hex) -> str:
    """Hash the bytes of a file.

    The default primitive streams the file; a custom one receives the
    whole content.
    """
    if hash_fn is md5_hex:
        digest = hashlib.md5(usedforsecurity=False)
        with path.open("rb") as f:
            for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
                digest.update(chunk)
        return digest.hexdigest()
    return hash_fn(path.read_bytes())


def hash_string(content: str, hash_fn: HashFunction = md5_hex) -> str:
    """Hash a string's UTF-8 encoding."""
    return hash_fn(content.encode("utf-8"))


def hash_composite(hashes: Iterable[str], hash_fn: HashFunction = md5_hex) -> str:
    """Hash the ordered concatenation of dependency hashes."""
    return hash_fn("".join(hashes).encode("utf-8"))
