"""Decide whether an HTTP response may be cached.

A response is cacheable when it passes both configured checks:

- statuses: its status code is one of the allowed codes
- headers: at least one configured header has the configured value

An unconfigured check always passes, but at least one must be configured.

Example:
    >>> import httpx
    >>> cacheable = CacheableResponse(statuses=[0, 200])
    >>> cacheable.is_response_cacheable(httpx.Response(200))
    True
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Protocol, TypeVar, runtime_checkable

import structlog

from precache_build.errors import CacheableResponseError

logger = structlog.get_logger()


class _Headers(Protocol):
    def get(self, key: str, default: None = None) -> str | None: ...


@runtime_checkable
class ResponseLike(Protocol):
    """What the predicate needs from a response (httpx.Response satisfies it)."""

    status_code: int
    headers: _Headers


R = TypeVar("R", bound=ResponseLike)


class CacheableResponse:
    """Status/header predicate for responses.

    Configuration is captured at construction and never changes, so one
    instance may be shared between callers.
    """

    __slots__ = ("_headers", "_statuses")

    def __init__(
        self,
        statuses: Iterable[int] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the predicate.

        Args:
            statuses: Status codes that are cacheable.
            headers: Header name -> value pairs; any single match is enough.

        Raises:
            CacheableResponseError: If neither option is given or either is malformed.
        """
        if statuses is None and headers is None:
            msg = "CacheableResponse requires at least one of 'statuses' or 'headers'"
            raise CacheableResponseError(msg)

        self._statuses: frozenset[int] | None = None
        if statuses is not None:
            if isinstance(statuses, (str, bytes, Mapping)) or not isinstance(statuses, Iterable):
                msg = f"'statuses' must be a sequence of integers, got {type(statuses).__name__}"
                raise CacheableResponseError(msg)
            codes = list(statuses)
            for code in codes:
                if isinstance(code, bool) or not isinstance(code, int):
                    msg = f"'statuses' must only contain integers, got {code!r}"
                    raise CacheableResponseError(msg)
            self._statuses = frozenset(codes)

        self._headers: Mapping[str, str] | None = None
        if headers is not None:
            if not isinstance(headers, Mapping):
                msg = f"'headers' must be a mapping, got {type(headers).__name__}"
                raise CacheableResponseError(msg)
            for name, value in headers.items():
                if not isinstance(name, str) or not isinstance(value, str):
                    msg = f"'headers' must map strings to strings, got {name!r}: {value!r}"
                    raise CacheableResponseError(msg)
            self._headers = MappingProxyType(dict(headers))

    @property
    def statuses(self) -> frozenset[int] | None:
        return self._statuses

    @property
    def headers(self) -> Mapping[str, str] | None:
        return self._headers

    def is_response_cacheable(self, response: ResponseLike) -> bool:
        """Check a response against the configured statuses and headers.

        Raises:
            CacheableResponseError: If `response` does not look like a response.
        """
        if response is None or not isinstance(response, ResponseLike):
            msg = (
                "is_response_cacheable() requires a response with 'status_code' and "
                f"'headers', got {type(response).__name__}"
            )
            raise CacheableResponseError(msg)

        cacheable = True
        if self._statuses is not None:
            cacheable = response.status_code in self._statuses

        if cacheable and self._headers is not None:
            cacheable = any(
                response.headers.get(name) == value for name, value in self._headers.items()
            )

        if not cacheable:
            logger.debug(
                "response_not_cacheable",
                status_code=response.status_code,
                statuses=sorted(self._statuses) if self._statuses is not None else None,
                headers=dict(self._headers) if self._headers is not None else None,
            )
        return cacheable

    is_cacheable = is_response_cacheable

    def __repr__(self) -> str:
        statuses = sorted(self._statuses) if self._statuses is not None else None
        headers = dict(self._headers) if self._headers is not None else None
        return f"{type(self).__name__}(statuses={statuses!r}, headers={headers!r})"


class CacheableResponsePlugin:
    """Cache-layer plugin that refuses to store non-cacheable responses.

    Example:
        >>> plugin = CacheableResponsePlugin(statuses=[200])
        >>> plugin.cache_will_update(response)  # response, or None to skip caching
    """

    def __init__(
        self,
        statuses: Iterable[int] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self.cacheable_response = CacheableResponse(statuses=statuses, headers=headers)

    def cache_will_update(self, response: R) -> R | None:
        """Return the response if it may be cached, otherwise None."""
        if self.cacheable_response.is_response_cacheable(response):
            return response
        return None
