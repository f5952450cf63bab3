"""HTTP client helper."""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import urljoin, urlsplit

import aiohttp


class HTTPClient:
    """Async HTTP client wrapper.

    Root-relative paths (endpoint paths and ``links.next`` cursors) are
    appended to ``base_url``, so a base with a path prefix such as
    ``https://host/proxy`` keeps it. Non-200 responses are returned with
    their status rather than raised, so the caller decides what counts as a
    retryable failure.
    """

    def __init__(self, base_url: str | None = None, timeout: float = 30.0) -> None:
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def resolve(self, url: str, relative_to: str | None = None) -> str:
        """Turn a path or cursor into an absolute URL.

        A root-relative ``url`` on the base URL's origin is appended to
        ``base_url``; anything else (query-only cursors, pages on another
        host) is joined onto ``relative_to`` or ``base_url``.
        """
        if url.startswith(("http://", "https://")):
            return url
        anchor = relative_to or self.base_url
        if not anchor:
            raise ValueError(f"Cannot resolve relative URL without a base: {url}")
        if url.startswith("/") and self.base_url and _same_origin(anchor, self.base_url):
            return self.base_url.rstrip("/") + url
        return urljoin(anchor, url)

    async def get_json(
        self,
        url: str,
        *,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
    ) -> tuple[int, Any]:
        """GET request returning ``(status, parsed_body)``.

        The body is only parsed for a 200 response; otherwise it is None.

        Raises:
            aiohttp.ClientError: Connection level failure
            TimeoutError: Request exceeded its timeout
            ValueError: 200 response whose body is empty or not valid JSON
        """
        url = self.resolve(url)
        kwargs: dict[str, Any] = {"headers": headers}
        # aiohttp reads an explicit None as "no timeout", so only pass overrides
        if timeout is not None:
            kwargs["timeout"] = aiohttp.ClientTimeout(total=timeout)

        async with self.session.get(url, **kwargs) as response:
            if response.status != 200:
                return response.status, None
            # response.json() returns None for an empty body
            return response.status, json.loads(await response.text())

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()


def _same_origin(a: str, b: str) -> bool:
    left, right = urlsplit(a), urlsplit(b)
    return (left.scheme, left.netloc) == (right.scheme, right.netloc)
