"""Cooperative cancellation for multi-page traversals."""

from __future__ import annotations

import asyncio

from ..core.exceptions import TraversalCancelledError


class CancellationToken:
    """Flag shared by a caller and the traversals it started.

    The fetcher checks the token before every request and waits on it during
    backoff, so a cancel interrupts a sleeping retry immediately.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str | None = None) -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    def raise_if_cancelled(self, url: str | None = None) -> None:
        if self._event.is_set():
            message = "Traversal cancelled"
            if self.reason:
                message = f"{message}: {self.reason}"
            raise TraversalCancelledError(message, url=url)

    async def sleep(self, delay: float, url: str | None = None) -> None:
        """Sleep for ``delay`` seconds unless cancelled first."""
        self.raise_if_cancelled(url)
        if delay <= 0:
            return
        try:
            await asyncio.wait_for(self._event.wait(), timeout=delay)
        except TimeoutError:
            return
        self.raise_if_cancelled(url)
