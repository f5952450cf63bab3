"""Cursor-paginated traversal over mirror-node collections.

This module provides the PageTraversal class that walks a collection page by
page, following ``links.next``, folding every item into a caller-owned
aggregation state, and reporting how the walk ended.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from time import perf_counter
from typing import Any, Generic, TypeVar

from ..core.enums import TraversalState
from ..core.exceptions import ProtocolError
from .definitions import FetchPolicy, TraversalResult
from .fetcher import RetryingFetcher
from .telemetry import log_page_fetched, log_traversal_aborted, log_traversal_complete

S = TypeVar("S")

# A fold may mutate the state and return None, return a new state, or be a coroutine doing either.
Fold = Callable[[Any, S], Any]


class PageTraversal(Generic[S]):
    """Walks one paginated resource from a starting URL.

    Pages are strictly sequential: page N+1 is requested only after every
    item of page N has been folded. Any page whose fetch is exhausted ends
    the traversal ABORTED; nothing after it is requested.
    """

    def __init__(
        self,
        fetcher: RetryingFetcher,
        *,
        items_field: str,
        fold: Fold[S],
        initial: S,
        policy: FetchPolicy | None = None,
        max_pages: int | None = None,
    ) -> None:
        """Initialize traversal.

        Args:
            fetcher: Retrying fetcher used for every page
            items_field: Name of the list holding the page items (e.g. "nfts")
            fold: Per-item callback ``(item, state) -> state``
            initial: Fresh aggregation state owned by this traversal
            policy: Retry policy for page requests (defaults to the fetcher's)
            max_pages: Optional cap on pages; exceeding it raises ProtocolError
        """
        if max_pages is not None and max_pages < 1:
            raise ValueError("max_pages must be at least 1")
        self._fetcher = fetcher
        self._items_field = items_field
        self._fold = fold
        self._state_value = initial
        self._policy = policy
        self._max_pages = max_pages
        self.state = TraversalState.FETCHING_PAGE
        self.history: list[TraversalState] = []

    async def run(self, url: str) -> TraversalResult[S]:
        """Traverse every page starting at ``url``.

        Returns:
            TraversalResult in state DONE or ABORTED

        Raises:
            ProtocolError: Malformed page, repeated cursor or page cap exceeded
            TraversalCancelledError: If the fetcher's cancellation token fires
        """
        start_url = self._fetcher.resolve(url)
        next_url: str | None = start_url
        seen: set[str] = set()
        pages = 0
        items = 0
        started = perf_counter()

        while next_url is not None:
            if self._max_pages is not None and pages >= self._max_pages:
                raise ProtocolError(
                    f"Traversal exceeded {self._max_pages} pages at {next_url}", url=next_url
                )
            seen.add(next_url)

            self._enter(TraversalState.FETCHING_PAGE)
            page_started = perf_counter()
            fetched = await self._fetcher.fetch(next_url, policy=self._policy)
            if not fetched.ok:
                self._enter(TraversalState.ABORTED)
                result = TraversalResult(
                    state=TraversalState.ABORTED,
                    data=self._state_value,
                    url=start_url,
                    pages=pages,
                    items=items,
                    failed_url=fetched.url,
                    attempts=fetched.attempts,
                    last_error=fetched.last_error,
                )
                log_traversal_aborted(result=result)
                return result

            page_items, cursor = self._split_page(fetched.data, next_url)

            self._enter(TraversalState.FOLDING_ITEMS)
            for item in page_items:
                await self._absorb(item)
            pages += 1
            items += len(page_items)
            log_page_fetched(
                url=next_url,
                page_index=pages - 1,
                items=len(page_items),
                latency_ms=(perf_counter() - page_started) * 1000.0,
            )

            self._enter(TraversalState.ADVANCING_CURSOR)
            if cursor is None:
                next_url = None
                continue
            next_url = self._fetcher.resolve(cursor, relative_to=next_url)
            if next_url in seen:
                raise ProtocolError(f"Cursor revisits an earlier page: {next_url}", url=next_url)

        self._enter(TraversalState.DONE)
        result = TraversalResult(
            state=TraversalState.DONE,
            data=self._state_value,
            url=start_url,
            pages=pages,
            items=items,
        )
        log_traversal_complete(result=result, total_latency_ms=(perf_counter() - started) * 1000.0)
        return result

    def _split_page(self, body: Any, url: str) -> tuple[list[Any], str | None]:
        """Extract the items list and the next cursor from a page body."""
        if not isinstance(body, dict):
            raise ProtocolError(
                f"Expected a JSON object from {url}, got {type(body).__name__}", url=url
            )

        page_items = body.get(self._items_field)
        if not isinstance(page_items, list):
            raise ProtocolError(
                f"Response from {url} has no '{self._items_field}' list", url=url
            )

        links = body.get("links")
        if links is None:
            return page_items, None
        if not isinstance(links, dict):
            raise ProtocolError(f"Malformed 'links' in response from {url}", url=url)

        cursor = links.get("next")
        if cursor is None or cursor == "":
            return page_items, None
        if not isinstance(cursor, str):
            raise ProtocolError(f"Malformed 'links.next' in response from {url}", url=url)
        return page_items, cursor

    async def _absorb(self, item: Any) -> None:
        out = self._fold(item, self._state_value)
        if inspect.isawaitable(out):
            out = await out
        if out is not None:
            self._state_value = out

    def _enter(self, state: TraversalState) -> None:
        self.state = state
        self.history.append(state)


async def traverse(
    fetcher: RetryingFetcher,
    url: str,
    *,
    items_field: str,
    fold: Fold[S],
    initial: S,
    policy: FetchPolicy | None = None,
    max_pages: int | None = None,
) -> TraversalResult[S]:
    """Run a PageTraversal in one call."""
    walker = PageTraversal(
        fetcher,
        items_field=items_field,
        fold=fold,
        initial=initial,
        policy=policy,
        max_pages=max_pages,
    )
    return await walker.run(url)
