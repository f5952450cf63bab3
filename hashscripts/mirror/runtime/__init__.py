"""Fetch runtime: retrying fetcher, paginated traversal and admission control.

Architecture:
    - http.py: aiohttp session wrapper returning (status, body)
    - fetcher.py: RetryingFetcher, linear backoff, tagged FetchResult
    - traversal.py: PageTraversal state machine over ``links.next`` cursors
    - limiter.py: RequestLimiter shared by concurrent traversals
    - cancellation.py: CancellationToken threaded through fetch and backoff
    - fanout.py: join helper for independent traversals
    - telemetry.py: structured logging
"""

from __future__ import annotations

from .cancellation import CancellationToken
from .definitions import FetchAttempt, FetchPolicy, FetchResult, TraversalResult
from .fanout import fan_out
from .fetcher import RetryingFetcher
from .http import HTTPClient
from .limiter import RequestLimiter
from .traversal import PageTraversal, traverse

__all__ = [
    "HTTPClient",
    "FetchPolicy",
    "FetchAttempt",
    "FetchResult",
    "TraversalResult",
    "RetryingFetcher",
    "PageTraversal",
    "traverse",
    "RequestLimiter",
    "CancellationToken",
    "fan_out",
]
