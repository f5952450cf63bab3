"""Structured logging for fetch and traversal operations.

This module provides telemetry hooks for the fetcher and the traversal
driver, emitting structured logs for observability.
"""

from __future__ import annotations

import logging

from .definitions import FetchResult, TraversalResult

logger = logging.getLogger(__name__)


def log_request(*, url: str, attempt: int) -> None:
    """Log an outgoing request (verbose policies only)."""
    logger.info("mirror_request", extra={"url": url, "attempt": attempt})


def log_fetch_retry(
    *,
    url: str,
    attempt: int,
    max_retries: int,
    delay: float,
    error: str | None,
) -> None:
    """Log a failed attempt that will be retried.

    Args:
        url: URL being fetched
        attempt: 1-based number of the attempt that failed
        max_retries: Attempt budget of the policy
        delay: Backoff before the next attempt, in seconds
        error: Failure description
    """
    logger.warning(
        "fetch_retry",
        extra={
            "url": url,
            "attempt": attempt,
            "max_retries": max_retries,
            "delay": delay,
            "error": error,
        },
    )


def log_fetch_exhausted(*, result: FetchResult) -> None:
    """Log a fetch that ran out of attempts."""
    logger.error(
        "fetch_exhausted",
        extra={
            "url": result.url,
            "attempts": result.attempts,
            "waited": result.waited,
            "error": result.last_error,
        },
    )


def log_page_fetched(
    *,
    url: str,
    page_index: int,
    items: int,
    latency_ms: float | None = None,
) -> None:
    """Log completion of a single page."""
    logger.debug(
        "page_fetched",
        extra={
            "url": url,
            "page_index": page_index,
            "items": items,
            "latency_ms": latency_ms,
        },
    )


def log_traversal_complete(*, result: TraversalResult, total_latency_ms: float | None = None) -> None:
    """Log a traversal that reached DONE."""
    logger.info(
        "traversal_complete",
        extra={
            "url": result.url,
            "pages": result.pages,
            "items": result.items,
            "total_latency_ms": total_latency_ms,
        },
    )


def log_traversal_aborted(*, result: TraversalResult) -> None:
    """Log a traversal that ended ABORTED."""
    logger.error(
        "traversal_aborted",
        extra={
            "url": result.url,
            "failed_url": result.failed_url,
            "attempts": result.attempts,
            "pages": result.pages,
            "error": result.last_error,
        },
    )
