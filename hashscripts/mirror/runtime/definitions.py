"""Fetch policy and result structures.

This module defines the data structures that describe how a single request
is retried and what a fetch or a traversal hands back to its caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..core.enums import FetchOutcome, TraversalState
from ..core.exceptions import TraversalAbortedError

S = TypeVar("S")


@dataclass(frozen=True)
class FetchPolicy:
    """Retry policy for a single mirror-node request.

    Backoff is linear: the wait after failed attempt ``n`` is
    ``backoff_seconds * n``. No jitter, no cap.

    Attributes:
        timeout: Per-request timeout in seconds; a timeout counts as a failed attempt
        max_retries: Total number of attempts before the fetch is exhausted
        backoff_seconds: Backoff multiplier per attempt
        log_after_attempts: Failed attempts from this number on are logged as warnings
        verbose: Log every requested URL
    """

    timeout: float = 5.0
    max_retries: int = 10
    backoff_seconds: float = 0.5
    log_after_attempts: int = 5
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError("FetchPolicy timeout must be positive")
        if self.max_retries < 1:
            raise ValueError("FetchPolicy max_retries must be at least 1")
        if self.backoff_seconds < 0:
            raise ValueError("FetchPolicy backoff_seconds cannot be negative")
        if self.log_after_attempts < 1:
            raise ValueError("FetchPolicy log_after_attempts must be at least 1")

    def delay_for(self, attempt: int) -> float:
        """Backoff to wait after the given (1-based) failed attempt."""
        return self.backoff_seconds * attempt


@dataclass
class FetchAttempt:
    """In-flight retry state for one URL."""

    url: str
    attempt: int = 0
    waited: float = 0.0
    last_error: str | None = None


@dataclass(frozen=True)
class FetchResult:
    """Tagged outcome of a retrying fetch.

    Attributes:
        outcome: SUCCESS with a parsed body, or EXHAUSTED once retries ran out
        url: URL that was fetched
        data: Parsed JSON body (None when exhausted)
        attempts: Number of HTTP attempts made
        waited: Total backoff slept, in seconds
        last_error: Description of the last failure, if any
    """

    outcome: FetchOutcome
    url: str
    data: Any = None
    attempts: int = 0
    waited: float = 0.0
    last_error: str | None = None

    @classmethod
    def success(cls, attempt: FetchAttempt, data: Any) -> FetchResult:
        return cls(
            outcome=FetchOutcome.SUCCESS,
            url=attempt.url,
            data=data,
            attempts=attempt.attempt,
            waited=attempt.waited,
            last_error=attempt.last_error,
        )

    @classmethod
    def exhausted(cls, attempt: FetchAttempt) -> FetchResult:
        return cls(
            outcome=FetchOutcome.EXHAUSTED,
            url=attempt.url,
            attempts=attempt.attempt,
            waited=attempt.waited,
            last_error=attempt.last_error,
        )

    @property
    def ok(self) -> bool:
        return self.outcome is FetchOutcome.SUCCESS

    def unwrap(self) -> Any:
        """Return the parsed body or raise TraversalAbortedError."""
        if not self.ok:
            raise TraversalAbortedError(
                f"No response from {self.url} after {self.attempts} attempts",
                url=self.url,
                attempts=self.attempts,
                last_error=self.last_error,
            )
        return self.data


@dataclass
class TraversalResult(Generic[S]):
    """Result of a paginated traversal.

    Attributes:
        state: Terminal state, DONE or ABORTED
        data: Aggregation state; partial when ABORTED
        url: Starting URL of the traversal
        pages: Pages fetched and fully folded
        items: Items folded across all pages
        failed_url: Page URL that exhausted its retries (ABORTED only)
        attempts: Attempts spent on the failed page (ABORTED only)
        last_error: Last failure on the failed page (ABORTED only)
    """

    state: TraversalState
    data: S
    url: str
    pages: int = 0
    items: int = 0
    failed_url: str | None = None
    attempts: int = 0
    last_error: str | None = None

    @property
    def ok(self) -> bool:
        return self.state is TraversalState.DONE

    def unwrap(self) -> S:
        """Return the aggregation state or raise TraversalAbortedError."""
        if not self.ok:
            raise TraversalAbortedError(
                f"Traversal of {self.url} aborted at {self.failed_url} "
                f"after {self.attempts} attempts ({self.pages} pages completed)",
                url=self.failed_url or self.url,
                attempts=self.attempts,
                pages_completed=self.pages,
                last_error=self.last_error,
            )
        return self.data
