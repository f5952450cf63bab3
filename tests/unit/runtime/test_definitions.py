"""Unit tests for fetch policy and result structures."""

from __future__ import annotations

import pytest

from hashscripts.mirror.core import FetchOutcome, TraversalState
from hashscripts.mirror.runtime import FetchAttempt, FetchPolicy, FetchResult, TraversalResult


class TestFetchPolicy:
    """Test FetchPolicy."""

    def test_defaults(self):
        """Test defaults match the public mirror-node guidance."""
        policy = FetchPolicy()
        assert policy.timeout == 5.0
        assert policy.max_retries == 10
        assert policy.backoff_seconds == 0.5
        assert policy.log_after_attempts == 5
        assert policy.verbose is False

    def test_linear_delay(self):
        policy = FetchPolicy(backoff_seconds=0.5)
        assert [policy.delay_for(n) for n in (1, 2, 3)] == [0.5, 1.0, 1.5]

    def test_zero_backoff_allowed(self):
        assert FetchPolicy(backoff_seconds=0).delay_for(4) == 0

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"timeout": 0},
            {"max_retries": 0},
            {"backoff_seconds": -1},
            {"log_after_attempts": 0},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            FetchPolicy(**kwargs)

    def test_frozen(self):
        policy = FetchPolicy()
        with pytest.raises(AttributeError):
            policy.max_retries = 3


class TestFetchResult:
    """Test FetchResult tagging."""

    def test_success(self):
        attempt = FetchAttempt(url="https://mirror.test/a", attempt=2, waited=0.5, last_error="HTTP 500")
        result = FetchResult.success(attempt, {"x": 1})

        assert result.outcome is FetchOutcome.SUCCESS
        assert result.unwrap() == {"x": 1}
        assert result.attempts == 2
        assert result.waited == 0.5

    def test_exhausted(self):
        attempt = FetchAttempt(url="https://mirror.test/a", attempt=3, last_error="HTTP 503")
        result = FetchResult.exhausted(attempt)

        assert result.outcome is FetchOutcome.EXHAUSTED
        assert result.data is None
        assert not result.ok


class TestTraversalResult:
    """Test TraversalResult."""

    def test_done_unwraps(self):
        result = TraversalResult(state=TraversalState.DONE, data=[1], url="u", pages=1, items=1)
        assert result.ok
        assert result.unwrap() == [1]

    def test_aborted_keeps_partial_data(self):
        result = TraversalResult(
            state=TraversalState.ABORTED,
            data=[1],
            url="u",
            pages=1,
            failed_url="u2",
            attempts=10,
        )
        assert not result.ok
        assert result.data == [1]
