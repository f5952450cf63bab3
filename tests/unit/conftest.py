"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import Any

import pytest

from hashscripts.mirror.runtime import FetchPolicy, HTTPClient, RetryingFetcher

BASE_URL = "https://mirror.test"


class ScriptedHTTP(HTTPClient):
    """HTTPClient that answers from a per-URL script instead of the network.

    Each URL maps to a list of outcomes consumed in order; the last outcome
    repeats once the list is down to one. An outcome is an exception
    instance (raised), an int (non-200 status) or anything else (a 200 body).
    """

    def __init__(self, base_url: str = BASE_URL) -> None:
        super().__init__(base_url=base_url)
        self.script: dict[str, list[Any]] = {}
        self.requests: list[str] = []
        self.timeouts: list[float | None] = []

    def add(self, url: str, *outcomes: Any) -> ScriptedHTTP:
        self.script.setdefault(self.resolve(url), []).extend(outcomes)
        return self

    async def get_json(self, url, *, timeout=None, headers=None):
        url = self.resolve(url)
        self.requests.append(url)
        self.timeouts.append(timeout)
        queue = self.script.get(url)
        if not queue:
            raise AssertionError(f"Unexpected request: {url}")
        outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(outcome, BaseException):
            raise outcome
        if isinstance(outcome, int) and not isinstance(outcome, bool):
            return outcome, None
        return 200, outcome

    async def close(self) -> None:
        pass


class SleepRecorder:
    """Backoff sleep that records delays without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)

    @property
    def total(self) -> float:
        return sum(self.delays)


@pytest.fixture
def http() -> ScriptedHTTP:
    return ScriptedHTTP()


@pytest.fixture
def sleeper() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def policy() -> FetchPolicy:
    return FetchPolicy(timeout=1.0, max_retries=3, backoff_seconds=0.5)


@pytest.fixture
def fetcher(http, sleeper, policy) -> RetryingFetcher:
    return RetryingFetcher(http, policy, sleep=sleeper)


@pytest.fixture
def make_http():
    """Factory for scripted clients with a non-default base URL."""
    return ScriptedHTTP
