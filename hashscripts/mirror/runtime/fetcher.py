"""Retrying JSON fetcher.

A single URL is requested until it answers 200 with a JSON body or the
policy's attempt budget runs out. Non-200 statuses, connection errors,
timeouts and unparseable bodies are all retried the same way. Exhaustion is
reported as a tagged FetchResult, never raised.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import aiohttp

from .cancellation import CancellationToken
from .definitions import FetchAttempt, FetchPolicy, FetchResult
from .http import HTTPClient
from .limiter import RequestLimiter
from .telemetry import log_fetch_exhausted, log_fetch_retry, log_request

Sleep = Callable[[float], Awaitable[None]]


class RetryingFetcher:
    """Fetches JSON with linear backoff between attempts."""

    def __init__(
        self,
        http: HTTPClient,
        policy: FetchPolicy | None = None,
        *,
        limiter: RequestLimiter | None = None,
        cancel_token: CancellationToken | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        """Initialize fetcher.

        Args:
            http: HTTP client used for every attempt
            policy: Default retry policy (overridable per call)
            limiter: Optional limiter shared with other fetchers
            cancel_token: Optional token checked before each attempt and during backoff
            sleep: Backoff sleep; defaults to the token's sleep or asyncio.sleep
        """
        self.http = http
        self.policy = policy or FetchPolicy()
        self.limiter = limiter
        self.cancel_token = cancel_token
        self._sleep = sleep

    def resolve(self, url: str, relative_to: str | None = None) -> str:
        return self.http.resolve(url, relative_to)

    async def fetch(self, url: str, *, policy: FetchPolicy | None = None) -> FetchResult:
        """Fetch ``url`` and parse its JSON body.

        Args:
            url: Absolute URL or a path relative to the client base URL
            policy: Retry policy for this call (defaults to the fetcher policy)

        Returns:
            FetchResult tagged SUCCESS or EXHAUSTED

        Raises:
            TraversalCancelledError: If the cancellation token fires
        """
        policy = policy or self.policy
        state = FetchAttempt(url=self.resolve(url))

        while state.attempt < policy.max_retries:
            self._check_cancelled(state.url)
            state.attempt += 1
            if policy.verbose:
                log_request(url=state.url, attempt=state.attempt)

            try:
                status, data = await self._request(state.url, policy.timeout)
            except (aiohttp.ClientError, TimeoutError, ValueError) as e:
                state.last_error = f"{type(e).__name__}: {e}"
            else:
                if status == 200:
                    return FetchResult.success(state, data)
                state.last_error = f"HTTP {status}"

            if state.attempt >= policy.max_retries:
                break

            delay = policy.delay_for(state.attempt)
            if state.attempt >= policy.log_after_attempts:
                log_fetch_retry(
                    url=state.url,
                    attempt=state.attempt,
                    max_retries=policy.max_retries,
                    delay=delay,
                    error=state.last_error,
                )
            await self._backoff(delay, state.url)
            state.waited += delay

        result = FetchResult.exhausted(state)
        log_fetch_exhausted(result=result)
        return result

    async def _request(self, url: str, timeout: float) -> tuple[int, object]:
        if self.limiter is None:
            return await self.http.get_json(url, timeout=timeout)
        async with self.limiter:
            return await self.http.get_json(url, timeout=timeout)

    async def _backoff(self, delay: float, url: str) -> None:
        if self._sleep is not None:
            await self._sleep(delay)
            self._check_cancelled(url)
        elif self.cancel_token is not None:
            await self.cancel_token.sleep(delay, url)
        else:
            await asyncio.sleep(delay)

    def _check_cancelled(self, url: str) -> None:
        if self.cancel_token is not None:
            self.cancel_token.raise_if_cancelled(url)
