"""Concurrent execution of independent traversals."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Iterable
from typing import TypeVar

T = TypeVar("T")


async def fan_out(jobs: Iterable[Awaitable[T]]) -> list[T]:
    """Run independent jobs concurrently and join them.

    Results come back in input order, but the jobs themselves complete in no
    particular order. The first failure cancels the remaining jobs and is
    re-raised. Request pacing is left to the RequestLimiter the jobs share.
    """
    tasks = [asyncio.ensure_future(job) for job in jobs]
    if not tasks:
        return []
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
