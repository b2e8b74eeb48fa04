"""
Shared helpers for the seeders.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def run_parallel_batches(
    items: Sequence[T],
    async_fn: Callable[[T], Awaitable[R]],
    batch_size: int = 5,
    delay_between_batches: float = 0.5,
    on_batch: Callable[[list[tuple[T, R | None, Exception | None]]], Any] | None = None,
) -> list[tuple[T, R | None, Exception | None]]:
    """
    Execute an async function on items in parallel batches.

    At most ``batch_size`` calls are in flight at once; batches are separated
    by ``delay_between_batches`` seconds. Failures never abort the run: each
    item yields ``(item, result, None)`` or ``(item, None, exc)``, in input
    order.

    Args:
        items: Work items
        async_fn: Coroutine function called once per item
        batch_size: Maximum concurrent calls
        delay_between_batches: Pause between batches (seconds)
        on_batch: Called with each batch's results, in order, before the
            next batch starts

    Returns:
        One ``(item, result, error)`` tuple per item, in input order
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    results: list[tuple[T, R | None, Exception | None]] = []

    async def safe_call(item: T) -> tuple[T, R | None, Exception | None]:
        try:
            return (item, await async_fn(item), None)
        except Exception as e:
            logger.warning("Batch item %r failed: %s", item, e)
            return (item, None, e)

    for i in range(0, len(items), batch_size):
        batch = items[i:i + batch_size]

        batch_results = list(await asyncio.gather(*[safe_call(item) for item in batch]))
        if on_batch is not None:
            on_batch(batch_results)
        results.extend(batch_results)

        if i + batch_size < len(items):
            await asyncio.sleep(delay_between_batches)

    return results
