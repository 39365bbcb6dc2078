"""
Concurrency utilities for provider calls.

Provides a bounded scheduler (max concurrent calls plus minimum spacing
between call starts), an order-preserving parallel map and a run deadline.
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


def is_rate_limit_error(error: BaseException) -> bool:
    """Check if an exception is a rate limit error (429)."""
    if getattr(error, "status_code", None) == 429:
        return True
    error_str = str(error).lower()
    return (
        "429" in error_str or
        "rate limit" in error_str or
        "rate_limit" in error_str or
        "too many requests" in error_str
    )


class Deadline:
    """
    Caller-supplied time budget for one run.

    A deadline of None never expires.
    """

    def __init__(self, seconds: Optional[float] = None):
        self.seconds = seconds
        self._expires_at = (
            time.monotonic() + seconds if seconds is not None else None
        )

    @property
    def expired(self) -> bool:
        return self._expires_at is not None and time.monotonic() >= self._expires_at

    def remaining(self) -> Optional[float]:
        """Seconds left (never negative), or None when unbounded."""
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())


class CallScheduler:
    """
    Concurrency-limited scheduler for calls to a rate-limited provider.

    At most ``max_concurrent`` calls run at once and consecutive call
    starts are spaced by at least ``min_interval`` seconds.
    """

    def __init__(self, max_concurrent: int = 1, min_interval: float = 0.0):
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        if min_interval < 0:
            raise ValueError("min_interval must not be negative")
        self.max_concurrent = max_concurrent
        self.min_interval = min_interval
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._spacing_lock = asyncio.Lock()
        self._last_start: Optional[float] = None

    async def _wait_for_turn(self, deadline: Optional[Deadline]) -> None:
        async with self._spacing_lock:
            now = time.monotonic()
            if self._last_start is not None and self.min_interval > 0:
                wait_time = self._last_start + self.min_interval - now
                if deadline is not None and deadline.remaining() is not None:
                    wait_time = min(wait_time, deadline.remaining())
                if wait_time > 0:
                    logger.debug(f"Scheduler spacing: waiting {wait_time:.2f}s")
                    await asyncio.sleep(wait_time)
            self._last_start = time.monotonic()

    async def run(
        self,
        call: Callable[[], Awaitable[R]],
        deadline: Optional[Deadline] = None,
    ) -> R:
        """
        Run ``call`` once a slot is free and the spacing interval has passed.

        Once ``deadline`` has expired the spacing wait is skipped so that
        pending work can be finalized immediately.
        """
        async with self._semaphore:
            if deadline is None or not deadline.expired:
                await self._wait_for_turn(deadline)
            return await call()


async def parallel_map(
    items: List[T],
    async_fn: Callable[[T], Awaitable[R]],
    max_concurrent: int = 5,
    desc: Optional[str] = None,
    return_exceptions: bool = False,
) -> List[R]:
    """
    Apply ``async_fn`` to every item concurrently, preserving input order.

    Each item owns exactly one slot in the result list, so no result is
    written by more than one task.

    Args:
        items: List of items to process
        async_fn: Async function to apply to each item
        max_concurrent: Maximum simultaneous operations
        desc: Description for logging progress
        return_exceptions: If True, exceptions are returned in the item's slot

    Returns:
        List of results in the same order as inputs

    Example:
        >>> vectors = await parallel_map(
        ...     documents,
        ...     embed_document,
        ...     max_concurrent=8,
        ...     return_exceptions=True,
        ... )
    """
    if not items:
        return []

    semaphore = asyncio.Semaphore(max_concurrent)
    completed = 0
    total = len(items)

    async def process_with_limit(item: T) -> R:
        nonlocal completed

        async with semaphore:
            try:
                result = await async_fn(item)
            except Exception as e:
                completed += 1
                if desc:
                    logger.warning(f"{desc}: {completed}/{total} (error: {e})")
                raise
            completed += 1
            if desc:
                logger.debug(f"{desc}: {completed}/{total}")
            return result

    # gather preserves argument order
    return await asyncio.gather(
        *(process_with_limit(item) for item in items),
        return_exceptions=return_exceptions,
    )
