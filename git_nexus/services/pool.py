"""Fixed-size worker pool for per-repository work.

Workers share nothing: each call gets one item and returns one value.
Results are collected in the calling thread as they complete, so the
returned list is in completion order.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import TypeVar

__all__ = ["default_worker_count", "run_parallel"]

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)


def default_worker_count() -> int:
    """Same default as ThreadPoolExecutor: min(32, cpu_count + 4)."""
    return min(32, (os.cpu_count() or 1) + 4)


def run_parallel(
    items: Iterable[T],
    worker: Callable[[T], R],
    *,
    max_workers: int | None = None,
) -> list[R]:
    """Apply `worker` to every item on a thread pool.

    An exception raised by `worker` propagates to the caller after the pool
    shuts down; callers that need per-item isolation catch inside `worker`.

    Args:
        items: Work items
        worker: Function applied to each item
        max_workers: Pool size, None for `default_worker_count()`

    Returns:
        One result per item, in completion order
    """
    work = list(items)
    if not work:
        return []

    workers = max_workers if max_workers is not None else default_worker_count()
    if workers < 1:
        raise ValueError("max_workers must be at least 1")
    workers = min(workers, len(work))

    logger.debug(
        "dispatching %d item(s) to %d worker(s)",
        len(work),
        workers,
        extra={"event": "pool.dispatch", "items": len(work), "workers": workers},
    )

    results: list[R] = []
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="git-nexus") as executor:
        futures = [executor.submit(worker, item) for item in work]
        for future in as_completed(futures):
            results.append(future.result())
    return results
