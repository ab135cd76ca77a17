"""
Worker pool and thread-safe reduction sinks for per-frame fan-out.

Each detection stage evaluates independent items (contours, light bar
pairs, candidates) with a pure function and pushes survivors into a sink.
``WorkerPool.for_each`` is a barrier: it returns only once every item has
been processed, so the next stage always sees the complete output.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait, FIRST_EXCEPTION
from typing import Callable, Generic, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar("T")


class ConcurrentSink(Generic[T]):
    """Append-only collection safe to fill from worker threads."""

    def __init__(self):
        self._items: List[T] = []
        self._lock = threading.Lock()

    def append(self, item: T) -> None:
        with self._lock:
            self._items.append(item)

    def items(self) -> List[T]:
        """Snapshot of the collected items (arrival order)."""
        with self._lock:
            return list(self._items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class MaxReducer(Generic[T]):
    """
    Keeps the highest-scored item pushed from any thread.

    The best score is independent of arrival order. Among equal scores the
    first one to arrive is kept.
    """

    def __init__(self):
        self._best: Optional[Tuple[float, T]] = None
        self._count = 0
        self._lock = threading.Lock()

    def push(self, score: float, item: T) -> None:
        with self._lock:
            self._count += 1
            if self._best is None or score > self._best[0]:
                self._best = (score, item)

    def best(self) -> Optional[Tuple[float, T]]:
        with self._lock:
            return self._best

    def __len__(self) -> int:
        with self._lock:
            return self._count


class WorkerPool:
    """
    Thin wrapper over ThreadPoolExecutor used by the detection stages.

    Example:
        with WorkerPool(max_workers=4) as pool:
            pool.for_each(pairs, evaluate)
    """

    def __init__(self, max_workers: Optional[int] = None):
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="armor-worker",
        )
        self._closed = False
        logging.info(f"Worker pool started (max_workers={self._executor._max_workers})")

    @property
    def max_workers(self) -> int:
        return self._executor._max_workers

    def for_each(self, items: Iterable[T], fn: Callable[[T], None]) -> None:
        """
        Run fn over every item and wait for all of them.

        The first exception raised by a worker is re-raised here after the
        remaining work has been cancelled or has finished.
        """
        if self._closed:
            raise RuntimeError("WorkerPool is closed")

        futures = [self._executor.submit(fn, item) for item in items]
        if not futures:
            return

        done, not_done = wait(futures, return_when=FIRST_EXCEPTION)
        for future in not_done:
            future.cancel()
        wait(not_done)

        for future in futures:
            if future.cancelled():
                continue
            exc = future.exception()
            if exc is not None:
                raise exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=True)
        logging.info("Worker pool stopped")

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def run_each(pool: Optional[WorkerPool], items: Iterable[T], fn: Callable[[T], None]) -> None:
    """Fan out over pool when one is given, otherwise run serially."""
    if pool is None:
        for item in items:
            fn(item)
        return
    pool.for_each(items, fn)
