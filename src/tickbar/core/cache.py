# src/tickbar/core/cache.py

from __future__ import annotations

"""
Self-refreshing value on a timer.

A TimedCache is Fresh, Due or Pending:
- Fresh   -> value is valid, nothing to do
- Due     -> never evaluated, or clock() - last_update > interval (strictly)
- Pending -> a job is out on the worker pool; value/last_update are frozen

Caches evaluate inline until a pool is attached. If the pool goes away under
them (execute() raises PoolClosedError) they drop back to inline mode for good.

Only the main loop calls into a cache. Workers talk back through the job's
return channel, which poll() drains without blocking.
"""

import logging
import queue
import threading
import time
from collections.abc import Callable
from enum import Enum
from typing import Any

from .ports import PoolHandle
from .threadpool import Job, PoolClosedError, Result

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class CacheMode(str, Enum):
    INLINE = "inline"
    POOLED = "pooled"


class TimedCache:
    def __init__(
            self,
            compute: Callable[[], Any],
            interval: float | None = None,
            *,
            initial: str = "",
            clock: Clock = time.monotonic,
            label: str = "cache",
    ) -> None:
        if interval is not None and interval <= 0:
            raise ValueError(f"interval must be > 0 (got {interval})")

        self.compute = compute
        self.interval = None if interval is None else float(interval)
        self.label = label
        self._clock = clock

        self._value = initial
        self._last_update: float | None = None

        self._lock = threading.Lock()
        self._mode = CacheMode.INLINE
        self._pool: PoolHandle | None = None

        self._pending: "queue.Queue[Result] | None" = None

    # ---- read side ----

    @property
    def value(self) -> str:
        return self._value

    @property
    def last_update(self) -> float | None:
        return self._last_update

    @property
    def mode(self) -> CacheMode:
        return self._mode

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def needs_update(self) -> bool:
        if self.pending:
            return False
        if self._last_update is None:
            return True
        if self.interval is None:
            return False
        return self._clock() - self._last_update > self.interval

    def next_deadline(self) -> float | None:
        """
        Clock reading at which the cache next becomes Due.

        None while Pending (the worker's notification wakes the loop instead)
        and for one-shot caches that already ran.
        """
        if self.pending:
            return None
        if self._last_update is None:
            return self._clock()
        if self.interval is None:
            return None
        return self._last_update + self.interval

    # ---- write side ----

    def attach_pool(self, pool: PoolHandle) -> None:
        with self._lock:
            self._pool = pool
            self._mode = CacheMode.POOLED

    def update(self) -> None:
        """Collect a finished job, or refresh if Due."""
        if self.pending:
            self.poll()
            return
        if self.needs_update():
            self.update_now()

    def update_now(self) -> None:
        """Refresh regardless of the timer. No-op while a job is outstanding."""
        if self.pending:
            return

        pool = self._pooled_handle()
        if pool is None:
            self._evaluate_inline()
            return

        job = Job(compute=self.compute, label=self.label)
        try:
            pool.execute(job)
        except PoolClosedError:
            logger.info("%s: worker pool is gone, evaluating inline from now on.", self.label)
            self._detach_pool(pool)
            self._evaluate_inline()
            return

        self._pending = job.return_channel

    def poll(self) -> bool:
        """Non-blocking check for the outstanding job. True if a result was consumed."""
        channel = self._pending
        if channel is None:
            return False
        try:
            result = channel.get_nowait()
        except queue.Empty:
            return False

        self._pending = None
        if result.ok:
            self.overwrite(str(result.value))
        else:
            self._keep_after_failure()
        return True

    def overwrite(self, value: str) -> None:
        # Single-writer (main loop): value and timestamp change together.
        self._value, self._last_update = value, self._clock()

    # ---- internals ----

    def _pooled_handle(self) -> PoolHandle | None:
        with self._lock:
            if self._mode is CacheMode.POOLED:
                return self._pool
            return None

    def _detach_pool(self, pool: PoolHandle) -> None:
        # One-way: only the caller that saw this exact pool fail flips the mode.
        with self._lock:
            if self._pool is pool:
                self._pool = None
                self._mode = CacheMode.INLINE

    def _evaluate_inline(self) -> None:
        try:
            value = self.compute()
        except Exception:
            logger.exception("%s: evaluation failed", self.label)
            self._keep_after_failure()
            return
        self.overwrite(str(value))

    def _keep_after_failure(self) -> None:
        # Keep showing the last good value; retry after one more interval.
        self._last_update = self._clock()
