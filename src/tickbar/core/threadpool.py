# src/tickbar/core/threadpool.py

from __future__ import annotations

"""
Fixed-size worker pool.

Workers pull jobs from one shared FIFO queue and push each result onto the
job's own return channel. The pool knows nothing about scheduling; callers
correlate results by channel, never by submission order.

Shutdown model:
- shutdown() closes the pool to new jobs, enqueues one TERMINATE per worker,
  then joins every thread.
- Jobs queued before the markers still run, so their results are delivered
  before shutdown() returns.
"""

import logging
import queue
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Invalid static configuration (e.g. a pool with no workers)."""


class PoolClosedError(RuntimeError):
    """Raised by execute() once the pool has started tearing down."""


@dataclass(slots=True, frozen=True)
class Result:
    value: str | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class Job:
    """One evaluation. Consumed exactly once by exactly one worker."""

    compute: Callable[[], Any]
    return_channel: "queue.Queue[Result]" = field(default_factory=lambda: queue.Queue(maxsize=1))
    label: str = "job"


# Sentinel placed on the job queue once per worker during shutdown.
TERMINATE = object()


class WorkerPool:
    def __init__(
            self,
            size: int,
            *,
            notify: Callable[[], None] | None = None,
            name: str = "tickbar-worker",
    ) -> None:
        """
        size   -> number of worker threads (must be > 0).
        notify -> optional callable run after every job ("work happened").
        """
        if size <= 0:
            raise ConfigurationError(f"worker pool needs at least one thread (got {size})")

        self.size = int(size)
        self._notify = notify
        self._jobs: "queue.Queue[Any]" = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

        self._threads = [
            threading.Thread(target=self._worker_loop, args=(i,), name=f"{name}-{i}", daemon=True)
            for i in range(self.size)
        ]
        for t in self._threads:
            t.start()

        logger.debug("Worker pool started (size=%d).", self.size)

    @property
    def closed(self) -> bool:
        return self._closed

    def execute(self, job: Job) -> None:
        """Queue a job. Raises PoolClosedError after shutdown() began."""
        with self._lock:
            if self._closed:
                raise PoolClosedError("worker pool is shut down")
            self._jobs.put(job)

    def shutdown(self) -> None:
        """Drain queued work, stop and join every worker. Safe to call twice."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            for _ in self._threads:
                self._jobs.put(TERMINATE)

        logger.debug("Stopping worker pool (size=%d)...", self.size)
        for t in self._threads:
            t.join()
        logger.debug("Worker pool stopped.")

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    def _worker_loop(self, worker_id: int) -> None:
        while True:
            item = self._jobs.get()
            if item is TERMINATE:
                logger.debug("Worker %d received stop signal.", worker_id)
                return

            job: Job = item
            try:
                result = Result(value=job.compute())
            except Exception as e:
                # One bad block must not take a worker down with it.
                logger.exception("Worker %d: %s failed", worker_id, job.label)
                result = Result(error=e)

            job.return_channel.put(result)

            if self._notify is not None:
                try:
                    self._notify()
                except Exception:
                    logger.debug("Worker %d: notify failed.", worker_id, exc_info=True)
