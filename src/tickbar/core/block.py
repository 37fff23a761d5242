# src/tickbar/core/block.py

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from .cache import Clock, TimedCache
from .evaluators import as_evaluator
from .ports import Evaluator, PoolHandle


class Block:
    """
    One named, displayable piece of the bar.

    Owns its TimedCache; the bar reads through the block and never touches the
    cache directly. Display clamping happens on read, the cached value is left alone.

    `interval` is in seconds and must be positive; None means evaluate once and
    then only on an explicit update.
    """

    def __init__(
            self,
            source: Evaluator | Callable[[], Any] | None = None,
            *,
            name: str | None = None,
            interval: float | None = None,
            min_size: int | None = None,
            max_size: int | None = None,
            size: int | None = None,
            initial: str = "",
            clock: Clock = time.monotonic,
    ) -> None:
        if size is not None:
            min_size = max_size = size

        self.name = name
        self.min_size = min_size
        self.max_size = max_size
        self.evaluator = as_evaluator(source)
        self.cache = TimedCache(
            self.evaluator.evaluate,
            interval,
            initial=initial,
            clock=clock,
            label=f"block {name!r}" if name else "block",
        )

    def __repr__(self) -> str:
        return f"Block(name={self.name!r}, interval={self.cache.interval!r}, source={self.evaluator!r})"

    def current(self) -> str:
        """Cached text, cut to max_size, then padded with trailing spaces to min_size."""
        out = self.cache.value
        if self.max_size is not None:
            out = out[: self.max_size]
        if self.min_size is not None and len(out) < self.min_size:
            out = out.ljust(self.min_size)
        return out

    def needs_update(self) -> bool:
        return self.cache.needs_update()

    def next_deadline(self) -> float | None:
        return self.cache.next_deadline()

    def update(self) -> None:
        self.cache.update()

    def update_now(self) -> None:
        self.cache.update_now()

    def attach_pool(self, pool: PoolHandle) -> None:
        self.cache.attach_pool(pool)
