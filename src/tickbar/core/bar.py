# src/tickbar/core/bar.py

from __future__ import annotations

"""
Bar orchestrator.

The bar owns its blocks in display order and runs the single-threaded main loop:

    refresh due blocks -> render -> draw if changed
    -> take a queued command, or wait for one until the next deadline
    -> act on it (update / shutdown / nothing)

Evaluation may happen on the worker pool, but every decision about blocks is
made here, on one thread.
"""

import logging
import queue
import time
from collections.abc import Iterable, Sequence

from ..control.protocol import Command, CommandKind
from .block import Block
from .cache import Clock
from .ports import DrawSink, PoolHandle

logger = logging.getLogger(__name__)


class Bar:
    def __init__(
            self,
            blocks: Sequence[Block],
            *,
            delimiter: str = "",
            left_buffer: str = "",
            right_buffer: str = "",
            hide_empty: bool = True,
            clock: Clock = time.monotonic,
    ) -> None:
        self.blocks: tuple[Block, ...] = tuple(blocks)
        self.delimiter = delimiter
        self.left_buffer = left_buffer
        self.right_buffer = right_buffer
        self.hide_empty = hide_empty
        self._clock = clock

    def __repr__(self) -> str:
        return f"Bar(blocks={len(self.blocks)}, delimiter={self.delimiter!r}, hide_empty={self.hide_empty})"

    def attach_pool(self, pool: PoolHandle) -> None:
        """
        Evaluate blocks on `pool` from now on.

        A block waiting on the pool has no deadline, so run() only notices its
        result when something lands in the inbox. Build the pool with
        `notify=make_wakeup(inbox)` (or any callable that queues a refresh
        command) or one-shot blocks never show their pooled value.
        """
        for block in self.blocks:
            block.attach_pool(pool)

    def render(self) -> str:
        parts = []
        for block in self.blocks:
            text = block.current()
            if self.hide_empty and not text:
                continue
            parts.append(text)
        return f"{self.left_buffer}{self.delimiter.join(parts)}{self.right_buffer}"

    def refresh(self) -> None:
        """Scheduling pass: collect finished jobs and start refreshes that are due."""
        for block in self.blocks:
            block.update()

    def time_until_next_update(self) -> float | None:
        """Seconds until the earliest block deadline (0 if overdue), None if nothing is scheduled."""
        deadlines = [d for d in (b.next_deadline() for b in self.blocks) if d is not None]
        if not deadlines:
            return None
        return max(0.0, min(deadlines) - self._clock())

    def update(self, names: Iterable[str]) -> int:
        """Force-refresh every block whose name is in `names`. Returns how many matched."""
        wanted = set(names)
        matched = 0
        for block in self.blocks:
            if block.name is not None and block.name in wanted:
                block.update_now()
                matched += 1
        return matched

    def run(self, draw: DrawSink, inbox: "queue.Queue[Command]") -> None:
        """
        Main loop. Returns when a shutdown command arrives.

        Sleeps until the nearest block deadline or the next command. Pooled
        results are collected on the wake-up the pool sends (see attach_pool).
        """
        drawn: str | None = None

        while True:
            self.refresh()
            text = self.render()
            if text != drawn:
                drawn = text
                draw(text)

            command = self._next_command(inbox)
            if command is None or command.kind is CommandKind.REFRESH:
                continue

            if command.kind is CommandKind.UPDATE:
                matched = self.update(command.names)
                logger.debug("update %s -> %d block(s)", sorted(command.names), matched)
            elif command.kind is CommandKind.SHUTDOWN:
                logger.info("Shutdown requested.")
                return

    def _next_command(self, inbox: "queue.Queue[Command]") -> Command | None:
        try:
            return inbox.get_nowait()
        except queue.Empty:
            pass

        # None blocks until a command arrives; a timeout just means "a block is due".
        timeout = self.time_until_next_update()
        try:
            return inbox.get(timeout=timeout)
        except queue.Empty:
            return None
