# src/tickbar/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads the bar definition module named in settings,
- creates the bounded command inbox,
- wires the worker pool's "work happened" signal back into that inbox.
"""

from __future__ import annotations

import contextlib
import importlib
import logging
import queue
from collections.abc import Callable

from ..config import Settings
from ..control.protocol import Command
from ..core.bar import Bar
from ..core.threadpool import WorkerPool

logger = logging.getLogger(__name__)


def load_bar(module_name: str) -> Bar:
    """
    Import `module_name` and call its build_bar().

    This is the whole block definition surface: a module with a function that
    returns a Bar. Import errors propagate (a broken definition is fatal).
    """
    module = importlib.import_module(module_name)
    build = getattr(module, "build_bar", None)
    if not callable(build):
        raise AttributeError(f"{module_name} does not define build_bar()")

    bar = build()
    if not isinstance(bar, Bar):
        raise TypeError(f"{module_name}.build_bar() returned {type(bar).__name__}, expected Bar")

    logger.info("Loaded bar from %s (%d blocks).", module_name, len(bar.blocks))
    return bar


def create_inbox(settings: Settings) -> "queue.Queue[Command]":
    return queue.Queue(maxsize=settings.channel_capacity)


def make_wakeup(inbox: "queue.Queue[Command]") -> Callable[[], None]:
    """
    Worker -> main loop signal.

    Never blocks a worker: if the inbox is full the loop is awake anyway.
    """
    def wakeup() -> None:
        with contextlib.suppress(queue.Full):
            inbox.put_nowait(Command.refresh())

    return wakeup


def create_pool(settings: Settings, inbox: "queue.Queue[Command]") -> WorkerPool | None:
    """Worker pool per settings, or None (inline evaluation) when num_workers is 0."""
    if settings.num_workers <= 0:
        logger.info("No worker threads configured; blocks evaluate inline.")
        return None
    return WorkerPool(settings.num_workers, notify=make_wakeup(inbox))
