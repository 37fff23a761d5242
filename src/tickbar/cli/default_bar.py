# src/tickbar/cli/default_bar.py

"""
Default bar definition.

Copy this module somewhere on your PYTHONPATH, edit it, and point
TICKBAR_BAR_MODULE at it. A bar definition is any module with a build_bar()
that returns a Bar.
"""

from __future__ import annotations

import random
import time
from datetime import datetime

import psutil

from ..core.bar import Bar
from ..core.block import Block
from ..core.evaluators import BoundEvaluator, ShellEvaluator, run_shell


def build_bar() -> Bar:
    # All fields are optional; blocks without an interval evaluate once.
    return Bar(
        blocks(),
        delimiter=" | ",
        left_buffer=" >>> ",
        right_buffer=" <<< ",
    )


def blocks() -> list[Block]:
    return [
        # Shell one-liners: ShellEvaluator, or run_shell() inside a function.
        Block(ShellEvaluator("echo hello"), name="hello", min_size=8),
        Block(process_count, name="procs", interval=2.0),
        # psutil instead of parsing /proc by hand.
        Block(cpu_usage, name="cpu", interval=1.0, size=9),
        Block(memory_usage, name="mem", interval=5.0),
        # Context captured at definition time.
        Block(BoundEvaluator(clock, "%a %d %b %H:%M:%S"), name="clock", interval=1.0),
        # Slow blocks only hold up a worker thread, not the bar.
        Block(slow_random, name="slow", interval=3.0, size=12),
        # No interval: evaluated once, refreshed only by `tickbar update boot`.
        Block(lambda: f"up since {datetime.fromtimestamp(psutil.boot_time()):%d %b %H:%M}", name="boot", max_size=18),
    ]


def process_count() -> str:
    out = run_shell("ps -A --no-headers | wc -l")
    return f"processes: {out}"


def cpu_usage() -> str:
    return f"cpu {psutil.cpu_percent(interval=None):4.1f}%"


def memory_usage() -> str:
    vm = psutil.virtual_memory()
    return f"mem {vm.percent:.0f}%"


def clock(fmt: str) -> str:
    return datetime.now().strftime(fmt)


def slow_random() -> str:
    time.sleep(1.0)
    return f"slow: {random.randint(0, 65535)}"
