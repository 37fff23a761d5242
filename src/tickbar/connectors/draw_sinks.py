# src/tickbar/connectors/draw_sinks.py

from __future__ import annotations

"""
Draw sinks: where the rendered bar goes.

The main loop calls a sink only when the text changed.
"""

import logging
import subprocess
import sys
from typing import TextIO

from ..core.ports import DrawSink

logger = logging.getLogger(__name__)


class XsetrootSink:
    """Set the X root window name (dwm and friends read the bar from there)."""

    def __init__(self, executable: str = "xsetroot") -> None:
        self.executable = executable
        self._warned = False

    def __call__(self, text: str) -> None:
        try:
            subprocess.run(
                [self.executable, "-name", text],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError as e:
            # Missing binary / no X: say it once, keep the bar loop alive.
            if not self._warned:
                self._warned = True
                logger.error("Cannot run %s: %s", self.executable, e)


class StdoutSink:
    """One line per change, for piping into lemonbar and similar bars."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream

    def __call__(self, text: str) -> None:
        stream = self.stream or sys.stdout
        stream.write(text + "\n")
        stream.flush()


SINKS = {
    "xsetroot": XsetrootSink,
    "stdout": StdoutSink,
}


def make_draw_sink(target: str) -> DrawSink:
    try:
        factory = SINKS[target.strip().lower()]
    except KeyError:
        raise ValueError(f"unknown draw target {target!r} (expected one of: {', '.join(SINKS)})") from None
    return factory()
