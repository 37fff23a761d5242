# src/tickbar/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
Blocks only need something that evaluates to text; the main loop only needs
something that accepts the rendered bar.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Evaluator(Protocol):
    """Produces the text shown by one block. May be slow; may raise."""
    def evaluate(self) -> str: ...


class DrawSink(Protocol):
    """
    Receives the fully rendered bar whenever it changes.

    Where it goes (X root window name, stdout, a file) is up to the sink.
    """
    def __call__(self, text: str) -> None: ...


class PoolHandle(Protocol):
    """The part of a worker pool a cache is allowed to touch."""
    def execute(self, job: object) -> None: ...
