# src/tickbar/core/evaluators.py

from __future__ import annotations

"""
Block sources.

Everything a block can show goes through one capability: evaluate() -> str.

- FunctionEvaluator: a plain in-process function
- ShellEvaluator:    an external process (`sh -c ...`), stdout stripped
- BoundEvaluator:    a function plus the context it closes over
"""

import subprocess
from collections.abc import Callable
from typing import Any

from .ports import Evaluator


def run_shell(command: str, *, timeout: float | None = None) -> str:
    """
    Run `command` through `sh -c` and return its stdout with surrounding whitespace removed.

    A non-zero exit status is not an error: whatever was printed is shown.
    Timeouts and a missing shell raise (the cache keeps the previous value).
    """
    proc = subprocess.run(
        ["sh", "-c", command],
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
        timeout=timeout,
        check=False,
    )
    return proc.stdout.decode("utf-8", errors="replace").strip()


class FunctionEvaluator:
    def __init__(self, func: Callable[[], Any]) -> None:
        self.func = func

    def evaluate(self) -> str:
        return str(self.func())

    def __repr__(self) -> str:
        return f"FunctionEvaluator({getattr(self.func, '__name__', self.func)!r})"


class ShellEvaluator:
    def __init__(self, command: str, *, timeout: float | None = None) -> None:
        self.command = command
        self.timeout = timeout

    def evaluate(self) -> str:
        return run_shell(self.command, timeout=self.timeout)

    def __repr__(self) -> str:
        return f"ShellEvaluator({self.command!r})"


class BoundEvaluator:
    """Calls func(*args, **kwargs) on every evaluation."""

    def __init__(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        self.func = func
        self.args = args
        self.kwargs = kwargs

    def evaluate(self) -> str:
        return str(self.func(*self.args, **self.kwargs))

    def __repr__(self) -> str:
        return f"BoundEvaluator({getattr(self.func, '__name__', self.func)!r}, args={self.args!r})"


def as_evaluator(source: Evaluator | Callable[[], Any] | None) -> Evaluator:
    """Normalize what a bar definition hands us into an Evaluator."""
    if source is None:
        return FunctionEvaluator(str)
    if isinstance(source, Evaluator):
        return source
    if callable(source):
        return FunctionEvaluator(source)
    raise TypeError(f"block source must be callable or an Evaluator, not {type(source).__name__}")
