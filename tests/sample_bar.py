# tests/sample_bar.py

"""Minimal bar definition module used by the CLI tests."""

from __future__ import annotations

from tickbar.core.bar import Bar
from tickbar.core.block import Block


def build_bar() -> Bar:
    return Bar(
        [
            Block(lambda: "alpha", name="a"),
            Block(lambda: "", name="empty"),
            Block(lambda: "beta", name="b", interval=60.0),
        ],
        delimiter="|",
        left_buffer="[",
        right_buffer="]",
    )
