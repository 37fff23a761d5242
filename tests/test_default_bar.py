# tests/test_default_bar.py

from __future__ import annotations

from tickbar.cli import default_bar


def test_default_bar_blocks_are_named_and_unique() -> None:
    bar = default_bar.build_bar()
    names = [b.name for b in bar.blocks]

    assert all(names)
    assert len(set(names)) == len(names)
    assert bar.delimiter == " | "


def test_psutil_blocks_render_text() -> None:
    assert default_bar.cpu_usage().startswith("cpu ")
    assert default_bar.memory_usage().startswith("mem ")
    assert default_bar.clock("%Y").isdigit()
