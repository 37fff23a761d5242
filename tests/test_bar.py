# tests/test_bar.py

from __future__ import annotations

import queue
import threading
import time

import pytest

from tickbar.cli.bootstrap import make_wakeup
from tickbar.control.protocol import Command
from tickbar.core.bar import Bar
from tickbar.core.block import Block
from tickbar.core.threadpool import WorkerPool

from .fakes import CountingCompute, FakeClock, GatedCompute, RecordingSink, wait_for


def _static(*values: str) -> list[Block]:
    return [Block(lambda v=v: v) for v in values]


def _evaluated(bar: Bar) -> Bar:
    bar.refresh()
    return bar


@pytest.mark.parametrize(
    ("hide_empty", "expected"),
    [(True, ">a|b<"), (False, ">a||b<")],
)
def test_render_composition(hide_empty: bool, expected: str) -> None:
    bar = Bar(_static("a", "", "b"), delimiter="|", left_buffer=">", right_buffer="<", hide_empty=hide_empty)
    assert _evaluated(bar).render() == expected


def test_render_draws_delimiters_and_buffers() -> None:
    bar = Bar(_static("test1", "test2"), delimiter=" | ", left_buffer=" >>> ", right_buffer=" <<< ")
    assert _evaluated(bar).render() == " >>> test1 | test2 <<< "


def test_hidden_leading_block_leaves_no_dangling_delimiter() -> None:
    bar = Bar(_static("", "a", "b", ""), delimiter="|")
    assert _evaluated(bar).render() == "a|b"


def test_empty_bar_renders_only_buffers() -> None:
    assert Bar([], left_buffer="[", right_buffer="]").render() == "[]"


def test_deadline_selection(clock: FakeClock) -> None:
    blocks = [
        Block(CountingCompute(), interval=1.0, clock=clock),
        Block(CountingCompute(), interval=5.0, clock=clock),
        Block(CountingCompute(), interval=None, clock=clock),
    ]
    bar = _evaluated(Bar(blocks, clock=clock))

    assert bar.time_until_next_update() == pytest.approx(1.0)

    clock.advance(0.25)
    assert bar.time_until_next_update() == pytest.approx(0.75)


def test_deadline_is_none_when_nothing_is_scheduled(clock: FakeClock) -> None:
    bar = _evaluated(Bar([Block(CountingCompute(), clock=clock) for _ in range(3)], clock=clock))
    assert bar.time_until_next_update() is None


def test_deadline_is_zero_for_new_or_overdue_blocks(clock: FakeClock) -> None:
    bar = Bar([Block(CountingCompute(), interval=1.0, clock=clock)], clock=clock)
    assert bar.time_until_next_update() == 0.0

    bar.refresh()
    clock.advance(10.0)
    assert bar.time_until_next_update() == 0.0


def test_update_unknown_name_is_a_no_op(clock: FakeClock) -> None:
    blocks = [Block(CountingCompute(), name="a", interval=10.0, clock=clock), Block(CountingCompute(), clock=clock)]
    bar = _evaluated(Bar(blocks, clock=clock))
    before = [b.cache.last_update for b in blocks]

    clock.advance(1.0)
    assert bar.update({"x"}) == 0
    assert [b.cache.last_update for b in blocks] == before


def test_update_refreshes_every_block_sharing_a_name(clock: FakeClock) -> None:
    a1 = Block(CountingCompute(), name="a", clock=clock)
    a2 = Block(CountingCompute(), name="a", clock=clock)
    other = Block(CountingCompute(), name="b", clock=clock)
    unnamed = Block(CountingCompute(), clock=clock)
    bar = _evaluated(Bar([a1, a2, other, unnamed], delimiter=" "))

    assert bar.update(["a"]) == 2
    assert bar.render() == "2 2 1 1"


def test_run_applies_commands_in_order_and_draws_changes(inbox) -> None:
    compute = CountingCompute()
    bar = Bar([Block(compute, name="a")], left_buffer="<", right_buffer=">")
    sink = RecordingSink()

    inbox.put(Command.update(["a"]))
    inbox.put(Command.refresh())
    inbox.put(Command.update(["nobody"]))
    inbox.put(Command.shutdown())

    bar.run(sink, inbox)

    # Unchanged renders are not redrawn.
    assert sink.frames == ["<1>", "<2>"]
    assert inbox.empty()


def test_run_wakes_on_block_deadline(inbox) -> None:
    bar = Bar([Block(CountingCompute(), interval=0.02)])
    sink = RecordingSink()

    t = threading.Thread(target=bar.run, args=(sink, inbox), daemon=True)
    t.start()
    try:
        assert wait_for(lambda: len(sink.frames) >= 3)
    finally:
        inbox.put(Command.shutdown())
        t.join(timeout=2.0)
    assert not t.is_alive()
    assert sink.frames[:3] == ["1", "2", "3"]


def test_run_waits_for_commands_when_nothing_is_scheduled() -> None:
    inbox: "queue.Queue[Command]" = queue.Queue(maxsize=1)
    bar = Bar([Block(lambda: "static")])
    sink = RecordingSink()

    t = threading.Thread(target=bar.run, args=(sink, inbox), daemon=True)
    t.start()
    assert wait_for(lambda: sink.frames == ["static"])
    time.sleep(0.05)
    assert t.is_alive()

    inbox.put(Command.shutdown())
    t.join(timeout=2.0)
    assert not t.is_alive()


def test_run_with_worker_pool_shows_pooled_results(inbox) -> None:
    slow = GatedCompute("slow value")
    bar = Bar([Block(slow, name="slow", initial="..."), Block(lambda: "fast")], delimiter="|")
    sink = RecordingSink()

    with WorkerPool(2, notify=make_wakeup(inbox)) as pool:
        bar.attach_pool(pool)
        t = threading.Thread(target=bar.run, args=(sink, inbox), daemon=True)
        t.start()
        try:
            # The slow block does not hold back the rest of the bar.
            assert wait_for(lambda: "...|fast" in sink.frames)
            slow.release()
            assert wait_for(lambda: sink.frames[-1:] == ["slow value|fast"])
        finally:
            slow.release()
            inbox.put(Command.shutdown())
            t.join(timeout=2.0)

    assert not t.is_alive()


def test_pending_one_shot_block_leaves_waking_to_the_pool(inbox) -> None:
    slow = GatedCompute("late")
    bar = Bar([Block(slow, name="slow")])

    with WorkerPool(1, notify=make_wakeup(inbox)) as pool:
        bar.attach_pool(pool)
        bar.refresh()
        assert slow.started.wait(timeout=2.0)

        # Nothing to sleep towards while the job is out.
        assert bar.time_until_next_update() is None

        slow.release()
        assert inbox.get(timeout=2.0) == Command.refresh()
        bar.refresh()
        assert bar.render() == "late"
