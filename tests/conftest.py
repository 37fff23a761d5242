# tests/conftest.py

from __future__ import annotations

import queue
import socket
from pathlib import Path

import pytest

from tickbar.config import Settings
from tickbar.control.listener import ControlListener
from tickbar.control.protocol import Command

from .fakes import FakeClock


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def inbox() -> "queue.Queue[Command]":
    return queue.Queue(maxsize=100)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings built directly rather than from the environment,
    to keep unit tests isolated and deterministic.
    """
    return Settings(
        app_name="tickbar-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        host="127.0.0.1",
        port=0,
        channel_capacity=100,
        num_workers=1,
        bar_module="tests.sample_bar",
        draw_target="stdout",
    )


@pytest.fixture()
def listener(inbox):
    """Control listener on an ephemeral port, closed after the test."""
    lst = ControlListener(inbox, port=0).start()
    yield lst
    lst.close()


@pytest.fixture()
def free_port() -> int:
    """A port nothing listens on (best effort: bound, read back, released)."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]
