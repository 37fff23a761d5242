# src/tickbar/control/client.py

from __future__ import annotations

import logging
import socket

from .protocol import Command, encode_command

logger = logging.getLogger(__name__)


def send_command(
        command: Command,
        *,
        host: str = "127.0.0.1",
        port: int,
        timeout: float = 2.0,
) -> None:
    """
    Send one command to a running bar: connect, write, close.

    No reply is expected. Raises OSError (ConnectionRefusedError when nothing listens).
    """
    payload = encode_command(command)
    with socket.create_connection((host, int(port)), timeout=timeout) as sock:
        sock.sendall(payload)
        sock.shutdown(socket.SHUT_WR)
    logger.debug("Sent %r to %s:%d", payload, host, port)
