# src/tickbar/control/listener.py

from __future__ import annotations

"""
TCP control listener.

Binds once at construction (a bind failure is fatal to the caller), then accepts
one command per connection on a background thread and forwards it to the bar's
inbox. A full inbox blocks the listener instead of dropping commands.
"""

import contextlib
import logging
import queue
import socket
import threading

from .protocol import Command, parse_command

logger = logging.getLogger(__name__)

MAX_PAYLOAD_BYTES = 64 * 1024


class ControlListener:
    def __init__(
            self,
            inbox: "queue.Queue[Command]",
            *,
            host: str = "127.0.0.1",
            port: int,
            read_timeout: float = 5.0,
    ) -> None:
        self.inbox = inbox
        self.host = host
        self.read_timeout = read_timeout

        # Raises OSError (e.g. EADDRINUSE); the caller decides to exit.
        self._sock = socket.create_server((host, int(port)))
        self.port: int = self._sock.getsockname()[1]

        self._thread: threading.Thread | None = None
        self._closed = threading.Event()

    def start(self) -> "ControlListener":
        """Run the accept loop on a daemon thread."""
        t = threading.Thread(target=self.serve_forever, name="tickbar-control", daemon=True)
        t.start()
        self._thread = t
        logger.info("Control listener on %s:%d.", self.host, self.port)
        return self

    def serve_forever(self) -> None:
        while not self._closed.is_set():
            try:
                conn, _addr = self._sock.accept()
            except OSError:
                # Socket closed by close(); anything else is not recoverable either.
                if not self._closed.is_set():
                    logger.exception("Control listener accept failed; stopping.")
                return

            with conn:
                payload = self._read_payload(conn)

            if payload is None:
                continue

            command = parse_command(payload)
            if command is None:
                continue
            self.inbox.put(command)

    def close(self) -> None:
        self._closed.set()
        # shutdown() wakes a thread blocked in accept(); close() alone does not on Linux.
        with contextlib.suppress(OSError):
            self._sock.shutdown(socket.SHUT_RDWR)
        with contextlib.suppress(OSError):
            self._sock.close()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=2.0)

    def __enter__(self) -> "ControlListener":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _read_payload(self, conn: socket.socket) -> bytes | None:
        conn.settimeout(self.read_timeout)
        chunks: list[bytes] = []
        size = 0
        try:
            while size < MAX_PAYLOAD_BYTES:
                chunk = conn.recv(4096)
                if not chunk:
                    break
                chunks.append(chunk)
                size += len(chunk)
        except TimeoutError:
            # Client went quiet without closing: take what it sent.
            return b"".join(chunks) if chunks else None
        except OSError:
            # Broken client: drop the connection, keep listening.
            return None
        return b"".join(chunks)
