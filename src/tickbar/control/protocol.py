# src/tickbar/control/protocol.py

from __future__ import annotations

"""
Remote-control wire format.

UTF-8 text over TCP, one command per connection, terminated by the client
closing its side:

    refresh                 wake the main loop
    shutdown                stop the bar (pool drained, threads joined)
    update <name> [...]     refresh the named blocks now

Anything else is ignored.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class CommandKind(str, Enum):
    REFRESH = "refresh"
    SHUTDOWN = "shutdown"
    UPDATE = "update"


@dataclass(slots=True, frozen=True)
class Command:
    kind: CommandKind
    names: frozenset[str] = frozenset()

    @classmethod
    def refresh(cls) -> "Command":
        return cls(CommandKind.REFRESH)

    @classmethod
    def shutdown(cls) -> "Command":
        return cls(CommandKind.SHUTDOWN)

    @classmethod
    def update(cls, names: Iterable[str]) -> "Command":
        return cls(CommandKind.UPDATE, frozenset(names))


def parse_command(payload: str | bytes) -> Command | None:
    """Map one connection's payload to a Command, or None if it is not one."""
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8", errors="replace")

    tokens = payload.split()
    if not tokens:
        return None

    head, rest = tokens[0], tokens[1:]
    if head == CommandKind.REFRESH.value:
        return Command.refresh()
    if head == CommandKind.SHUTDOWN.value:
        return Command.shutdown()
    if head == CommandKind.UPDATE.value:
        return Command.update(rest)
    return None


def encode_command(command: Command) -> bytes:
    words = [command.kind.value]
    if command.kind is CommandKind.UPDATE:
        words.extend(sorted(command.names))
    return " ".join(words).encode("utf-8")
