# src/tickbar/cli/main.py

"""
CLI entrypoint.

`tickbar` with no words runs the bar:
- control listener in a background thread,
- worker pool for block evaluation,
- the main loop in the main thread until `shutdown`.

`tickbar refresh`, `tickbar shutdown`, `tickbar update NAME...` talk to a bar
that is already running and exit.
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from collections.abc import Sequence

from ..config import Settings, get_settings
from ..connectors.draw_sinks import make_draw_sink
from ..control.client import send_command
from ..control.listener import ControlListener
from ..control.protocol import parse_command
from ..core.threadpool import ConfigurationError
from ..logging_setup import setup_logging
from .bootstrap import create_inbox, create_pool, load_bar

logger = logging.getLogger(__name__)


def _build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tickbar",
        description="Status bar with independently refreshed blocks.",
        epilog="Commands for a running bar: refresh | shutdown | update NAME [NAME ...]",
    )
    parser.add_argument("words", nargs="*", help="command to send to a running bar")
    parser.add_argument("--port", type=int, default=settings.port, help=f"control port (default: {settings.port})")
    parser.add_argument("--stdout", action="store_true", help="print the bar instead of calling xsetroot")
    return parser


def _run_client(settings: Settings, words: Sequence[str], port: int) -> int:
    command = parse_command(" ".join(words))
    if command is None:
        print(f"tickbar: unknown command {' '.join(words)!r}", file=sys.stderr)
        return 2
    try:
        send_command(command, host=settings.host, port=port)
    except OSError as e:
        print(f"tickbar: no bar listening on {settings.host}:{port} ({e})", file=sys.stderr)
        return 1
    return 0


def _raise_interrupt(signum, _frame) -> None:
    raise KeyboardInterrupt(f"signal {signum}")


def run_bar(settings: Settings, *, port: int, draw_target: str) -> int:
    inbox = create_inbox(settings)

    try:
        listener = ControlListener(inbox, host=settings.host, port=port)
    except OSError as e:
        logger.error("Cannot bind control port %s:%d: %s", settings.host, port, e)
        return 1

    try:
        draw = make_draw_sink(draw_target)
        bar = load_bar(settings.bar_module)
        pool = create_pool(settings, inbox)
    except (ConfigurationError, ValueError, ImportError, AttributeError, TypeError):
        logger.exception("Invalid configuration.")
        listener.close()
        return 1

    listener.start()
    if pool is not None:
        bar.attach_pool(pool)

    try:
        signal.signal(signal.SIGTERM, _raise_interrupt)
    except ValueError:
        # Not in the main thread (embedded use); Ctrl+C still works.
        pass

    try:
        bar.run(draw, inbox)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    finally:
        listener.close()
        if pool is not None:
            pool.shutdown()
        logger.info("Bye.")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    settings = get_settings()
    args = _build_parser(settings).parse_args(argv)

    if args.words:
        return _run_client(settings, args.words, args.port)

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)
    draw_target = "stdout" if args.stdout else settings.draw_target
    return run_bar(settings, port=args.port, draw_target=draw_target)


if __name__ == "__main__":
    raise SystemExit(main())
