"""CLI command dispatch wiring extracted from navsync_cli."""

from __future__ import annotations

import argparse
from typing import Any, Callable

from cli import handlers


def dispatch_command(parser: argparse.ArgumentParser, args: Any) -> int:
    """Dispatch parsed CLI args to the matching command handler."""
    from navsync.logging import configure_cli_logging

    configure_cli_logging(quiet=getattr(args, "quiet", False), verbose=getattr(args, "verbose", False))

    if args.command is None:
        return handlers.handle_watch(args)

    dispatch: dict[str, Callable[[], int]] = {
        "watch": lambda: handlers.handle_watch(args),
        "add": lambda: handlers.handle_add(args),
        "delete": lambda: handlers.handle_delete(args),
    }
    handler = dispatch.get(args.command)
    if handler is None:
        handlers.report_error(f"unknown command '{args.command}' (expected: {', '.join(dispatch)})")
        parser.print_usage()
        return 1
    return handler()
