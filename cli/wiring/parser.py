"""Parser wiring extracted from navsync_cli entrypoint."""

from __future__ import annotations

import argparse
from pathlib import Path

COMMANDS = ("watch", "add", "delete")


def build_parser(*, version: str) -> argparse.ArgumentParser:
    """Configure the CLI parser. Commands are validated in dispatch (unknown -> exit 1)."""
    parser = argparse.ArgumentParser(
        prog="navsync",
        description="Keep the navigation manifest and generated screen files in sync",
        epilog="No command: watch the manifest until Ctrl+C. add/delete: one-shot change.",
    )
    parser.add_argument("--version", "-V", action="version", version=f"%(prog)s {version}")
    parser.add_argument(
        "command",
        nargs="?",
        default=None,
        metavar="COMMAND",
        help=" | ".join(COMMANDS) + " (default: watch)",
    )
    parser.add_argument("screen", nargs="?", default=None, help="Screen name for add/delete")
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Project root (default: NAVSYNC_ROOT or current directory)",
    )
    parser.add_argument("--component", default=None, help="add: component name (default: derived from name)")
    parser.add_argument("--title", default=None, help="add: tab title (default: derived from name)")
    parser.add_argument("--icon", default=None, help="add: tab bar icon name (default: screen name)")
    parser.add_argument("--yes", "-y", action="store_true", help="Non-interactive: accept every default answer")
    parser.add_argument("--no-git", action="store_true", help="Never check status or offer commits")
    parser.add_argument("--quiet", "-q", action="store_true", help="Only warnings and errors")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser
