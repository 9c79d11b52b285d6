"""
navsync CLI

Entry point: argument parsing and dispatch only.
All command logic lives in cli.handlers.
"""

import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from cli.wiring import build_parser, dispatch_command
from navsync import __version__


def _load_environment(env_file: Optional[Path] = None) -> None:
    """Load NAVSYNC_* settings from `.env`; the project file wins over exported values."""
    path = Path(env_file) if env_file is not None else Path.cwd() / ".env"
    if path.is_file():
        load_dotenv(path, override=True)


def main(argv: Optional[list[str]] = None) -> int:
    _load_environment()
    parser = build_parser(version=__version__)
    args = parser.parse_args(argv)
    return dispatch_command(parser, args)


if __name__ == "__main__":
    sys.exit(main())
