"""Watch handler."""

from __future__ import annotations

import asyncio
from typing import Any

from navsync.orchestration import SyncEngine

from .core_handlers_common import _check_project, _clog, _config_from_args, _git_for, _prompter_from_args


def handle_watch(args: Any) -> int:
    """Watch the navigation manifest and sync generated files on every change (Ctrl+C to stop)."""
    if getattr(args, "screen", None):
        _clog().warning("watch takes no screen argument; ignoring '%s'.", args.screen)
    config = _config_from_args(args)
    if _check_project(config) != 0:
        return 1
    engine = SyncEngine(config, _prompter_from_args(args), git=_git_for(config))
    _clog().info("navsync started for %s. Press Ctrl+C to exit.", config.root)
    try:
        asyncio.run(engine.watch())
    except KeyboardInterrupt:
        _clog().info("\nnavsync watch: stopped (Ctrl+C)")
    return 0
