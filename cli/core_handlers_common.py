"""Shared helpers for CLI handlers."""

from __future__ import annotations

from typing import Any

from navsync.config import NavSyncConfig, load_config
from navsync.prompts import ConsolePrompter, DefaultsPrompter, Prompter
from navsync.vcs import GitClient


def _err(msg: str) -> None:
    """Log unified error message (via logger, respects --quiet)."""
    _clog().error("navsync: %s", msg)


def _clog() -> Any:
    from navsync.logging import get_logger

    return get_logger("cli.handlers")


def _config_from_args(args: Any) -> NavSyncConfig:
    git_enabled = False if getattr(args, "no_git", False) else None
    return load_config(getattr(args, "root", None), git_enabled=git_enabled)


def _check_project(config: NavSyncConfig) -> int:
    """Return 0 if the project root and manifest exist, 1 and log an error otherwise."""
    if not config.root.is_dir():
        _err(f"not a directory: {config.root}")
        return 1
    if not config.manifest_path.is_file():
        _err(f"navigation manifest not found: {config.manifest_path}")
        return 1
    return 0


def _prompter_from_args(args: Any) -> Prompter:
    if getattr(args, "yes", False):
        return DefaultsPrompter()
    return ConsolePrompter()


def _git_for(config: NavSyncConfig) -> GitClient | None:
    if not config.git_enabled:
        return None
    return GitClient(config.root)
