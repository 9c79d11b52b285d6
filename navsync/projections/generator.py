"""
Projection generators: write, remove and move the per-screen files.

Overwrite policy when a target already exists: ask, defaulting to "yes" for
update/rename regeneration and "no" for a first-time addition.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Iterable, Optional

from navsync.config import NavSyncConfig
from navsync.logging import get_logger
from navsync.prompts import Prompter

from .targets import TARGET_LABELS, TargetKind, owning_dir, render_target, target_path

_LOG = get_logger("projections.generator")


def _prune_empty_dir(path: Optional[Path]) -> None:
    if path is None or not path.is_dir():
        return
    try:
        next(path.iterdir())
    except StopIteration:
        path.rmdir()
        _LOG.info("Removed empty directory: %s", path)


class ProjectionGenerator:
    """Generate/remove/move the feature module, Expo tab and Next.js page for a screen."""

    def __init__(self, config: NavSyncConfig, prompter: Prompter) -> None:
        self.config = config
        self.prompter = prompter

    def _screen_dir_roots(self) -> tuple[Path, ...]:
        return (self.config.features_dir, self.config.next_app_dir / self.config.tabs_dir)

    def path_for(self, kind: TargetKind, screen_name: str) -> Path:
        return target_path(self.config, kind, screen_name)

    async def generate(
        self,
        kind: TargetKind,
        screen_name: str,
        component_name: str,
        title: str,
        is_update: bool = False,
    ) -> Optional[Path]:
        """Write the target file. Returns its path, or None when the user keeps an existing file."""
        path = self.path_for(kind, screen_name)
        if path.exists():
            overwrite = await self.prompter.confirm(
                f"{TARGET_LABELS[kind].capitalize()} already exists: {path}. Overwrite?",
                default=is_update,
            )
            if not overwrite:
                _LOG.info("Skipped overwriting: %s", path)
                return None
        elif path.parent.exists() and kind is TargetKind.NEXT_PAGE:
            _LOG.info("Directory %s exists, but %s will be created.", path.parent, path.name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            render_target(self.config, kind, screen_name, component_name, title),
            encoding="utf-8",
        )
        _LOG.info("Generated: %s", path)
        return path

    def remove(self, kind: TargetKind, screen_name: str) -> Optional[Path]:
        """Delete the target if present. Returns the removed path, None if it was already absent."""
        path = self.path_for(kind, screen_name)
        if not path.exists():
            _LOG.info("Already absent: %s", path)
            return None
        path.unlink()
        _LOG.info("Removed: %s", path)
        _prune_empty_dir(owning_dir(self.config, kind, screen_name))
        return path

    def move(self, kind: TargetKind, old_name: str, new_name: str) -> Optional[Path]:
        """Move a renamed screen's artifact to its new location. None if there was nothing to move."""
        source = self.path_for(kind, old_name)
        dest = self.path_for(kind, new_name)
        if not source.exists():
            _LOG.info("Nothing to rename at %s", source)
            return None
        if dest.exists():
            _LOG.warning("Rename target %s exists; keeping it and removing %s", dest, source)
            source.unlink()
        else:
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(source), str(dest))
            _LOG.info("Renamed: %s -> %s", source, dest)
        _prune_empty_dir(owning_dir(self.config, kind, old_name))
        return source

    def discard(self, paths: Iterable[Path]) -> list[Path]:
        """Best-effort removal of files generated earlier in a cancelled batch."""
        removed: list[Path] = []
        for path in paths:
            try:
                if path.exists():
                    path.unlink()
                    removed.append(path)
                    _LOG.info("Removed: %s", path)
                    if path.parent.parent in self._screen_dir_roots():
                        _prune_empty_dir(path.parent)
            except OSError as e:
                _LOG.error("Error undoing %s: %s", path, e)
        return removed
