"""One-shot add/delete handlers (direct mode, no watcher, no editing gate)."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

from navsync.errors import NavSyncError
from navsync.manifest.commands import resolve_screen_name
from navsync.manifest.models import CommandSpec, ManifestSnapshot
from navsync.manifest.naming import (
    default_component_name,
    default_title,
    is_valid_identifier,
    is_valid_slug,
    slugify,
)
from navsync.manifest.parser import parse_manifest_file
from navsync.orchestration import CycleOutcome, CycleReport, SyncEngine
from navsync.prompts import Prompter

from .core_handlers_common import (
    _check_project,
    _clog,
    _config_from_args,
    _err,
    _git_for,
    _prompter_from_args,
)

_FAILED_OUTCOMES = frozenset(
    {
        CycleOutcome.CANCELLED,
        CycleOutcome.FAILED,
        CycleOutcome.UNPARSABLE,
        CycleOutcome.STRUCTURE_MISSING,
        CycleOutcome.ABORTED,
    }
)


def _read_snapshot(config: Any) -> Optional[ManifestSnapshot]:
    current = parse_manifest_file(config.manifest_path)
    if not current.parsable:
        _err(f"cannot parse {config.manifest_path}")
        return None
    if not current.screens_found:
        _err(f"tab navigator screens array not found in {config.manifest_path}")
        return None
    return current.snapshot


def _exit_code(report: CycleReport) -> int:
    if report.outcome in _FAILED_OUTCOMES:
        _clog().warning("navsync: %s finished with outcome '%s'", "direct run", report.outcome.value)
        return 1
    return 0


async def collect_add_fields(prompter: Prompter, raw_name: str, args: Any) -> Optional[CommandSpec]:
    """Interactively confirm the fields of a new screen. None if the user backs out."""
    name = raw_name if is_valid_slug(raw_name) else slugify(raw_name)
    component = await prompter.ask(
        "Component name:", getattr(args, "component", None) or default_component_name(name)
    )
    if not is_valid_identifier(component):
        _err(f"invalid component name: {component!r}")
        return None
    default = raw_name if raw_name != name else default_title(name)
    title = await prompter.ask("Tab title:", getattr(args, "title", None) or default)
    icon = await prompter.ask("Tab bar icon name:", getattr(args, "icon", None) or name)
    if not await prompter.confirm(f"Add screen '{name}' ({component}, title '{title}', icon '{icon}')?", default=True):
        _clog().info("Add cancelled.")
        return None
    return CommandSpec(name=name, component_name=component, title=title, icon=icon)


def handle_add(args: Any) -> int:
    """navsync add <screenName>"""
    raw = (getattr(args, "screen", None) or "").strip()
    if not raw:
        _err("add requires a screen name")
        return 1
    if not is_valid_slug(slugify(raw)):
        _err(f"invalid screen name: {raw!r}")
        return 1
    config = _config_from_args(args)
    if _check_project(config) != 0:
        return 1
    snapshot = _read_snapshot(config)
    if snapshot is None:
        return 1
    existing = resolve_screen_name(raw, snapshot)
    if existing is not None:
        _err(f"screen already exists in manifest: {existing!r}")
        return 1
    prompter = _prompter_from_args(args)
    engine = SyncEngine(config, prompter, git=_git_for(config))

    async def _run() -> int:
        command = await collect_add_fields(prompter, raw, args)
        if command is None:
            return 1
        return _exit_code(await engine.run_direct(add=[command]))

    try:
        return asyncio.run(_run())
    except NavSyncError as e:
        _err(str(e))
        return 1


def handle_delete(args: Any) -> int:
    """navsync delete <screenName>"""
    raw = (getattr(args, "screen", None) or "").strip()
    if not raw:
        _err("delete requires a screen name")
        return 1
    config = _config_from_args(args)
    if _check_project(config) != 0:
        return 1
    snapshot = _read_snapshot(config)
    if snapshot is None:
        return 1
    name = resolve_screen_name(raw, snapshot)
    if name is None:
        _err(f"screen not found in manifest: {raw!r}")
        return 1
    screen = snapshot.get(name)
    prompter = _prompter_from_args(args)
    engine = SyncEngine(config, prompter, git=_git_for(config))

    async def _run() -> int:
        label = f"'{name}' ({screen.component_name})" if screen and screen.component_name else f"'{name}'"
        if not await prompter.confirm(f"Delete screen {label}?", default=True):
            _clog().info("Delete cancelled.")
            return 1
        return _exit_code(await engine.run_direct(delete=[CommandSpec(name=name)]))

    try:
        return asyncio.run(_run())
    except NavSyncError as e:
        _err(str(e))
        return 1
