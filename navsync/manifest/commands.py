"""Fold pending add/delete commands into concrete manifest edits."""

from __future__ import annotations

from typing import Iterable, Optional

from navsync.logging import get_logger

from .models import CommandSpec, ManifestEdits, ManifestSnapshot, PendingCommands, ScreenEntry
from .naming import (
    default_component_name,
    default_title,
    is_valid_identifier,
    is_valid_slug,
    slugify,
)

_LOG = get_logger("manifest.commands")


def screen_from_command(command: CommandSpec) -> Optional[ScreenEntry]:
    """Build a ScreenEntry from free-text command input. None if no usable slug can be derived."""
    raw = (command.name or "").strip()
    name = raw if is_valid_slug(raw) else slugify(raw)
    if not is_valid_slug(name):
        return None
    component = (command.component_name or "").strip()
    if not is_valid_identifier(component):
        if component:
            _LOG.warning("'%s' is not a valid component identifier; using default.", component)
        component = default_component_name(name)
    title = (command.title or "").strip()
    if not title:
        # Free text like "My Settings" reads better as a title than its slug
        title = raw if raw != name else default_title(name)
    return ScreenEntry(name=name, component_name=component, title=title, icon=command.icon or None)


def resolve_screen_name(raw: str, snapshot: ManifestSnapshot) -> Optional[str]:
    """Map a delete target to a declared screen: exact name first, then its slug."""
    raw = (raw or "").strip()
    if snapshot.get(raw) is not None:
        return raw
    slug = slugify(raw)
    if slug and snapshot.get(slug) is not None:
        return slug
    return None


def fold_commands(
    snapshot: ManifestSnapshot,
    add: Iterable[CommandSpec] = (),
    delete: Iterable[CommandSpec] = (),
    *,
    clear_pending: bool = False,
) -> ManifestEdits:
    """Convert add/delete commands to ManifestEdits against the given snapshot."""
    edits = ManifestEdits(clear_pending_commands=clear_pending)
    for command in delete:
        name = resolve_screen_name(command.name, snapshot)
        if name is None:
            _LOG.warning("Delete command for unknown screen '%s' ignored.", command.name)
            continue
        if name not in edits.screen_names_to_delete:
            edits.screen_names_to_delete.append(name)
    planned = set(snapshot.names()) - set(edits.screen_names_to_delete)
    for command in add:
        screen = screen_from_command(command)
        if screen is None:
            _LOG.warning("Add command '%s' has no usable screen name; ignored.", command.name)
            continue
        if screen.name in planned:
            _LOG.warning("Screen '%s' already exists; add command ignored.", screen.name)
            continue
        planned.add(screen.name)
        edits.screens_to_add.append(screen)
    return edits


def fold_pending(snapshot: ManifestSnapshot, pending: PendingCommands) -> ManifestEdits:
    """Edits for the manifest's own pending queue; the queue is cleared in the same pass."""
    return fold_commands(snapshot, pending.add, pending.delete, clear_pending=True)
