"""
Manifest Parser.

Reads the navigation layout TSX file and extracts the tab screens, the
control flags (`isAutoSaveEnabled`, `isEditing`) and the `pendingCommands`
queue. The screens array is found by shape, not by position:

    appNavigationStructure[0].screens[<type ~ 'tabs', name ~ '(tabs)'>].screens

Syntax errors never raise: tree-sitter recovers and flags the tree, and the
result is reported as UNPARSABLE so the caller waits for the next save.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from tree_sitter import Node, Tree

from navsync.logging import get_logger

from .models import (
    UNPARSABLE,
    CommandSpec,
    ControlFlags,
    ManifestSnapshot,
    ParseResult,
    PendingCommands,
    ScreenEntry,
)
from .tsx import (
    array_elements,
    bool_value,
    find_declarator_value,
    import_statements,
    literal_value,
    node_text,
    object_pairs,
    pair_key,
    parse_tsx,
    property_value,
    read_import,
    unwrap,
)

_LOG = get_logger("manifest.parser")

NAVIGATION_DECLARATION = "appNavigationStructure"
TABS_TYPE_MARKER = "tabs"
TABS_NAME_MARKER = "(tabs)"
AUTOSAVE_DECLARATION = "isAutoSaveEnabled"
EDITING_DECLARATION = "isEditing"
PENDING_DECLARATION = "pendingCommands"


def locate_screens_array(tree: Tree, source: bytes) -> Optional[Node]:
    """Return the tab navigator's `screens` array node, or None if the shape is not found."""
    structure = find_declarator_value(tree, NAVIGATION_DECLARATION, source)
    if structure is None or structure.type != "array":
        return None
    navigators = array_elements(structure)
    if not navigators:
        return None
    root_stack = unwrap(navigators[0])
    if root_stack is None or root_stack.type != "object":
        return None
    stack_screens = property_value(root_stack, "screens", source)
    if stack_screens is None or stack_screens.type != "array":
        return None
    for element in array_elements(stack_screens):
        element = unwrap(element)
        if element is None or element.type != "object":
            continue
        kind = property_value(element, "type", source)
        name = property_value(element, "name", source)
        if kind is None or name is None:
            continue
        if TABS_TYPE_MARKER in node_text(kind, source) and TABS_NAME_MARKER in node_text(name, source):
            tab_screens = property_value(element, "screens", source)
            if tab_screens is not None and tab_screens.type == "array":
                return tab_screens
            return None
    return None


def read_screen(obj: Node, source: bytes) -> ScreenEntry:
    """Read the recognized fields of one screen object; unknown fields are ignored."""
    fields: dict[str, Optional[str]] = {"name": "", "component_name": "", "title": None, "icon": None}
    for pair in object_pairs(obj):
        key = pair_key(pair, source)
        value = unwrap(pair.child_by_field_name("value"))
        if value is None:
            continue
        if key == "name":
            fields["name"] = literal_value(value, source)
        elif key == "component":
            fields["component_name"] = literal_value(value, source)
        elif key == "options" and value.type == "object":
            for opt in object_pairs(value):
                opt_value = unwrap(opt.child_by_field_name("value"))
                if opt_value is None:
                    continue
                opt_key = pair_key(opt, source)
                if opt_key == "title":
                    fields["title"] = literal_value(opt_value, source)
                elif opt_key == "tabBarIconName":
                    fields["icon"] = literal_value(opt_value, source)
    return ScreenEntry(
        name=fields["name"] or "",
        component_name=fields["component_name"] or "",
        title=fields["title"],
        icon=fields["icon"],
    )


def _read_command(node: Node, source: bytes) -> Optional[CommandSpec]:
    node = unwrap(node)
    if node is None:
        return None
    if node.type in ("string", "template_string"):
        name = literal_value(node, source).strip()
        return CommandSpec(name=name) if name else None
    if node.type != "object":
        return None
    values: dict[str, str] = {}
    for pair in object_pairs(node):
        value = unwrap(pair.child_by_field_name("value"))
        if value is not None:
            values[pair_key(pair, source)] = literal_value(value, source)
    name = (values.get("name") or "").strip()
    if not name:
        return None
    return CommandSpec(
        name=name,
        component_name=values.get("componentName") or values.get("component") or None,
        title=values.get("title") or None,
        icon=values.get("icon") or values.get("tabBarIconName") or None,
    )


def read_pending_commands(tree: Tree, source: bytes) -> PendingCommands:
    queue = find_declarator_value(tree, PENDING_DECLARATION, source)
    if queue is None or queue.type != "object":
        return PendingCommands()
    buckets: dict[str, list[CommandSpec]] = {"add": [], "delete": []}
    for key in buckets:
        items = property_value(queue, key, source)
        if items is None or items.type != "array":
            continue
        for item in array_elements(items):
            command = _read_command(item, source)
            if command is not None:
                buckets[key].append(command)
    return PendingCommands(add=tuple(buckets["add"]), delete=tuple(buckets["delete"]))


def read_control_flags(tree: Tree, source: bytes) -> ControlFlags:
    autosave = bool_value(find_declarator_value(tree, AUTOSAVE_DECLARATION, source))
    editing = bool_value(find_declarator_value(tree, EDITING_DECLARATION, source))
    return ControlFlags(
        autosave=True if autosave is None else autosave,
        editing=False if editing is None else editing,
    )


def parse_manifest(text: str) -> ParseResult:
    """Parse manifest source text into a ParseResult (UNPARSABLE on syntax errors)."""
    source = text.encode("utf-8")
    tree = parse_tsx(source)
    if tree.root_node.has_error:
        _LOG.warning("Syntax error in navigation manifest (likely a partial save); skipping this change.")
        return UNPARSABLE

    screens: list[ScreenEntry] = []
    screens_array = locate_screens_array(tree, source)
    if screens_array is None:
        _LOG.warning("Tab navigator screens array not found in manifest; no screens read.")
    else:
        for element in array_elements(screens_array):
            element = unwrap(element)
            if element is None or element.type != "object":
                continue
            screen = read_screen(element, source)
            if screen.name:
                screens.append(screen)

    imports = tuple(read_import(stmt, source) for stmt in import_statements(tree))
    return ParseResult(
        parsable=True,
        snapshot=ManifestSnapshot(screens=tuple(screens), imports=imports),
        flags=read_control_flags(tree, source),
        pending=read_pending_commands(tree, source),
        screens_found=screens_array is not None,
    )


def parse_manifest_file(path: Path) -> ParseResult:
    """Read and parse the manifest file. Missing/unreadable files are UNPARSABLE."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _LOG.error("Error reading navigation manifest %s: %s", path, e)
        return UNPARSABLE
    return parse_manifest(text)
