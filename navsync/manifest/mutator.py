"""
Manifest Mutator (syntax-tree edit script).

`mutate(source, edits)` parses the manifest, turns the requested ManifestEdits
into a list of byte-span replacements anchored on tree nodes, and applies them
in a single pass. Bytes outside the replaced spans are copied unchanged, so
formatting and comments elsewhere in the file survive.

Span rules:
- a removed screen / import takes its whole line(s) with it, including the
  trailing comma and a same-line `//` comment;
- new screens go right before the closing `]` line, indented like their
  siblings, as multi-line object literals (single-line arrays are re-rendered
  inline);
- new imports go after the last import line, one per line, matching the
  file's semicolon style.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from tree_sitter import Node, Tree

from navsync.errors import ManifestStructureError, ManifestSyntaxError
from navsync.logging import get_logger

from .models import ImportSpec, ManifestEdits, ScreenEntry
from .naming import default_title
from .parser import PENDING_DECLARATION, locate_screens_array, read_screen
from .tsx import (
    array_elements,
    find_declarator_value,
    import_statements,
    line_indent,
    line_start,
    node_text,
    only_whitespace_before,
    parse_tsx,
    property_value,
    read_import,
    unwrap,
)

_LOG = get_logger("manifest.mutator")

DEFAULT_INDENT_UNIT = "  "


@dataclass(frozen=True, slots=True)
class TextEdit:
    """Replace source[start:end] with `text` (start == end for insertions)."""

    start: int
    end: int
    text: bytes = b""


def apply_edits(source: bytes, edits: Iterable[TextEdit]) -> bytes:
    """Apply non-overlapping edits in one pass. Insertions at the same offset keep their order."""
    ordered = sorted(edits, key=lambda e: (e.start, e.end))
    out: list[bytes] = []
    cursor = 0
    for edit in ordered:
        if edit.start < cursor:
            raise ValueError(f"overlapping edits at byte {edit.start}")
        out.append(source[cursor:edit.start])
        out.append(edit.text)
        cursor = edit.end
    out.append(source[cursor:])
    return b"".join(out)


def quote(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def render_screen(entry: ScreenEntry, indent: str = "", unit: str = DEFAULT_INDENT_UNIT) -> str:
    """Multi-line object literal for a screen; `component` is a bare identifier."""
    title = entry.title or default_title(entry.name)
    icon = entry.icon or entry.name
    inner = indent + unit
    return "\n".join(
        [
            f"{indent}{{",
            f"{inner}name: {quote(entry.name)},",
            f"{inner}component: {entry.component_name},",
            f"{inner}options: {{",
            f"{inner}{unit}title: {quote(title)},",
            f"{inner}{unit}tabBarIconName: {quote(icon)},",
            f"{inner}}},",
            f"{indent}}}",
        ]
    )


def render_screen_inline(entry: ScreenEntry) -> str:
    title = entry.title or default_title(entry.name)
    icon = entry.icon or entry.name
    return (
        f"{{ name: {quote(entry.name)}, component: {entry.component_name}, "
        f"options: {{ title: {quote(title)}, tabBarIconName: {quote(icon)} }} }}"
    )


def _next_token(node: Node) -> Optional[Node]:
    """Next sibling skipping comments."""
    sibling = node.next_sibling
    while sibling is not None and sibling.type == "comment":
        sibling = sibling.next_sibling
    return sibling


def _has_trailing_comma(node: Node) -> bool:
    token = _next_token(node)
    return token is not None and token.type == ","


def _line_span(source: bytes, start: int, end: int) -> tuple[int, int]:
    """Widen [start, end) to whole lines when the node owns its line(s)."""
    if not only_whitespace_before(source, start):
        while end < len(source) and source[end:end + 1] in (b" ", b"\t"):
            end += 1
        return start, end
    begin = line_start(source, start)
    cursor = end
    while cursor < len(source) and source[cursor:cursor + 1] in (b" ", b"\t"):
        cursor += 1
    if source.startswith(b"//", cursor):
        newline = source.find(b"\n", cursor)
        cursor = len(source) if newline == -1 else newline
    if source.startswith(b"\r\n", cursor):
        return begin, cursor + 2
    if source.startswith(b"\n", cursor) or cursor == len(source):
        return begin, min(cursor + 1, len(source))
    return begin, end


def _element_span(source: bytes, element: Node) -> tuple[int, int]:
    end = element.end_byte
    token = _next_token(element)
    if token is not None and token.type == ",":
        end = token.end_byte
    return _line_span(source, element.start_byte, end)


def _after_line(source: bytes, offset: int) -> tuple[int, bytes]:
    """Insertion point at the start of the line after `offset`, and a prefix if none exists."""
    newline = source.find(b"\n", offset)
    if newline == -1:
        return len(source), b"\n"
    return newline + 1, b""


def _indent_unit(source: bytes, element: Node, indent: str) -> str:
    element = unwrap(element) or element
    if element.type != "object":
        return DEFAULT_INDENT_UNIT
    pairs = [c for c in element.named_children if c.type == "pair"]
    if not pairs or not only_whitespace_before(source, pairs[0].start_byte):
        return DEFAULT_INDENT_UNIT
    pair_indent = line_indent(source, pairs[0].start_byte)
    if pair_indent.startswith(indent) and len(pair_indent) > len(indent):
        return pair_indent[len(indent):]
    return DEFAULT_INDENT_UNIT


def _screen_edits(tree: Tree, source: bytes, edits: ManifestEdits) -> list[TextEdit]:
    if not edits.screens_to_add and not edits.screen_names_to_delete:
        return []
    screens = locate_screens_array(tree, source)
    if screens is None:
        raise ManifestStructureError("tab navigator screens array not found in manifest")

    to_delete = set(edits.screen_names_to_delete)
    elements = array_elements(screens)
    kept: list[Node] = []
    deleted: list[Node] = []
    existing: set[str] = set()
    for element in elements:
        obj = unwrap(element)
        name = read_screen(obj, source).name if obj is not None and obj.type == "object" else ""
        if name and name in to_delete:
            deleted.append(element)
        else:
            kept.append(element)
            if name:
                existing.add(name)

    additions: list[ScreenEntry] = []
    for entry in edits.screens_to_add:
        if not entry.actionable:
            _LOG.warning("Skipping screen without name/component: %s", entry)
            continue
        if entry.name in existing:
            _LOG.info("Screen '%s' already declared in manifest; not adding it again.", entry.name)
            continue
        existing.add(entry.name)
        additions.append(entry)

    if not deleted and not additions:
        return []

    closing = screens.children[-1]
    single_line = screens.start_point[0] == screens.end_point[0]
    if single_line:
        parts = [node_text(e, source) for e in kept] + [render_screen_inline(a) for a in additions]
        text = "[" + ", ".join(parts) + "]"
        return [TextEdit(screens.start_byte, screens.end_byte, text.encode("utf-8"))]

    out: list[TextEdit] = []
    for element in deleted:
        start, end = _element_span(source, element)
        out.append(TextEdit(start, end))

    if additions:
        if elements:
            indent = line_indent(source, elements[0].start_byte)
            unit = _indent_unit(source, elements[0], indent)
        else:
            unit = DEFAULT_INDENT_UNIT
            indent = line_indent(source, closing.start_byte) + unit
        rendered = "".join(render_screen(a, indent, unit) + ",\n" for a in additions)
        if kept and not _has_trailing_comma(kept[-1]):
            out.append(TextEdit(kept[-1].end_byte, kept[-1].end_byte, b","))
        if only_whitespace_before(source, closing.start_byte):
            pos = line_start(source, closing.start_byte)
            out.append(TextEdit(pos, pos, rendered.encode("utf-8")))
        else:
            tail = "\n" + rendered + line_indent(source, screens.start_byte)
            out.append(TextEdit(closing.start_byte, closing.start_byte, tail.encode("utf-8")))
    return out


def _import_edits(tree: Tree, source: bytes, edits: ManifestEdits) -> list[TextEdit]:
    if not edits.imports_to_add and not edits.imports_to_remove:
        return []
    statements = [(stmt, read_import(stmt, source)) for stmt in import_statements(tree)]

    removal: dict[str, set[str]] = {}
    for spec in edits.imports_to_remove:
        removal.setdefault(spec.source, set()).add(spec.symbol)

    out: list[TextEdit] = []
    remaining = []
    for stmt, decl in statements:
        symbols = removal.get(decl.source)
        if symbols and decl.named and decl.default is None and set(decl.named) <= symbols:
            start, end = _line_span(source, stmt.start_byte, stmt.end_byte)
            out.append(TextEdit(start, end))
            continue
        if symbols and set(decl.named) & symbols:
            _LOG.info("Keeping multi-symbol import from '%s' (only part of it is unused).", decl.source)
        remaining.append(decl)

    queued: list[ImportSpec] = []
    for spec in edits.imports_to_add:
        if spec in queued:
            continue
        if any(d.source == spec.source and d.has_named(spec.symbol) for d in remaining):
            _LOG.debug("Import for %s from '%s' already exists.", spec.symbol, spec.source)
            continue
        queued.append(spec)
    if not queued:
        return out

    if statements:
        last_stmt, last_decl = statements[-1]
        semicolon = last_decl.text.rstrip().endswith(";")
        pos, prefix = _after_line(source, last_stmt.end_byte)
    else:
        semicolon = False
        prefix = b""
        body = [n for n in tree.root_node.named_children if n.type != "comment"]
        pos = line_start(source, body[0].start_byte) if body else len(source)
    text = prefix + "".join(spec.render(semicolon) + "\n" for spec in queued).encode("utf-8")
    out.append(TextEdit(pos, pos, text))
    return out


def _pending_edits(tree: Tree, source: bytes, edits: ManifestEdits) -> list[TextEdit]:
    if not edits.clear_pending_commands:
        return []
    queue = find_declarator_value(tree, PENDING_DECLARATION, source)
    if queue is None or queue.type != "object":
        _LOG.debug("No pendingCommands object to clear.")
        return []
    out: list[TextEdit] = []
    for key in ("add", "delete"):
        items = property_value(queue, key, source)
        if items is not None and items.type == "array" and array_elements(items):
            out.append(TextEdit(items.start_byte, items.end_byte, b"[]"))
    return out


def mutate(source_text: str, edits: ManifestEdits) -> str:
    """Apply structural edits to manifest source and return the new source text."""
    source = source_text.encode("utf-8")
    tree = parse_tsx(source)
    if tree.root_node.has_error:
        raise ManifestSyntaxError("cannot edit manifest: source has syntax errors")

    script: list[TextEdit] = []
    script += _screen_edits(tree, source, edits)
    script += _import_edits(tree, source, edits)
    script += _pending_edits(tree, source, edits)
    if not script:
        return source_text

    result = apply_edits(source, script)
    if parse_tsx(result).root_node.has_error:
        raise ManifestSyntaxError("edit script produced invalid manifest source")
    return result.decode("utf-8")
