"""tree-sitter TSX helpers shared by the manifest parser and mutator.

All offsets are byte offsets into the UTF-8 encoded source.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Iterator, Optional

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from .models import ImportDeclaration

# Expressions that only wrap a literal: `[...] as const`, `{...} satisfies T`, `(x)`, `x!`
_WRAPPERS = frozenset({"as_expression", "satisfies_expression", "parenthesized_expression", "non_null_expression"})
_DECLARATIONS = frozenset({"lexical_declaration", "variable_declaration"})


@lru_cache(maxsize=1)
def tsx_language() -> Language:
    return Language(tree_sitter_typescript.language_tsx())


def parse_tsx(source: bytes) -> Tree:
    """Parse TSX bytes. Never raises on bad syntax: check `tree.root_node.has_error`."""
    return Parser(tsx_language()).parse(source)


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte:node.end_byte].decode("utf-8")


def unwrap(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type in _WRAPPERS:
        inner = [c for c in node.named_children if c.type != "comment"]
        if not inner:
            return node
        node = inner[0]
    return node


def array_elements(array: Node) -> list[Node]:
    """Element nodes of an array literal, comments excluded."""
    return [c for c in array.named_children if c.type != "comment"]


def object_pairs(obj: Node) -> list[Node]:
    return [c for c in obj.named_children if c.type == "pair"]


def pair_key(pair: Node, source: bytes) -> str:
    key = pair.child_by_field_name("key")
    if key is None:
        return ""
    return literal_value(key, source)


def find_pair(obj: Node, key: str, source: bytes) -> Optional[Node]:
    for pair in object_pairs(obj):
        if pair_key(pair, source) == key:
            return pair
    return None


def property_value(obj: Node, key: str, source: bytes) -> Optional[Node]:
    """Value node of `key: value` inside an object literal (wrappers stripped)."""
    pair = find_pair(obj, key, source)
    if pair is None:
        return None
    return unwrap(pair.child_by_field_name("value"))


def literal_value(node: Node, source: bytes) -> str:
    """Text of a literal with its quotes stripped; identifiers yield their name."""
    text = node_text(node, source)
    if node.type == "string" and len(text) >= 2:
        return text[1:-1]
    if node.type == "template_string" and len(text) >= 2 and "${" not in text:
        return text[1:-1]
    return text.replace("'", "").replace('"', "")


def bool_value(node: Optional[Node]) -> Optional[bool]:
    node = unwrap(node)
    if node is None:
        return None
    if node.type == "true":
        return True
    if node.type == "false":
        return False
    return None


def top_level_declarators(tree: Tree) -> Iterator[Node]:
    """Yield `variable_declarator` nodes of top-level (optionally exported) declarations."""
    for stmt in tree.root_node.named_children:
        decl = stmt
        if stmt.type == "export_statement":
            decl = stmt.child_by_field_name("declaration")
        if decl is None or decl.type not in _DECLARATIONS:
            continue
        for child in decl.named_children:
            if child.type == "variable_declarator":
                yield child


def find_declarator_value(tree: Tree, name: str, source: bytes) -> Optional[Node]:
    """Initializer of the top-level `const <name> = ...`, wrappers stripped."""
    for declarator in top_level_declarators(tree):
        ident = declarator.child_by_field_name("name")
        if ident is not None and node_text(ident, source) == name:
            return unwrap(declarator.child_by_field_name("value"))
    return None


def import_statements(tree: Tree) -> list[Node]:
    return [n for n in tree.root_node.named_children if n.type == "import_statement"]


def import_source(stmt: Node, source: bytes) -> str:
    src = stmt.child_by_field_name("source")
    if src is None:
        strings = [c for c in stmt.named_children if c.type == "string"]
        if not strings:
            return ""
        src = strings[-1]
    return literal_value(src, source)


def read_import(stmt: Node, source: bytes) -> ImportDeclaration:
    named: list[str] = []
    default: Optional[str] = None
    for clause in stmt.named_children:
        if clause.type != "import_clause":
            continue
        for part in clause.named_children:
            if part.type == "identifier":
                default = node_text(part, source)
            elif part.type == "named_imports":
                for spec in part.named_children:
                    if spec.type != "import_specifier":
                        continue
                    alias = spec.child_by_field_name("alias")
                    name = spec.child_by_field_name("name")
                    bound = alias or name
                    if bound is not None:
                        named.append(node_text(bound, source))
    return ImportDeclaration(
        source=import_source(stmt, source),
        named=tuple(named),
        default=default,
        text=node_text(stmt, source),
    )


def line_start(source: bytes, offset: int) -> int:
    """Offset of the first byte of the line containing `offset`."""
    return source.rfind(b"\n", 0, offset) + 1


def line_indent(source: bytes, offset: int) -> str:
    start = line_start(source, offset)
    end = start
    while end < len(source) and source[end:end + 1] in (b" ", b"\t"):
        end += 1
    return source[start:end].decode("utf-8")


def only_whitespace_before(source: bytes, offset: int) -> bool:
    return source[line_start(source, offset):offset].strip() == b""
