"""Normalized manifest data: screens, imports, control flags, pending commands, change sets."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True, slots=True)
class ScreenEntry:
    """One tab screen declared in the manifest."""

    name: str = ""
    component_name: str = ""
    title: Optional[str] = None
    icon: Optional[str] = None

    @property
    def actionable(self) -> bool:
        """True when both the slug and the component symbol are set."""
        return bool(self.name and self.component_name)

    @property
    def display_title(self) -> str:
        return self.title or self.name


@dataclass(frozen=True, slots=True)
class ImportSpec:
    """A single `import { symbol } from 'source'` binding."""

    symbol: str
    source: str

    def render(self, semicolon: bool = False) -> str:
        return f"import {{ {self.symbol} }} from '{self.source}'" + (";" if semicolon else "")


@dataclass(frozen=True, slots=True)
class ImportDeclaration:
    """A raw import statement of the manifest, as parsed."""

    source: str
    named: tuple[str, ...] = ()
    default: Optional[str] = None
    text: str = ""

    def has_named(self, symbol: str) -> bool:
        return symbol in self.named


@dataclass(frozen=True, slots=True)
class ManifestSnapshot:
    """Immutable view of the manifest's screens and import block at one point in time."""

    screens: tuple[ScreenEntry, ...] = ()
    imports: tuple[ImportDeclaration, ...] = ()

    def names(self) -> list[str]:
        return [s.name for s in self.screens]

    def get(self, name: str) -> Optional[ScreenEntry]:
        for screen in self.screens:
            if screen.name == name:
                return screen
        return None


@dataclass(frozen=True, slots=True)
class ControlFlags:
    autosave: bool = True
    editing: bool = False


@dataclass(frozen=True, slots=True)
class CommandSpec:
    """Explicit add/delete instruction embedded in the manifest or given on the CLI."""

    name: str
    component_name: Optional[str] = None
    title: Optional[str] = None
    icon: Optional[str] = None


@dataclass(frozen=True, slots=True)
class PendingCommands:
    add: tuple[CommandSpec, ...] = ()
    delete: tuple[CommandSpec, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.add or self.delete)


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of one manifest read. `parsable` is False for transient syntax errors."""

    parsable: bool
    snapshot: ManifestSnapshot = field(default_factory=ManifestSnapshot)
    flags: ControlFlags = field(default_factory=ControlFlags)
    pending: PendingCommands = field(default_factory=PendingCommands)
    screens_found: bool = False
    error: str = ""


UNPARSABLE = ParseResult(parsable=False, error="manifest could not be parsed")


@dataclass(frozen=True, slots=True)
class ScreenChange:
    """Old/new pair for a renamed or updated screen."""

    old: ScreenEntry
    new: ScreenEntry


@dataclass(slots=True)
class ChangeSet:
    added: list[ScreenEntry] = field(default_factory=list)
    deleted: list[ScreenEntry] = field(default_factory=list)
    updated: list[ScreenChange] = field(default_factory=list)
    renamed: list[ScreenChange] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.added or self.deleted or self.updated or self.renamed)

    def summary(self) -> str:
        """Human-readable one-line-per-bucket summary used in the batch prompt."""
        parts: list[str] = []
        if self.deleted:
            parts.append("deleted: " + ", ".join(s.name for s in self.deleted))
        if self.renamed:
            parts.append("renamed: " + ", ".join(f"{c.old.name} -> {c.new.name}" for c in self.renamed))
        if self.updated:
            parts.append("updated: " + ", ".join(c.new.name for c in self.updated))
        if self.added:
            parts.append("added: " + ", ".join(s.name for s in self.added))
        return "; ".join(parts)


@dataclass(slots=True)
class ManifestEdits:
    """Requested structural edits for one mutator pass."""

    screens_to_add: list[ScreenEntry] = field(default_factory=list)
    screen_names_to_delete: list[str] = field(default_factory=list)
    imports_to_add: list[ImportSpec] = field(default_factory=list)
    imports_to_remove: list[ImportSpec] = field(default_factory=list)
    clear_pending_commands: bool = False

    def is_empty(self) -> bool:
        return not (
            self.screens_to_add
            or self.screen_names_to_delete
            or self.imports_to_add
            or self.imports_to_remove
            or self.clear_pending_commands
        )


def feature_import_for(screen_name: str, component_name: str, module_stem: str = "screen") -> ImportSpec:
    """Import the manifest needs for a screen's feature module (manifest sits in a sibling feature dir)."""
    return ImportSpec(symbol=component_name, source=f"../{screen_name}/{module_stem}")
