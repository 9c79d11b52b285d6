"""
Change Classifier: diff two screen lists into a ChangeSet.

Passes run in order and share a `consumed` set so a screen never lands in two
buckets:

1. rename  - previous name gone, a new name with the same identity appears
             (first match in iteration order; no global matching)
2. update  - same name, component or title changed
3. add     - new name, not consumed
4. delete  - vanished name, not consumed

Known limitation: two screens renamed at once while swapping components look
exactly like one delete plus one add. That is accepted, not detected.
"""

from __future__ import annotations

from typing import Callable, Iterable

from .models import ChangeSet, ScreenChange, ScreenEntry

IdentityMatcher = Callable[[ScreenEntry, ScreenEntry], bool]


def same_component(old: ScreenEntry, new: ScreenEntry) -> bool:
    """Default identity rule: identical component symbol means the same screen."""
    return bool(old.component_name) and old.component_name == new.component_name


def _by_name(screens: Iterable[ScreenEntry]) -> dict[str, ScreenEntry]:
    out: dict[str, ScreenEntry] = {}
    for screen in screens:
        if screen.name and screen.name not in out:
            out[screen.name] = screen
    return out


def classify(
    current: Iterable[ScreenEntry],
    previous: Iterable[ScreenEntry],
    matcher: IdentityMatcher = same_component,
) -> ChangeSet:
    """Classify `current` against `previous`. Order of each bucket follows the input order."""
    cur = _by_name(current)
    prev = _by_name(previous)
    changes = ChangeSet()
    consumed_prev: set[str] = set()
    consumed_cur: set[str] = set()

    for old_name, old in prev.items():
        if old_name in cur:
            continue
        for new_name, new in cur.items():
            if new_name in prev or new_name in consumed_cur:
                continue
            if matcher(old, new):
                changes.renamed.append(ScreenChange(old=old, new=new))
                consumed_prev.add(old_name)
                consumed_cur.add(new_name)
                break

    for name, new in cur.items():
        old = prev.get(name)
        if old is None or name in consumed_cur or not new.actionable:
            continue
        if old.component_name != new.component_name or old.title != new.title:
            changes.updated.append(ScreenChange(old=old, new=new))

    for name, new in cur.items():
        if name in prev or name in consumed_cur:
            continue
        if new.actionable:
            changes.added.append(new)

    for name, old in prev.items():
        if name in cur or name in consumed_prev:
            continue
        if old.actionable:
            changes.deleted.append(old)

    return changes
