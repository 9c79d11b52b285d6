"""Slug and identifier derivation for free-text screen names."""

from __future__ import annotations

import re

_WORD = re.compile(r"[A-Za-z0-9]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_SLUG = re.compile(r"^[a-z][a-z0-9]*(?:-[a-z0-9]+)*$")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def _words(text: str) -> list[str]:
    return _WORD.findall(_CAMEL_BOUNDARY.sub(" ", text or ""))


def slugify(text: str) -> str:
    """'My Settings' -> 'my-settings', 'userProfile' -> 'user-profile'. Empty if nothing usable."""
    return "-".join(w.lower() for w in _words(text))


def pascal_case(text: str) -> str:
    return "".join(w[:1].upper() + w[1:] for w in _words(text))


def default_component_name(screen_name: str) -> str:
    base = pascal_case(screen_name)
    if not base:
        return ""
    return base if base.endswith("Screen") else f"{base}Screen"


def default_title(screen_name: str) -> str:
    return screen_name[:1].upper() + screen_name[1:] if screen_name else ""


def is_valid_slug(name: str) -> bool:
    return bool(_SLUG.match(name or ""))


def is_valid_identifier(name: str) -> bool:
    return bool(_IDENTIFIER.match(name or ""))
