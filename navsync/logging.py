"""Logger tree for navsync.

Everything logs under ``navsync.<area>`` where the area is one of
``manifest``, ``projections``, ``orchestration``, ``vcs``, ``watcher`` or
``cli``. Levels come from, strongest first:

    --verbose / --quiet           all areas
    NAVSYNC_LOG_LEVEL_<AREA>      one area, e.g. NAVSYNC_LOG_LEVEL_WATCHER=DEBUG
    NAVSYNC_LOG_LEVEL             default for every area (INFO when unset)
"""

from __future__ import annotations

import logging
import os
import sys

_configured = False

AREAS = ("manifest", "projections", "orchestration", "vcs", "watcher", "cli")


def _parse_level(raw: str, fallback: int) -> int:
    raw = raw.strip().upper()
    if not raw:
        return fallback
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else fallback


def _resolve_level(area: str = "") -> int:
    default = _parse_level(os.environ.get("NAVSYNC_LOG_LEVEL", ""), logging.INFO)
    if not area:
        return default
    return _parse_level(os.environ.get(f"NAVSYNC_LOG_LEVEL_{area.upper()}", ""), default)


def _area_of(name: str) -> str:
    area = name.split(".", 1)[0]
    return area if area in AREAS else ""


def configure_cli_logging(*, quiet: bool = False, verbose: bool = False) -> None:
    """Set navsync.* logger levels. --quiet/--verbose override the environment for every area."""
    global _configured
    forced = logging.DEBUG if verbose else logging.WARNING if quiet else None
    root = logging.getLogger("navsync")
    root.setLevel(logging.DEBUG if forced is None else forced)
    if not root.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(h)
        root.propagate = False
    for area in AREAS:
        logging.getLogger(f"navsync.{area}").setLevel(forced if forced is not None else _resolve_level(area))
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a navsync.<name> logger; the level is inherited from its area logger."""
    logger = logging.getLogger(f"navsync.{name}")
    if not _configured:
        area = _area_of(name)
        logging.getLogger(f"navsync.{area}" if area else "navsync").setLevel(_resolve_level(area))
    return logger
