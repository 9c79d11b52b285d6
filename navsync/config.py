"""Project layout and runtime configuration.

Every path is anchored on the project root (default: current directory).
Environment overrides use the NAVSYNC_* prefix; the CLI loads `.env` first.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_MANIFEST = "packages/app/features/navigation/layout.tsx"
DEFAULT_FEATURES_DIR = "packages/app/features"
DEFAULT_EXPO_APP_DIR = "apps/expo/app"
DEFAULT_NEXT_APP_DIR = "apps/next/app"


@dataclass(slots=True)
class NavSyncConfig:
    root: Path
    manifest_path: Path
    features_dir: Path
    expo_app_dir: Path
    next_app_dir: Path
    tabs_dir: str = "(tabs)"
    feature_module: str = "screen.tsx"
    expo_extension: str = ".tsx"
    next_page: str = "page.tsx"
    feature_import_prefix: str = "app/features"
    poll_interval: float = 0.1
    stability_threshold: float = 1.5
    git_enabled: bool = True

    @property
    def module_stem(self) -> str:
        return Path(self.feature_module).stem

    def relative(self, path: Path) -> str:
        """Path relative to the project root, POSIX style (for headers and logs)."""
        try:
            return Path(path).resolve().relative_to(self.root).as_posix()
        except ValueError:
            return Path(path).as_posix()


def _env_path(root: Path, name: str, default: str) -> Path:
    value = os.environ.get(name, "").strip()
    path = Path(value or default)
    return path if path.is_absolute() else root / path


def _env_ms(name: str, default: float) -> float:
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    try:
        return max(0.0, int(value) / 1000.0)
    except ValueError:
        return default


def load_config(root: Optional[Path] = None, *, git_enabled: Optional[bool] = None) -> NavSyncConfig:
    """Build config for a project root, applying NAVSYNC_* environment overrides."""
    base = Path(root or os.environ.get("NAVSYNC_ROOT") or Path.cwd()).resolve()
    if git_enabled is None:
        git_enabled = os.environ.get("NAVSYNC_GIT", "1").strip().lower() not in {"0", "false", "no"}
    return NavSyncConfig(
        root=base,
        manifest_path=_env_path(base, "NAVSYNC_MANIFEST", DEFAULT_MANIFEST),
        features_dir=_env_path(base, "NAVSYNC_FEATURES_DIR", DEFAULT_FEATURES_DIR),
        expo_app_dir=_env_path(base, "NAVSYNC_EXPO_APP_DIR", DEFAULT_EXPO_APP_DIR),
        next_app_dir=_env_path(base, "NAVSYNC_NEXT_APP_DIR", DEFAULT_NEXT_APP_DIR),
        poll_interval=_env_ms("NAVSYNC_POLL_MS", 0.1),
        stability_threshold=_env_ms("NAVSYNC_STABILITY_MS", 1.5),
        git_enabled=git_enabled,
    )
