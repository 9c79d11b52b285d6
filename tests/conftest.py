"""Pytest configuration. Ensures project root is in sys.path for top-level modules (navsync_cli), plus shared project fixtures."""
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from navsync.config import DEFAULT_MANIFEST, NavSyncConfig, load_config
from navsync.vcs import StatusEntry

SAMPLE_MANIFEST = """// packages/app/features/navigation/layout.tsx

import { ComponentType } from 'react'
import { Text } from 'react-native' // For placeholder icon
import { HomeScreen } from '../home/screen'
import { AccountScreen } from '../account/screen'
export const isAutoSaveEnabled = true
export const isEditing = false
export const pendingCommands = {
  add: [] as string[],
  delete: [] as string[],
}
// --- Configuration Types ---
export interface ScreenConfig {
  name: string
  component: ComponentType<any>
}
export type NavigatorLayout = any
// --- Main Navigation Structure ---
export const appNavigationStructure: NavigatorLayout[] = [
  {
    type: 'stack',
    name: 'Root',
    initialRouteName: '(tabs)',
    options: { headerShown: false },
    screens: [
      {
        type: 'tabs',
        name: '(tabs)',
        initialRouteName: 'home',
        tabScreenOptions: {
          // Default options for screens inside this TabNavigator
          headerShown: false,
        },
        screens: [
          {
            name: 'home',
            component: HomeScreen,
            options: {
              title: 'Home',
              tabBarIconName: 'home',
            },
          },
          {
            name: 'account',
            component: AccountScreen,
            options: {
              title: 'Account',
              tabBarIconName: 'person',
            },
          },
        ],
      },
    ],
  },
]
export const PlaceholderIcon = ({ name }: { name?: string }) => {
  if (!name) return null
  return <Text>{name.substring(0, 2).toUpperCase()}</Text>
}
"""

SETTINGS_ENTRY = """          {
            name: 'settings',
            component: SettingsScreen,
            options: {
              title: 'Settings',
              tabBarIconName: 'settings',
            },
          },
"""


def with_settings_screen(text: str) -> str:
    """Insert a settings screen right after the account entry (manual edit of the manifest)."""
    anchor = "              tabBarIconName: 'person',\n            },\n          },\n"
    assert anchor in text
    return text.replace(anchor, anchor + SETTINGS_ENTRY, 1)


class ScriptedPrompter:
    """Prompter double: one-shot answers matched by substring, defaults otherwise."""

    def __init__(self, answers=None, texts=None):
        self.answers = list(answers or [])
        self.texts = dict(texts or {})
        self.confirms = []
        self.asks = []

    async def confirm(self, message, default=True):
        self.confirms.append(message)
        for i, (needle, answer) in enumerate(self.answers):
            if needle in message:
                del self.answers[i]
                return answer
        return default

    async def ask(self, message, default=""):
        self.asks.append(message)
        for needle, text in self.texts.items():
            if needle in message:
                return text
        return default


class FakeGit:
    """GitClient double that records commits."""

    def __init__(self, changes=None):
        self.changes = list(changes or [])
        self.commits = []

    def uncommitted_changes(self, exclude=()):
        return (True, list(self.changes))

    def commit(self, message, paths):
        self.commits.append((message, [str(p) for p in paths]))
        return (True, "")


@pytest.fixture
def project(tmp_path: Path, monkeypatch) -> NavSyncConfig:
    """Project tree with the sample manifest and generated files for home and account."""
    for name in ("NAVSYNC_ROOT", "NAVSYNC_MANIFEST", "NAVSYNC_FEATURES_DIR", "NAVSYNC_EXPO_APP_DIR",
                 "NAVSYNC_NEXT_APP_DIR", "NAVSYNC_POLL_MS", "NAVSYNC_STABILITY_MS", "NAVSYNC_GIT"):
        monkeypatch.delenv(name, raising=False)
    manifest = tmp_path / DEFAULT_MANIFEST
    manifest.parent.mkdir(parents=True)
    manifest.write_text(SAMPLE_MANIFEST, encoding="utf-8")
    config = load_config(tmp_path, git_enabled=False)
    for name, component in (("home", "HomeScreen"), ("account", "AccountScreen")):
        feature = config.features_dir / name / "screen.tsx"
        feature.parent.mkdir(parents=True, exist_ok=True)
        feature.write_text(f"export function {component}() {{ return null }}\n", encoding="utf-8")
        expo = config.expo_app_dir / "(tabs)" / f"{name}.tsx"
        expo.parent.mkdir(parents=True, exist_ok=True)
        expo.write_text(f"// {name} tab\n", encoding="utf-8")
        page = config.next_app_dir / "(tabs)" / name / "page.tsx"
        page.parent.mkdir(parents=True, exist_ok=True)
        page.write_text(f"// {name} page\n", encoding="utf-8")
    return config


@pytest.fixture
def dirty_entry() -> StatusEntry:
    return StatusEntry(index=" ", worktree="M", path="README.md")
