"""Projection targets: where each generated file lives and what it contains."""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Optional

from navsync.config import NavSyncConfig
from navsync.manifest.naming import pascal_case


class TargetKind(str, Enum):
    FEATURE = "feature"
    EXPO_TAB = "expo_tab"
    NEXT_PAGE = "next_page"


TARGET_ORDER: tuple[TargetKind, ...] = (TargetKind.FEATURE, TargetKind.EXPO_TAB, TargetKind.NEXT_PAGE)

TARGET_LABELS = {
    TargetKind.FEATURE: "feature screen",
    TargetKind.EXPO_TAB: "Expo tab file",
    TargetKind.NEXT_PAGE: "Next.js page file",
}


def target_path(config: NavSyncConfig, kind: TargetKind, screen_name: str) -> Path:
    if kind is TargetKind.FEATURE:
        return config.features_dir / screen_name / config.feature_module
    if kind is TargetKind.EXPO_TAB:
        return config.expo_app_dir / config.tabs_dir / f"{screen_name}{config.expo_extension}"
    return config.next_app_dir / config.tabs_dir / screen_name / config.next_page


def owning_dir(config: NavSyncConfig, kind: TargetKind, screen_name: str) -> Optional[Path]:
    """Per-screen directory that only exists for this artifact (pruned when left empty)."""
    if kind is TargetKind.FEATURE:
        return config.features_dir / screen_name
    if kind is TargetKind.NEXT_PAGE:
        return config.next_app_dir / config.tabs_dir / screen_name
    return None


_JSX_SPECIAL = frozenset("{}<>")


def jsx_text(text: str) -> str:
    """Render text as a JSX child; braces or angle brackets go through a string expression."""
    if any(ch in _JSX_SPECIAL for ch in text):
        return "{" + json.dumps(text, ensure_ascii=False) + "}"
    return text


def _feature_template(header: str, component_name: str, title: str) -> str:
    return f"""// {header}
'use client'

import {{ View, Text }} from 'react-native'
import {{ useColorScheme }} from 'react-native'

export function {component_name}() {{
  const colorScheme = useColorScheme()

  return (
    <View style={{{{ flex: 1, alignItems: 'center', justifyContent: 'center', padding: 20, backgroundColor: colorScheme === 'dark' ? '#121212' : '#FFFFFF' }}}}>
      <Text style={{{{ fontSize: 24, marginBottom: 10, color: colorScheme === 'dark' ? 'white' : 'black' }}}}>
        {title}
      </Text>
      <Text style={{{{ fontSize: 12, color: colorScheme === 'dark' ? 'white' : 'black' }}}}>
        This screen was auto-generated by navsync.
      </Text>
    </View>
  )
}}
"""


def _expo_template(header: str, import_path: str, screen_name: str, component_name: str) -> str:
    return f"""// {header}
import {{ {component_name} }} from '{import_path}'

export default function {pascal_case(screen_name)}TabPage() {{
  return <{component_name} />
}}
"""


def _next_template(header: str, import_path: str, screen_name: str, component_name: str) -> str:
    return f"""// {header}
'use client'

import {{ {component_name} }} from '{import_path}'

export default function {pascal_case(screen_name)}Page() {{
  return <{component_name} />
}}
"""


def render_target(
    config: NavSyncConfig,
    kind: TargetKind,
    screen_name: str,
    component_name: str,
    title: str,
) -> str:
    header = config.relative(target_path(config, kind, screen_name))
    import_path = f"{config.feature_import_prefix}/{screen_name}/{config.module_stem}"
    if kind is TargetKind.FEATURE:
        return _feature_template(header, component_name, jsx_text(title or screen_name))
    if kind is TargetKind.EXPO_TAB:
        return _expo_template(header, import_path, screen_name, component_name)
    return _next_template(header, import_path, screen_name, component_name)
