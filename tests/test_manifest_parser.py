"""Tests for navsync.manifest.parser (screens, flags, pending commands, syntax errors)."""
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from conftest import SAMPLE_MANIFEST, with_settings_screen
from navsync.manifest.models import CommandSpec
from navsync.manifest.parser import parse_manifest, parse_manifest_file


def test_parse_sample_reads_tab_screens_in_order() -> None:
    result = parse_manifest(SAMPLE_MANIFEST)
    assert result.parsable
    assert result.screens_found
    assert result.snapshot.names() == ["home", "account"]
    account = result.snapshot.get("account")
    assert account.component_name == "AccountScreen"
    assert account.title == "Account"
    assert account.icon == "person"


def test_parse_sample_reads_imports() -> None:
    result = parse_manifest(SAMPLE_MANIFEST)
    sources = [d.source for d in result.snapshot.imports]
    assert sources == ["react", "react-native", "../home/screen", "../account/screen"]
    home = result.snapshot.imports[2]
    assert home.named == ("HomeScreen",)
    assert home.default is None


def test_control_flags_and_empty_pending_queue() -> None:
    result = parse_manifest(SAMPLE_MANIFEST)
    assert result.flags.autosave is True
    assert result.flags.editing is False
    assert not result.pending


def test_missing_flags_default_to_autosave_on_not_editing() -> None:
    text = SAMPLE_MANIFEST.replace("export const isAutoSaveEnabled = true\n", "").replace(
        "export const isEditing = false\n", ""
    )
    result = parse_manifest(text)
    assert result.flags.autosave is True
    assert result.flags.editing is False


def test_editing_flag_true() -> None:
    result = parse_manifest(SAMPLE_MANIFEST.replace("isEditing = false", "isEditing = true"))
    assert result.flags.editing is True


def test_pending_commands_strings_and_objects() -> None:
    text = SAMPLE_MANIFEST.replace(
        "  add: [] as string[],",
        "  add: ['settings', { name: 'My Stuff', componentName: 'StuffScreen', icon: 'box' }],",
    ).replace("  delete: [] as string[],", "  delete: ['account'],")
    result = parse_manifest(text)
    assert result.pending.add == (
        CommandSpec(name="settings"),
        CommandSpec(name="My Stuff", component_name="StuffScreen", icon="box"),
    )
    assert result.pending.delete == (CommandSpec(name="account"),)


def test_partial_save_is_unparsable_not_an_exception() -> None:
    half = SAMPLE_MANIFEST[: SAMPLE_MANIFEST.index("name: 'account'")]
    result = parse_manifest(half)
    assert result.parsable is False


def test_manual_screen_edit_is_picked_up() -> None:
    result = parse_manifest(with_settings_screen(SAMPLE_MANIFEST))
    assert result.snapshot.names() == ["home", "account", "settings"]
    assert result.snapshot.get("settings").component_name == "SettingsScreen"


def test_screen_without_name_is_dropped_and_missing_options_are_none() -> None:
    text = SAMPLE_MANIFEST.replace(
        "        screens: [\n          {\n            name: 'home',",
        "        screens: [\n          { component: OrphanScreen },\n          { name: 'bare', component: BareScreen },\n"
        "          {\n            name: 'home',",
    )
    result = parse_manifest(text)
    assert result.snapshot.names() == ["bare", "home", "account"]
    bare = result.snapshot.get("bare")
    assert bare.title is None
    assert bare.icon is None
    assert bare.display_title == "bare"


def test_missing_tabs_navigator_yields_no_screens() -> None:
    result = parse_manifest(SAMPLE_MANIFEST.replace("type: 'tabs'", "type: 'drawer'"))
    assert result.parsable
    assert result.screens_found is False
    assert result.snapshot.screens == ()


def test_parse_manifest_file_missing_is_unparsable(tmp_path: Path) -> None:
    assert parse_manifest_file(tmp_path / "nope.tsx").parsable is False


def test_option_values_with_type_assertions_are_unwrapped() -> None:
    text = SAMPLE_MANIFEST.replace("title: 'Account',", "title: 'Account' as const,").replace(
        "tabBarIconName: 'person',", "tabBarIconName: 'person' as const,"
    )
    account = parse_manifest(text).snapshot.get("account")
    assert account.title == "Account"
    assert account.icon == "person"
