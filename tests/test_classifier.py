"""Tests for the change classifier: rename/update/add/delete buckets and their exclusivity."""
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from navsync.manifest.classifier import classify
from navsync.manifest.models import ScreenEntry

HOME = ScreenEntry("home", "HomeScreen", "Home", "home")
ACCOUNT = ScreenEntry("account", "AccountScreen", "Account", "person")
SETTINGS = ScreenEntry("settings", "SettingsScreen", "Settings", "settings")


def _buckets(changes):
    return (
        [s.name for s in changes.added],
        [s.name for s in changes.deleted],
        [c.new.name for c in changes.updated],
        [(c.old.name, c.new.name) for c in changes.renamed],
    )


def test_identical_lists_are_empty() -> None:
    assert classify([HOME, ACCOUNT], [HOME, ACCOUNT]).is_empty()


def test_empty_baseline_marks_everything_added() -> None:
    changes = classify([HOME, ACCOUNT], [])
    assert _buckets(changes) == (["home", "account"], [], [], [])


def test_addition() -> None:
    assert _buckets(classify([HOME, ACCOUNT, SETTINGS], [HOME, ACCOUNT])) == (["settings"], [], [], [])


def test_rename_keeps_component() -> None:
    profile = ScreenEntry("profile", "AccountScreen", "Account", "person")
    changes = classify([HOME, profile], [HOME, ACCOUNT])
    assert _buckets(changes) == ([], [], [], [("account", "profile")])


def test_pure_delete() -> None:
    assert _buckets(classify([HOME], [HOME, ACCOUNT])) == ([], ["account"], [], [])


def test_title_change_is_update() -> None:
    retitled = ScreenEntry("home", "HomeScreen", "Start", "home")
    changes = classify([retitled, ACCOUNT], [HOME, ACCOUNT])
    assert _buckets(changes) == ([], [], ["home"], [])
    assert changes.updated[0].old.title == "Home"


def test_component_change_is_update_not_rename() -> None:
    swapped = ScreenEntry("home", "LandingScreen", "Home", "home")
    assert _buckets(classify([swapped], [HOME])) == ([], [], ["home"], [])


def test_icon_only_change_is_not_a_change() -> None:
    iconed = ScreenEntry("home", "HomeScreen", "Home", "house")
    assert classify([iconed], [HOME]).is_empty()


def test_rename_with_component_change_is_delete_plus_add() -> None:
    other = ScreenEntry("profile", "ProfileScreen", "Profile", "person")
    assert _buckets(classify([HOME, other], [HOME, ACCOUNT])) == (["profile"], ["account"], [], [])


def test_screens_without_component_are_not_actionable() -> None:
    draft = ScreenEntry("draft", "", None, None)
    assert classify([HOME, draft], [HOME]).is_empty()
    assert classify([HOME], [HOME, draft]).is_empty()


def test_each_screen_lands_in_one_bucket() -> None:
    profile = ScreenEntry("profile", "AccountScreen", "Profile", "person")
    retitled = ScreenEntry("home", "HomeScreen", "Start", "home")
    changes = classify([retitled, profile, SETTINGS], [HOME, ACCOUNT])
    added, deleted, updated, renamed = _buckets(changes)
    assert added == ["settings"]
    assert deleted == []
    assert updated == ["home"]
    assert renamed == [("account", "profile")]
    seen = added + deleted + updated + [n for pair in renamed for n in pair]
    assert len(seen) == len(set(seen))


def test_custom_matcher() -> None:
    by_title = lambda old, new: old.title == new.title
    profile = ScreenEntry("profile", "ProfileScreen", "Account", "person")
    changes = classify([profile], [ACCOUNT], matcher=by_title)
    assert [(c.old.name, c.new.name) for c in changes.renamed] == [("account", "profile")]
    assert "renamed: account -> profile" in changes.summary()
