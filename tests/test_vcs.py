"""Tests for the git collaborator."""
import shutil
import subprocess
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from navsync.vcs import GitClient, StatusEntry, parse_porcelain

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")


def test_parse_porcelain() -> None:
    out = " M src/a.tsx\nA  new.tsx\n?? scratch.txt\nR  old.tsx -> moved.tsx\n D gone.tsx\n"
    entries = parse_porcelain(out)
    assert entries == [
        StatusEntry(" ", "M", "src/a.tsx"),
        StatusEntry("A", " ", "new.tsx"),
        StatusEntry("?", "?", "scratch.txt"),
        StatusEntry("R", " ", "moved.tsx"),
        StatusEntry(" ", "D", "gone.tsx"),
    ]
    assert entries[2].untracked
    assert not entries[0].untracked


def test_commit_without_message_is_refused(tmp_path: Path) -> None:
    ok, out = GitClient(tmp_path).commit("  ", ["a.tsx"])
    assert ok is False
    assert "empty" in out


def _git(root: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=str(root), check=True, capture_output=True, text=True)


@requires_git
def test_status_and_commit_in_real_repository(tmp_path: Path) -> None:
    _git(tmp_path, "init", "-q")
    _git(tmp_path, "config", "user.email", "dev@example.com")
    _git(tmp_path, "config", "user.name", "Dev")
    _git(tmp_path, "config", "commit.gpgsign", "false")
    (tmp_path / "layout.tsx").write_text("export const a = 1\n", encoding="utf-8")
    (tmp_path / "other.tsx").write_text("export const b = 1\n", encoding="utf-8")
    _git(tmp_path, "add", ".")
    _git(tmp_path, "commit", "-q", "-m", "init")

    (tmp_path / "layout.tsx").write_text("export const a = 2\n", encoding="utf-8")
    (tmp_path / "other.tsx").write_text("export const b = 2\n", encoding="utf-8")
    (tmp_path / "untracked.tsx").write_text("x\n", encoding="utf-8")
    client = GitClient(tmp_path)

    ok, changes = client.uncommitted_changes([tmp_path / "layout.tsx"])
    assert ok
    assert [e.path for e in changes] == ["other.tsx"]

    (tmp_path / "other.tsx").unlink()
    ok, out = client.commit("Remove other", [tmp_path / "other.tsx"])
    assert ok, out
    ok, changes = client.uncommitted_changes()
    assert [e.path for e in changes] == ["layout.tsx"]
