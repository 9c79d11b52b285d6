"""Version-control collaborator: git via subprocess.

Every call returns `(ok, output)`; failures are reported, never raised, and
never roll back files already written.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Tuple

from navsync.logging import get_logger

_LOG = get_logger("vcs")


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """One `git status --porcelain` line: index/worktree codes and the path."""

    index: str
    worktree: str
    path: str

    @property
    def untracked(self) -> bool:
        return self.index == "?" and self.worktree == "?"


def parse_porcelain(output: str) -> list[StatusEntry]:
    entries: list[StatusEntry] = []
    for line in output.splitlines():
        if len(line) < 4:
            continue
        path = line[3:]
        if " -> " in path:
            path = path.split(" -> ", 1)[1]
        entries.append(StatusEntry(index=line[0], worktree=line[1], path=path.strip('"')))
    return entries


class GitClient:
    """Thin wrapper over the git CLI for one working tree."""

    def __init__(self, root: Path, timeout: int = 30) -> None:
        self.root = Path(root).resolve()
        self.timeout = timeout

    def _run(self, *args: str) -> Tuple[bool, str]:
        try:
            r = subprocess.run(
                ["git", *args],
                cwd=str(self.root),
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            return (False, f"git {args[0]}: timeout")
        except OSError as e:
            return (False, f"git {args[0]}: {e}")
        out = (r.stdout or "").strip() or (r.stderr or "").strip()
        if r.returncode != 0 and not out:
            out = f"git {args[0]} failed (exit {r.returncode})"
        return (r.returncode == 0, out)

    def _relative(self, path: Path) -> str:
        path = Path(path)
        if not path.is_absolute():
            return path.as_posix()
        try:
            return path.resolve().relative_to(self.root).as_posix()
        except ValueError:
            return str(path)

    def uncommitted_changes(self, exclude: Iterable[Path] = ()) -> Tuple[bool, list[StatusEntry]]:
        """Tracked changes other than `exclude`; untracked files are not reported."""
        ok, out = self._run("status", "--porcelain", "--untracked-files=no")
        if not ok:
            return (False, [])
        skip = {self._relative(p) for p in exclude}
        changes = [e for e in parse_porcelain(out) if not e.untracked and e.path not in skip]
        return (True, changes)

    def commit(self, message: str, paths: Iterable[Path | str]) -> Tuple[bool, str]:
        """Stage the given paths (deletions included) and commit them."""
        if not message or not message.strip():
            return (False, "commit message is empty")
        present: list[str] = []
        missing: list[str] = []
        for p in dict.fromkeys(paths):
            rel = self._relative(Path(p))
            (present if (self.root / rel).exists() else missing).append(rel)
        if not present and not missing:
            _LOG.warning("Commit called with no specific files to add.")
        if present:
            ok, out = self._run("add", "--", *present)
            if not ok:
                return (False, f"git add failed: {out}")
        if missing:
            ok, out = self._run("rm", "--cached", "--ignore-unmatch", "--quiet", "--", *missing)
            if not ok:
                return (False, f"git rm failed: {out}")
        return self._run("commit", "-m", message.strip())
