"""Tests for the manifest watcher and the console prompter."""
import asyncio
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from navsync.prompts import ConsolePrompter, DefaultsPrompter
from navsync.watcher import ManifestWatcher, file_signature


def test_file_signature_missing_file(tmp_path: Path) -> None:
    assert file_signature(tmp_path / "missing.tsx") is None


@pytest.mark.asyncio
async def test_watcher_reports_settled_change_once(tmp_path: Path) -> None:
    manifest = tmp_path / "layout.tsx"
    manifest.write_text("export const a = 1\n", encoding="utf-8")
    seen = []
    watcher = ManifestWatcher(manifest, seen.append, poll_interval=0.01, stability_threshold=0.05)
    task = asyncio.create_task(watcher.run())
    await asyncio.sleep(0.1)
    assert seen == []

    manifest.write_text("export const a = 12345\n", encoding="utf-8")
    for _ in range(200):
        if seen:
            break
        await asyncio.sleep(0.01)
    await asyncio.sleep(0.15)
    watcher.stop()
    await asyncio.wait_for(task, timeout=2)

    assert seen == [manifest]


@pytest.mark.asyncio
async def test_watcher_survives_callback_error(tmp_path: Path) -> None:
    manifest = tmp_path / "layout.tsx"
    manifest.write_text("a\n", encoding="utf-8")
    calls = []

    def boom(path):
        calls.append(path)
        raise RuntimeError("callback failed")

    watcher = ManifestWatcher(manifest, boom, poll_interval=0.01, stability_threshold=0.02)
    task = asyncio.create_task(watcher.run())
    await asyncio.sleep(0.05)
    manifest.write_text("abc\n", encoding="utf-8")
    for _ in range(200):
        if calls:
            break
        await asyncio.sleep(0.01)
    assert not task.done()
    watcher.stop()
    await asyncio.wait_for(task, timeout=2)
    assert calls == [manifest]


@pytest.mark.asyncio
async def test_defaults_prompter() -> None:
    prompter = DefaultsPrompter()
    assert await prompter.confirm("Overwrite?", default=False) is False
    assert await prompter.confirm("Proceed?") is True
    assert await prompter.ask("Component name:", "SettingsScreen") == "SettingsScreen"


@pytest.mark.asyncio
async def test_console_prompter_without_tty_uses_defaults() -> None:
    with patch.object(sys.stdin, "isatty", return_value=False), patch("builtins.input") as mocked:
        prompter = ConsolePrompter()
        assert await prompter.confirm("Proceed?", default=False) is False
        assert await prompter.ask("Title:", "Settings") == "Settings"
    mocked.assert_not_called()


@pytest.mark.asyncio
async def test_console_prompter_reprompts_on_invalid_answer() -> None:
    with patch.object(sys.stdin, "isatty", return_value=True), patch("builtins.input", side_effect=["maybe", "n"]):
        assert await ConsolePrompter().confirm("Proceed?") is False


@pytest.mark.asyncio
async def test_console_prompter_empty_answer_and_eof_take_default() -> None:
    with patch.object(sys.stdin, "isatty", return_value=True), patch("builtins.input", side_effect=["", EOFError()]):
        prompter = ConsolePrompter()
        assert await prompter.confirm("Proceed?", default=True) is True
        assert await prompter.ask("Title:", "Settings") == "Settings"


@pytest.mark.asyncio
async def test_console_prompter_ask_returns_typed_text() -> None:
    with patch.object(sys.stdin, "isatty", return_value=True), patch("builtins.input", return_value="  Orders "):
        assert await ConsolePrompter().ask("Title:", "Settings") == "Orders"
