"""Confirmation / input collaborator.

The engine only depends on the `Prompter` protocol. `ConsolePrompter` reads
stdin on a daemon thread so the event loop keeps receiving watcher
notifications while a question is open; `DefaultsPrompter` answers every
question with its default (--yes, CI, or no TTY).
"""

from __future__ import annotations

import asyncio
import sys
import threading
from typing import Optional, Protocol

from navsync.logging import get_logger

_LOG = get_logger("cli.prompts")

_YES = {"y", "yes"}
_NO = {"n", "no"}


class Prompter(Protocol):
    async def confirm(self, message: str, default: bool = True) -> bool: ...

    async def ask(self, message: str, default: str = "") -> str: ...


async def _read_line(prompt: str) -> Optional[str]:
    """input() on a daemon thread; None on EOF. Daemon threads never block interpreter exit."""
    loop = asyncio.get_running_loop()
    future: asyncio.Future = loop.create_future()

    def _deliver(value: Optional[str], error: Optional[BaseException]) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(value)

    def _worker() -> None:
        try:
            line: Optional[str] = input(prompt)
        except EOFError:
            line = None
        except Exception as e:
            loop.call_soon_threadsafe(_deliver, None, e)
            return
        loop.call_soon_threadsafe(_deliver, line, None)

    threading.Thread(target=_worker, name="navsync-prompt", daemon=True).start()
    return await future


class ConsolePrompter:
    """Interactive y/n and free-text prompts on stdin/stderr."""

    def __init__(self, *, non_interactive: bool = False) -> None:
        self.non_interactive = non_interactive

    def _interactive(self) -> bool:
        return not self.non_interactive and sys.stdin.isatty()

    async def confirm(self, message: str, default: bool = True) -> bool:
        if not self._interactive():
            _LOG.info("%s -> %s (default)", message, "yes" if default else "no")
            return default
        hint = "[Y/n]" if default else "[y/N]"
        while True:
            raw = await _read_line(f"? {message} {hint} ")
            if raw is None:
                return default
            choice = raw.strip().lower()
            if not choice:
                return default
            if choice in _YES:
                return True
            if choice in _NO:
                return False
            _LOG.warning("Please answer y or n.")

    async def ask(self, message: str, default: str = "") -> str:
        if not self._interactive():
            return default
        suffix = f" ({default})" if default else ""
        raw = await _read_line(f"? {message}{suffix} ")
        if raw is None:
            return default
        return raw.strip() or default


class DefaultsPrompter:
    """Answers every confirmation with its default and every question with its default text."""

    async def confirm(self, message: str, default: bool = True) -> bool:
        _LOG.info("%s -> %s (default)", message, "yes" if default else "no")
        return default

    async def ask(self, message: str, default: str = "") -> str:
        return default
