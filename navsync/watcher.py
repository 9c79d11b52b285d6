"""Manifest file watcher: asyncio mtime polling with a write-stability threshold.

A change is reported once the file's (mtime, size) signature has stopped
changing for `stability_threshold` seconds, so editors that save in several
writes produce a single notification. The state at start-up is not reported.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Optional, Tuple

from navsync.logging import get_logger

_LOG = get_logger("watcher")

Signature = Optional[Tuple[int, int]]


def file_signature(path: Path) -> Signature:
    try:
        st = path.stat()
    except OSError:
        return None
    return (st.st_mtime_ns, st.st_size)


class ManifestWatcher:
    def __init__(
        self,
        path: Path,
        on_change: Callable[[Path], object],
        *,
        poll_interval: float = 0.1,
        stability_threshold: float = 1.5,
    ) -> None:
        self.path = Path(path)
        self.on_change = on_change
        self.poll_interval = poll_interval
        self.stability_threshold = stability_threshold
        self._stopped = asyncio.Event()

    def stop(self) -> None:
        self._stopped.set()

    async def run(self) -> None:
        loop = asyncio.get_running_loop()
        settled = file_signature(self.path)
        pending: Signature = settled
        pending_since = 0.0
        _LOG.info("Watching for changes in %s...", self.path)
        while not self._stopped.is_set():
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self.poll_interval)
                break
            except asyncio.TimeoutError:
                pass
            current = file_signature(self.path)
            if current == settled:
                pending = settled
                continue
            if current != pending:
                pending = current
                pending_since = loop.time()
                continue
            if loop.time() - pending_since < self.stability_threshold:
                continue
            settled = current
            if current is None:
                _LOG.warning("Watched file disappeared: %s", self.path)
                continue
            try:
                self.on_change(self.path)
            except Exception:
                _LOG.exception("Watcher callback failed")
