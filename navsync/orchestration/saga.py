"""Sub-batch runner: confirm each operation, stop on the first decline or error.

Only the additions sub-batch has a compensating step (remove files it already
generated). Deletions, renames and updates are not compensated on partial
failure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Awaitable, Callable, Iterable, Optional

from navsync.errors import NavSyncError
from navsync.logging import get_logger
from navsync.prompts import Prompter

_LOG = get_logger("orchestration.saga")


class OperationOutcome(str, Enum):
    DONE = "done"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(slots=True)
class StepResult:
    """Paths an operation wrote (compensation candidates) and all paths it touched (commit set)."""

    written: list[Path] = field(default_factory=list)
    touched: list[Path] = field(default_factory=list)


@dataclass(slots=True)
class Operation:
    name: str
    action: Callable[[], Awaitable[StepResult]]


@dataclass(slots=True)
class SubBatchResult:
    label: str
    outcome: OperationOutcome = OperationOutcome.DONE
    written: list[Path] = field(default_factory=list)
    touched: list[Path] = field(default_factory=list)
    stopped_at: str = ""
    compensated: list[Path] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        return self.outcome is OperationOutcome.DONE

    @property
    def effective(self) -> bool:
        return bool(self.touched)


async def run_sub_batch(
    label: str,
    operations: Iterable[Operation],
    prompter: Prompter,
    *,
    compensate: Optional[Callable[[list[Path]], list[Path]]] = None,
) -> SubBatchResult:
    """Run operations in order with a confirmation gate before each one."""
    result = SubBatchResult(label=label)
    for op in operations:
        if not await prompter.confirm(f"Confirm: {op.name}?", default=True):
            _LOG.info('Operation "%s" cancelled.', op.name)
            result.outcome = OperationOutcome.CANCELLED
            result.stopped_at = op.name
            break
        try:
            step = await op.action()
        except (OSError, NavSyncError) as e:
            _LOG.error('Error during "%s": %s', op.name, e)
            result.outcome = OperationOutcome.FAILED
            result.stopped_at = op.name
            break
        result.written.extend(step.written)
        result.touched.extend(step.touched)

    if not result.completed and compensate is not None and result.written:
        _LOG.info("One or more operations were cancelled. Undoing generated files for this batch...")
        result.compensated = compensate(list(result.written))
        _LOG.info("Programmatic changes to the manifest (if any) might need manual revert.")
    return result
