"""Orchestrator state: one owner object for the lock, gate, flags and baseline.

States:
    IDLE                - nothing running
    ACTION_IN_PROGRESS  - a cycle holds the lock (possibly awaiting a prompt)
    EDITING_GATE_OPEN   - last evaluation saw `isEditing = true`; nothing acted on

Flags layered on top:
    reevaluate_after_completion - a notification arrived while the lock was held
    reevaluate_after_decline    - the batch was declined once; re-present it once
    ignore_next_change          - our own manifest write is about to be observed
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from navsync.manifest.models import ChangeSet, ManifestSnapshot


class EngineState(str, Enum):
    IDLE = "idle"
    ACTION_IN_PROGRESS = "action_in_progress"
    EDITING_GATE_OPEN = "editing_gate_open"


class NotificationDecision(str, Enum):
    EVALUATE = "evaluate"
    DEFER = "defer"
    IGNORE_SELF_WRITE = "ignore_self_write"


class CycleOutcome(str, Enum):
    IGNORED = "ignored"
    DEFERRED = "deferred"
    UNPARSABLE = "unparsable"
    STRUCTURE_MISSING = "structure_missing"
    GATED = "gated"
    NO_CHANGES = "no_changes"
    DECLINED = "declined"
    ABORTED = "aborted"
    CANCELLED = "cancelled"
    PROCESSED = "processed"
    FAILED = "failed"


@dataclass(slots=True)
class CycleReport:
    """What one evaluation did; `batches` holds saga.SubBatchResult items."""

    outcome: CycleOutcome
    changes: Optional[ChangeSet] = None
    batches: list = field(default_factory=list)
    reschedule: bool = False
    error: str = ""


@dataclass(slots=True)
class OrchestratorState:
    baseline: Optional[ManifestSnapshot] = None
    state: EngineState = EngineState.IDLE
    reevaluate_after_completion: bool = False
    reevaluate_after_decline: bool = False
    ignore_next_change: bool = False
    history: list[str] = field(default_factory=list)

    def _enter(self, state: EngineState) -> None:
        self.state = state
        self.history.append(state.value)

    @property
    def busy(self) -> bool:
        return self.state is EngineState.ACTION_IN_PROGRESS

    def on_notification(self) -> NotificationDecision:
        """Classify an external change notification."""
        if self.ignore_next_change:
            # Our own write: consumes exactly one notification, even mid-cycle
            self.ignore_next_change = False
            return NotificationDecision.IGNORE_SELF_WRITE
        if self.busy:
            self.reevaluate_after_completion = True
            return NotificationDecision.DEFER
        return NotificationDecision.EVALUATE

    def begin_action(self) -> None:
        if self.busy:
            raise RuntimeError("action already in progress")
        self._enter(EngineState.ACTION_IN_PROGRESS)

    def end_action(self, *, gate_open: bool = False) -> bool:
        """Release the lock. Returns True when a deferred notification asks for another cycle."""
        self._enter(EngineState.EDITING_GATE_OPEN if gate_open else EngineState.IDLE)
        rerun = self.reevaluate_after_completion
        self.reevaluate_after_completion = False
        return rerun

    def expect_self_write(self) -> None:
        self.ignore_next_change = True

    def cancel_self_write(self) -> None:
        self.ignore_next_change = False

    def acknowledge(self, snapshot: ManifestSnapshot) -> None:
        """Make `snapshot` the baseline considered already reflected on disk."""
        self.baseline = snapshot

    def mark_declined(self) -> bool:
        """Record a declined batch. True only for the first decline in a row (one re-evaluation)."""
        if self.reevaluate_after_decline:
            self.reevaluate_after_decline = False
            return False
        self.reevaluate_after_decline = True
        return True

    def clear_decline(self) -> None:
        self.reevaluate_after_decline = False
