"""Tests for the orchestrator state machine and the sub-batch runner."""
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from conftest import ScriptedPrompter
from navsync.errors import ManifestStructureError
from navsync.orchestration.saga import Operation, OperationOutcome, StepResult, run_sub_batch
from navsync.orchestration.state import EngineState, NotificationDecision, OrchestratorState


def test_idle_notification_evaluates() -> None:
    assert OrchestratorState().on_notification() is NotificationDecision.EVALUATE


def test_busy_notification_defers_and_requests_rerun() -> None:
    state = OrchestratorState()
    state.begin_action()
    assert state.on_notification() is NotificationDecision.DEFER
    assert state.end_action() is True
    assert state.reevaluate_after_completion is False
    assert state.state is EngineState.IDLE


def test_self_write_consumes_exactly_one_notification() -> None:
    state = OrchestratorState()
    state.expect_self_write()
    assert state.on_notification() is NotificationDecision.IGNORE_SELF_WRITE
    assert state.on_notification() is NotificationDecision.EVALUATE


def test_self_write_is_consumed_even_while_busy() -> None:
    state = OrchestratorState()
    state.begin_action()
    state.expect_self_write()
    assert state.on_notification() is NotificationDecision.IGNORE_SELF_WRITE
    assert state.end_action() is False


def test_begin_action_twice_raises() -> None:
    state = OrchestratorState()
    state.begin_action()
    with pytest.raises(RuntimeError):
        state.begin_action()


def test_gate_state_and_history() -> None:
    state = OrchestratorState()
    state.begin_action()
    state.end_action(gate_open=True)
    assert state.state is EngineState.EDITING_GATE_OPEN
    assert state.history == ["action_in_progress", "editing_gate_open"]
    assert state.on_notification() is NotificationDecision.EVALUATE


def test_decline_reschedules_once() -> None:
    state = OrchestratorState()
    assert state.mark_declined() is True
    assert state.mark_declined() is False
    assert state.mark_declined() is True
    state.clear_decline()
    assert state.reevaluate_after_decline is False


def _op(name, calls, written=None, error=None):
    async def action():
        calls.append(name)
        if error is not None:
            raise error
        return StepResult(written=list(written or []), touched=list(written or []))

    return Operation(name=name, action=action)


@pytest.mark.asyncio
async def test_sub_batch_runs_all_operations_in_order() -> None:
    calls = []
    result = await run_sub_batch("additions", [_op("a", calls, ["x"]), _op("b", calls, ["y"])], ScriptedPrompter())
    assert calls == ["a", "b"]
    assert result.completed and result.effective
    assert result.touched == ["x", "y"]


@pytest.mark.asyncio
async def test_sub_batch_decline_stops_and_compensates() -> None:
    calls = []
    undone = []

    def compensate(paths):
        undone.extend(paths)
        return paths

    prompter = ScriptedPrompter(answers=[("Confirm: b?", False)])
    ops = [_op("a", calls, ["x"]), _op("b", calls, ["y"]), _op("c", calls, ["z"])]
    result = await run_sub_batch("additions", ops, prompter, compensate=compensate)
    assert calls == ["a"]
    assert result.outcome is OperationOutcome.CANCELLED
    assert result.stopped_at == "b"
    assert undone == ["x"]
    assert result.compensated == ["x"]


@pytest.mark.asyncio
async def test_sub_batch_error_stops_without_compensation_callback() -> None:
    calls = []
    ops = [_op("a", calls, ["x"]), _op("b", calls, error=ManifestStructureError("no screens array")), _op("c", calls)]
    result = await run_sub_batch("deletions", ops, ScriptedPrompter())
    assert calls == ["a", "b"]
    assert result.outcome is OperationOutcome.FAILED
    assert result.compensated == []
    assert result.touched == ["x"]


@pytest.mark.asyncio
async def test_sub_batch_with_no_effect_is_not_effective() -> None:
    result = await run_sub_batch("updates", [_op("a", [])], ScriptedPrompter())
    assert result.completed
    assert not result.effective
