"""Orchestration: state machine, sub-batch runner and sync engine."""

from .engine import SyncEngine
from .state import CycleOutcome, CycleReport, EngineState, OrchestratorState

__all__ = ["CycleOutcome", "CycleReport", "EngineState", "OrchestratorState", "SyncEngine"]
