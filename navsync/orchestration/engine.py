"""
Orchestration engine: keeps the manifest and its generated files in sync.

One cycle (under the action lock):

    parse -> editing gate -> fold pending commands -> classify vs baseline
          -> confirm batch -> [deletions, renames, updates, additions]
          -> commit offer per completed sub-batch -> new baseline

Notifications that arrive while a cycle holds the lock are deferred and
trigger exactly one more cycle when it finishes. A declined batch leaves the
baseline untouched and is re-presented once. A cancelled or failed sub-batch
ends the cycle early, also without touching the baseline.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Iterable, Optional

from navsync.config import NavSyncConfig
from navsync.errors import ManifestStructureError, ManifestSyntaxError, NavSyncError
from navsync.logging import get_logger
from navsync.manifest.classifier import IdentityMatcher, classify, same_component
from navsync.manifest.commands import fold_commands, fold_pending
from navsync.manifest.models import (
    ChangeSet,
    CommandSpec,
    ImportSpec,
    ManifestEdits,
    ManifestSnapshot,
    ParseResult,
    ScreenChange,
    ScreenEntry,
    feature_import_for,
)
from navsync.manifest.mutator import mutate
from navsync.manifest.parser import parse_manifest_file
from navsync.projections.generator import ProjectionGenerator
from navsync.projections.targets import TARGET_LABELS, TARGET_ORDER, TargetKind
from navsync.prompts import Prompter
from navsync.vcs import GitClient
from navsync.watcher import ManifestWatcher

from .saga import Operation, StepResult, SubBatchResult, run_sub_batch
from .state import CycleOutcome, CycleReport, NotificationDecision, OrchestratorState

_LOG = get_logger("orchestration.engine")


class SyncEngine:
    """Owns the orchestrator state and drives parser, classifier, mutator and generators."""

    def __init__(
        self,
        config: NavSyncConfig,
        prompter: Prompter,
        *,
        git: Optional[GitClient] = None,
        matcher: IdentityMatcher = same_component,
    ) -> None:
        self.config = config
        self.prompter = prompter
        self.git = git
        self.matcher = matcher
        self.state = OrchestratorState()
        self.generator = ProjectionGenerator(config, prompter)
        self.reports: list[CycleReport] = []
        self._tasks: set[asyncio.Task] = set()

    @property
    def manifest_path(self) -> Path:
        return self.config.manifest_path

    # --- baseline / notifications -------------------------------------------------

    def initialize(self) -> bool:
        """Take the initial parse as the baseline. False if the manifest or its tab screens cannot be read."""
        result = parse_manifest_file(self.manifest_path)
        if not result.parsable:
            _LOG.error("Failed to parse initial manifest on startup. Please check %s.", self.manifest_path)
            return False
        if not result.screens_found:
            _LOG.warning("Tab navigator screens not found in %s; no baseline taken.", self.manifest_path)
            return False
        self.state.acknowledge(result.snapshot)
        _LOG.info("Initial navigation manifest parsed (%d screens).", len(result.snapshot.screens))
        return True

    def notify(self, path: Optional[Path] = None) -> asyncio.Task:
        """Watcher callback: schedule handling of one change notification."""
        task = asyncio.get_running_loop().create_task(self.on_manifest_changed())
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            _LOG.error("Unexpected error while processing manifest change", exc_info=task.exception())

    async def on_manifest_changed(self) -> CycleReport:
        decision = self.state.on_notification()
        if decision is NotificationDecision.IGNORE_SELF_WRITE:
            _LOG.debug("Change to manifest was programmatic; ignoring this event.")
            return self._record(CycleReport(CycleOutcome.IGNORED))
        if decision is NotificationDecision.DEFER:
            _LOG.info("Action already in progress. Change will be processed after it completes.")
            return self._record(CycleReport(CycleOutcome.DEFERRED))
        _LOG.info("Change detected in %s. Parsing...", self.manifest_path)
        return await self._run_cycles()

    def _record(self, report: CycleReport) -> CycleReport:
        self.reports.append(report)
        return report

    async def _run_cycles(self) -> CycleReport:
        """Run evaluation cycles until no deferred notification or decline asks for another."""
        while True:
            self.state.begin_action()
            report = CycleReport(CycleOutcome.FAILED)
            try:
                report = await self._evaluate()
            except (NavSyncError, OSError) as e:
                _LOG.error("An error occurred during manifest processing: %s", e)
                report = CycleReport(CycleOutcome.FAILED, error=str(e))
            finally:
                rerun = self.state.end_action(gate_open=report.outcome is CycleOutcome.GATED)
            self._record(report)
            if report.reschedule:
                rerun = True
            if not rerun:
                return report
            _LOG.info("Re-evaluating manifest...")

    async def _evaluate(self) -> CycleReport:
        result = parse_manifest_file(self.manifest_path)
        if not result.parsable:
            _LOG.warning("Could not parse navigation manifest. Waiting for next valid change.")
            return CycleReport(CycleOutcome.UNPARSABLE)
        if not result.screens_found:
            return self._structure_missing()
        flags = result.flags
        if flags.editing and flags.autosave and not result.pending:
            _LOG.info("Manifest is marked as being edited (isEditing = true); waiting.")
            return CycleReport(CycleOutcome.GATED)
        if result.pending:
            _LOG.info(
                "Pending commands found: add=%s delete=%s",
                [c.name for c in result.pending.add],
                [c.name for c in result.pending.delete],
            )
            result = self._apply_edits_and_reparse(result, fold_pending(result.snapshot, result.pending))
            if not result.parsable:
                return CycleReport(CycleOutcome.UNPARSABLE)
            if not result.screens_found:
                return self._structure_missing()
        return await self._process(result.snapshot)

    def _structure_missing(self) -> CycleReport:
        _LOG.warning(
            "Tab navigator screens array not found in %s; skipping screen sync until it is restored.",
            self.manifest_path,
        )
        return CycleReport(CycleOutcome.STRUCTURE_MISSING)

    # --- manifest writes ----------------------------------------------------------

    def _write_manifest(self, text: str) -> None:
        self.state.expect_self_write()
        try:
            self.manifest_path.write_text(text, encoding="utf-8")
        except OSError:
            self.state.cancel_self_write()
            raise
        _LOG.info("Updated %s (next change notification will be ignored).", self.manifest_path)

    def _edit_manifest(self, edits: ManifestEdits) -> bool:
        """Mutate and write the manifest. False when the edit was a no-op."""
        text = self.manifest_path.read_text(encoding="utf-8")
        new_text = mutate(text, edits)
        if new_text == text:
            return False
        self._write_manifest(new_text)
        return True

    def _apply_edits_and_reparse(self, result: ParseResult, edits: ManifestEdits) -> ParseResult:
        try:
            self._edit_manifest(edits)
        except ManifestStructureError as e:
            _LOG.warning("Could not apply commands to manifest: %s", e)
            return result
        return parse_manifest_file(self.manifest_path)

    # --- cycle body -----------------------------------------------------------------

    async def _process(self, snapshot: ManifestSnapshot) -> CycleReport:
        baseline = self.state.baseline
        changes = classify(snapshot.screens, baseline.screens if baseline else (), self.matcher)
        if changes.is_empty():
            _LOG.info("No screen changes compared to the last acknowledged state.")
            self.state.acknowledge(snapshot)
            self.state.clear_decline()
            return CycleReport(CycleOutcome.NO_CHANGES, changes)

        summary = changes.summary()
        _LOG.info("Detected screen changes: %s", summary)
        proceed = await self.prompter.confirm(
            f"The following screen changes were detected: {summary}. "
            "Proceed with generating files and updates now?",
            default=True,
        )
        if not proceed:
            reschedule = self.state.mark_declined()
            _LOG.info("Not processing now. These changes will be re-evaluated later.")
            return CycleReport(CycleOutcome.DECLINED, changes, reschedule=reschedule)
        self.state.clear_decline()

        if not await self._commit_other_changes_first():
            return CycleReport(CycleOutcome.ABORTED, changes)

        report = CycleReport(CycleOutcome.PROCESSED, changes)
        stages = (
            ("deletions", changes.deleted, self._deletion_ops, False),
            ("renames", changes.renamed, self._rename_ops, False),
            ("updates", changes.updated, self._update_ops, False),
            ("additions", changes.added, self._addition_ops, True),
        )
        for label, items, build, compensated in stages:
            if not items:
                continue
            _LOG.info("Processing %s: %s", label, ", ".join(_item_name(i) for i in items))
            batch = await run_sub_batch(
                label,
                build(items),
                self.prompter,
                compensate=self.generator.discard if compensated else None,
            )
            report.batches.append(batch)
            if not batch.completed:
                _LOG.info("Aborting %s; the baseline is left unchanged.", label)
                report.outcome = CycleOutcome.CANCELLED
                return report
            if batch.effective:
                await self._offer_commit(batch)
            else:
                _LOG.info("No files were changed by %s (e.g. all existing files were kept).", label)

        self.state.acknowledge(snapshot)
        _LOG.info("Processing for the current batch of screens completed.")
        return report

    # --- operation builders -----------------------------------------------------

    def _import_for(self, screen: ScreenEntry) -> ImportSpec:
        return feature_import_for(screen.name, screen.component_name, self.config.module_stem)

    def _imports_op(self, name: str, add: list[ImportSpec], remove: list[ImportSpec]) -> Operation:
        async def action() -> StepResult:
            if self._edit_manifest(ManifestEdits(imports_to_add=add, imports_to_remove=remove)):
                return StepResult(touched=[self.manifest_path])
            _LOG.info("Manifest imports already up to date.")
            return StepResult()

        return Operation(name=name, action=action)

    def _generate_op(self, kind: TargetKind, screen: ScreenEntry, is_update: bool, verb: str) -> Operation:
        async def action() -> StepResult:
            path = await self.generator.generate(
                kind, screen.name, screen.component_name, screen.display_title, is_update=is_update
            )
            if path is None:
                return StepResult()
            return StepResult(written=[path], touched=[path])

        return Operation(name=f"{verb} {TARGET_LABELS[kind]} for {screen.name}", action=action)

    def _remove_op(self, kind: TargetKind, screen: ScreenEntry) -> Operation:
        async def action() -> StepResult:
            path = self.generator.remove(kind, screen.name)
            return StepResult(touched=[path] if path else [])

        return Operation(name=f"Remove {TARGET_LABELS[kind]} for {screen.name}", action=action)

    def _rename_op(self, kind: TargetKind, change: ScreenChange) -> Operation:
        async def action() -> StepResult:
            moved_from = self.generator.move(kind, change.old.name, change.new.name)
            new = change.new
            path = await self.generator.generate(
                kind, new.name, new.component_name, new.display_title, is_update=True
            )
            touched = [p for p in (moved_from, path) if p is not None]
            return StepResult(written=[path] if path else [], touched=touched)

        return Operation(
            name=f"Rename {TARGET_LABELS[kind]} {change.old.name} -> {change.new.name}",
            action=action,
        )

    def _deletion_ops(self, screens: list[ScreenEntry]) -> list[Operation]:
        ops: list[Operation] = []
        for screen in screens:
            ops.extend(self._remove_op(kind, screen) for kind in TARGET_ORDER)
            ops.append(
                self._imports_op(
                    f"Remove import for {screen.component_name} from navigation manifest",
                    add=[],
                    remove=[self._import_for(screen)],
                )
            )
        return ops

    def _rename_ops(self, changes: list[ScreenChange]) -> list[Operation]:
        ops: list[Operation] = []
        for change in changes:
            ops.extend(self._rename_op(kind, change) for kind in TARGET_ORDER)
            ops.append(
                self._imports_op(
                    f"Point import for {change.new.component_name} at '{change.new.name}'",
                    add=[self._import_for(change.new)],
                    remove=[self._import_for(change.old)],
                )
            )
        return ops

    def _update_ops(self, changes: list[ScreenChange]) -> list[Operation]:
        ops: list[Operation] = []
        for change in changes:
            component_changed = change.old.component_name != change.new.component_name
            # Only the feature module renders the title
            kinds = TARGET_ORDER if component_changed else (TargetKind.FEATURE,)
            ops.extend(self._generate_op(kind, change.new, True, "Regenerate") for kind in kinds)
            if component_changed:
                ops.append(
                    self._imports_op(
                        f"Replace import {change.old.component_name} with {change.new.component_name}",
                        add=[self._import_for(change.new)],
                        remove=[self._import_for(change.old)] if change.old.component_name else [],
                    )
                )
        return ops

    def _addition_ops(self, screens: list[ScreenEntry]) -> list[Operation]:
        ops: list[Operation] = []
        for screen in screens:
            if not screen.actionable:
                _LOG.warning("Skipping screen due to missing name or component: %s", screen)
                continue
            ops.extend(self._generate_op(kind, screen, False, "Generate") for kind in TARGET_ORDER)
            ops.append(
                self._imports_op(
                    f"Add import for {screen.component_name} to navigation manifest",
                    add=[self._import_for(screen)],
                    remove=[],
                )
            )
        return ops

    # --- version control -----------------------------------------------------------

    async def _commit_other_changes_first(self) -> bool:
        """Offer to commit unrelated work first. False aborts the cycle."""
        if self.git is None:
            return True
        ok, changes = await asyncio.to_thread(self.git.uncommitted_changes, [self.manifest_path])
        if not ok:
            _LOG.warning("Could not read git status; continuing without it.")
            return True
        if not changes:
            return True
        _LOG.info("Uncommitted changes found (excluding navigation manifest):")
        for entry in changes:
            _LOG.info("  - %s (%s%s)", entry.path, entry.index, entry.worktree)
        commit_first = await self.prompter.confirm(
            "You have other uncommitted changes. Would you like to commit them first?",
            default=False,
        )
        if not commit_first:
            _LOG.info("Proceeding without committing other changes.")
            return True
        message = await self.prompter.ask("Enter commit message for other changes:")
        if not message:
            _LOG.info("No commit message provided. Aborting current operation.")
            return False
        ok, out = await asyncio.to_thread(self.git.commit, message, [e.path for e in changes])
        if not ok:
            _LOG.error("Error committing other changes: %s", out)
        return True

    async def _offer_commit(self, batch: SubBatchResult) -> None:
        if self.git is None:
            return
        works = await self.prompter.confirm(
            f"All {batch.label} are done. Do they work as expected?", default=True
        )
        if not works:
            _LOG.info("Please review the changes and commit manually.")
            return
        if not await self.prompter.confirm("Commit these changes?", default=True):
            return
        message = await self.prompter.ask("Enter commit message:")
        if not message:
            _LOG.info("No commit message. Not committing.")
            return
        files = list(dict.fromkeys([*batch.touched, self.manifest_path]))
        ok, out = await asyncio.to_thread(self.git.commit, message, files)
        if ok:
            _LOG.info("Changes committed successfully.")
        else:
            _LOG.error("Error committing changes: %s", out)

    # --- entry points -------------------------------------------------------------

    async def run_direct(
        self,
        add: Iterable[CommandSpec] = (),
        delete: Iterable[CommandSpec] = (),
    ) -> CycleReport:
        """One-shot mode: apply explicit commands, then classify and process once (no editing gate)."""
        initial = parse_manifest_file(self.manifest_path)
        if not initial.parsable:
            raise ManifestSyntaxError(f"cannot parse {self.manifest_path}")
        if not initial.screens_found:
            raise ManifestStructureError(f"tab navigator screens array not found in {self.manifest_path}")
        self.state.acknowledge(initial.snapshot)
        self.state.begin_action()
        report = CycleReport(CycleOutcome.FAILED)
        try:
            edits = fold_commands(initial.snapshot, add, delete)
            if edits.is_empty():
                report = CycleReport(CycleOutcome.NO_CHANGES, ChangeSet())
            else:
                self._edit_manifest(edits)
                result = parse_manifest_file(self.manifest_path)
                if not result.parsable:
                    report = CycleReport(CycleOutcome.UNPARSABLE)
                elif not result.screens_found:
                    report = self._structure_missing()
                else:
                    report = await self._process(result.snapshot)
        finally:
            self.state.end_action()
        return self._record(report)

    async def watch(self) -> None:
        """Watch mode: runs until cancelled (Ctrl+C)."""
        if not self.initialize():
            _LOG.warning("Continuing; the first valid save will be compared against an empty baseline.")
        watcher = ManifestWatcher(
            self.manifest_path,
            self.notify,
            poll_interval=self.config.poll_interval,
            stability_threshold=self.config.stability_threshold,
        )
        try:
            await watcher.run()
        finally:
            watcher.stop()


def _item_name(item: object) -> str:
    if isinstance(item, ScreenChange):
        return f"{item.old.name} -> {item.new.name}" if item.old.name != item.new.name else item.new.name
    return getattr(item, "name", str(item))
