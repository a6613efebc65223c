"""Deployment pipeline: deploy, update and diff over resolved units.

One :class:`DeploymentPipeline` runs one direction over an ordered list of
:class:`~dotr.domain.models.DeploymentUnit` objects. Units are processed one
at a time in resolver order and grouped by package so that actions wrap the
package's writes:

* **deploy** renders templates, compares with the destination, and for
  changed or missing destinations backs up the old file (single generation)
  and writes the new content. ``pre_actions`` run before the first write of
  a package and ``post_actions`` after it; packages whose units are all
  identical run no actions.
* **update** copies changed or new destination content back into the
  store. Template units are never touched.
* **diff** only compares and reports.

Render and I/O failures are recorded against the unit and never stop the
remaining units.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..domain.diffing import DEFAULT_CONTEXT_LINES, Change, compute_change
from ..domain.enums import ChangeKind, Direction, UnitOutcome
from ..domain.errors import RenderError, UnitIOError
from ..domain.models import ConfigTree, DeploymentUnit, Package, Profile
from ..domain.paths import backup_path_for
from ..domain.variables import VariableContext, resolve_variables
from .ports import CopyFile, DetectTemplate, ReadFile, RenderTemplate, RunAction, WriteFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class UnitReport:
    """What happened to one unit.

    Attributes:
        unit: The processed unit.
        outcome: Final state.
        change: Comparison result, when one was computed.
        detail: Human-readable reason for skips and failures.
        backup_path: Backup written before an overwrite, if any.
    """

    unit: DeploymentUnit
    outcome: UnitOutcome
    change: Change | None = None
    detail: str | None = None
    backup_path: Path | None = None


@dataclass(frozen=True, slots=True)
class ActionReport:
    """Result of one pre/post action."""

    package: str
    phase: str
    command: str
    exit_code: int | None
    detail: str | None = None

    @property
    def failed(self) -> bool:
        return self.exit_code != 0


@dataclass(slots=True)
class RunReport:
    """Aggregated result of one pipeline run."""

    direction: Direction
    units: list[UnitReport] = field(default_factory=list)
    actions: list[ActionReport] = field(default_factory=list)

    @property
    def failed_units(self) -> list[UnitReport]:
        return [report for report in self.units if report.outcome is UnitOutcome.FAILED]

    @property
    def failed_actions(self) -> list[ActionReport]:
        return [report for report in self.actions if report.failed]

    @property
    def ok(self) -> bool:
        """True when no unit and no action failed."""
        return not self.failed_units and not self.failed_actions

    def count(self, outcome: UnitOutcome) -> int:
        """Number of units that ended in *outcome*."""
        return sum(1 for report in self.units if report.outcome is outcome)


@dataclass(slots=True)
class DeploymentPipeline:
    """Run deploy, update or diff over resolved units.

    Attributes:
        repo_root: Working directory for actions.
        read_file: Port returning file bytes or ``None``.
        write_file: Atomic write port.
        copy_file: Copy port used for backups.
        detect_template: Template syntax detector, used for action command lines.
        render_template: Template renderer.
        run_action: Shell runner for pre/post actions.
        shell: Shell executable handed to ``run_action``.
        backup_suffix: Suffix for destination backups.
        context_lines: Diff context around each hunk.
        environ: Environment snapshot feeding the lowest variable layer.
    """

    repo_root: Path
    read_file: ReadFile
    write_file: WriteFile
    copy_file: CopyFile
    detect_template: DetectTemplate
    render_template: RenderTemplate
    run_action: RunAction
    shell: str = "/bin/sh"
    backup_suffix: str = ".dotrbak"
    context_lines: int = DEFAULT_CONTEXT_LINES
    environ: Mapping[str, str] = field(default_factory=dict)

    def run(
        self,
        direction: Direction,
        config: ConfigTree,
        units: Sequence[DeploymentUnit],
        *,
        profile: Profile | None = None,
        user_variables: Mapping[str, Any] | None = None,
    ) -> RunReport:
        """Process *units* in order and return the collected report."""
        handlers: dict[Direction, Callable[[Package, list[DeploymentUnit], VariableContext, RunReport], None]] = {
            Direction.DEPLOY: self._deploy_package,
            Direction.UPDATE: self._update_package,
            Direction.DIFF: self._diff_package,
        }
        handler = handlers[direction]
        report = RunReport(direction)
        for _, group in itertools.groupby(units, key=lambda unit: unit.package.name):
            package_units = list(group)
            package = package_units[0].package
            context = resolve_variables(
                config,
                package=package,
                profile=profile,
                user_variables=user_variables,
                environ=self.environ,
            )
            handler(package, package_units, context, report)
        logger.info(
            "Pipeline finished",
            extra={
                "direction": direction.value,
                "units": len(report.units),
                "written": report.count(UnitOutcome.WRITTEN),
                "failed": len(report.failed_units),
            },
        )
        return report

    def _effective_source(self, unit: DeploymentUnit, context: VariableContext) -> bytes | None:
        data = self.read_file(unit.source_path)
        if data is None or not unit.is_template:
            return data
        return self.render_template(data.decode("utf-8"), context).encode("utf-8")

    def _compare(
        self, unit: DeploymentUnit, context: VariableContext, report: RunReport
    ) -> tuple[bytes | None, Change] | None:
        """Compute the effective source and its change, or record a failure."""
        try:
            content = self._effective_source(unit, context)
        except RenderError as exc:
            self._fail(report, unit, f"render failed: {exc}")
            return None
        except OSError as exc:
            self._fail(report, unit, str(UnitIOError("read", unit.source_path, exc)))
            return None
        try:
            dest = self.read_file(unit.dest_path)
        except OSError as exc:
            self._fail(report, unit, str(UnitIOError("read", unit.dest_path, exc)))
            return None
        return content, compute_change(content, dest, context_lines=self.context_lines)

    def _deploy_package(
        self, package: Package, units: list[DeploymentUnit], context: VariableContext, report: RunReport
    ) -> None:
        planned: list[tuple[DeploymentUnit, bytes, Change]] = []
        for unit in units:
            compared = self._compare(unit, context, report)
            if compared is None:
                continue
            content, change = compared
            if change.kind is ChangeKind.SOURCE_MISSING or content is None:
                self._fail(report, unit, f"source {unit.source_path} does not exist", change)
            elif change.kind is ChangeKind.IDENTICAL:
                report.units.append(UnitReport(unit, UnitOutcome.UNCHANGED, change))
                logger.debug("Unchanged", extra={"unit": unit.label, "dest": str(unit.dest_path)})
            else:
                planned.append((unit, content, change))

        if not planned:
            return
        if not self._run_actions(package, "pre", package.pre_actions, context, report):
            for unit, _, change in planned:
                self._fail(report, unit, "skipped because a pre_action failed", change)
            return

        wrote = False
        for unit, content, change in planned:
            wrote = self._write_unit(unit, content, change, report) or wrote
        if wrote:
            self._run_actions(package, "post", package.post_actions, context, report)

    def _write_unit(self, unit: DeploymentUnit, content: bytes, change: Change, report: RunReport) -> bool:
        backup: Path | None = None
        try:
            if change.kind is ChangeKind.CHANGED:
                backup = backup_path_for(unit.dest_path, self.backup_suffix)
                self.copy_file(unit.dest_path, backup)
        except OSError as exc:
            self._fail(report, unit, str(UnitIOError("backup", unit.dest_path, exc)), change)
            return False
        try:
            self.write_file(unit.dest_path, content)
        except OSError as exc:
            self._fail(report, unit, str(UnitIOError("write", unit.dest_path, exc)), change)
            return False
        report.units.append(UnitReport(unit, UnitOutcome.WRITTEN, change, backup_path=backup))
        logger.info(
            "Deployed",
            extra={"unit": unit.label, "dest": str(unit.dest_path), "backup": str(backup) if backup else None},
        )
        return True

    def _update_package(
        self, package: Package, units: list[DeploymentUnit], context: VariableContext, report: RunReport
    ) -> None:
        for unit in units:
            if unit.is_template:
                report.units.append(UnitReport(unit, UnitOutcome.SKIPPED, detail="template source is never updated"))
                continue
            try:
                dest = self.read_file(unit.dest_path)
            except OSError as exc:
                self._fail(report, unit, str(UnitIOError("read", unit.dest_path, exc)))
                continue
            try:
                source = self.read_file(unit.source_path)
            except OSError as exc:
                self._fail(report, unit, str(UnitIOError("read", unit.source_path, exc)))
                continue
            if dest is None:
                report.units.append(UnitReport(unit, UnitOutcome.SKIPPED, detail="destination does not exist"))
                continue
            change = compute_change(source, dest, context_lines=self.context_lines)
            if change.kind is ChangeKind.IDENTICAL:
                report.units.append(UnitReport(unit, UnitOutcome.UNCHANGED, change))
                continue
            try:
                self.write_file(unit.source_path, dest)
            except OSError as exc:
                self._fail(report, unit, str(UnitIOError("write", unit.source_path, exc)), change)
                continue
            report.units.append(UnitReport(unit, UnitOutcome.WRITTEN, change))
            logger.info("Updated store", extra={"unit": unit.label, "source": str(unit.source_path)})

    def _diff_package(
        self, package: Package, units: list[DeploymentUnit], context: VariableContext, report: RunReport
    ) -> None:
        for unit in units:
            compared = self._compare(unit, context, report)
            if compared is None:
                continue
            _, change = compared
            if change.kind is ChangeKind.IDENTICAL:
                outcome = UnitOutcome.UNCHANGED
            elif change.kind is ChangeKind.SOURCE_MISSING:
                outcome = UnitOutcome.SKIPPED
            else:
                outcome = UnitOutcome.PENDING
            report.units.append(UnitReport(unit, outcome, change))

    def _run_actions(
        self,
        package: Package,
        phase: str,
        commands: Sequence[str],
        context: VariableContext,
        report: RunReport,
    ) -> bool:
        """Run *commands* in order; stop at the first failure and return False."""
        for command in commands:
            try:
                rendered = self.render_template(command, context) if self.detect_template(command) else command
            except RenderError as exc:
                report.actions.append(ActionReport(package.name, phase, command, None, f"render failed: {exc}"))
                logger.error("Action render failed", extra={"package": package.name, "command": command})
                return False
            try:
                exit_code = self.run_action(rendered, cwd=self.repo_root, shell=self.shell)
            except OSError as exc:
                report.actions.append(ActionReport(package.name, phase, rendered, None, str(exc)))
                logger.error("Action could not start", extra={"package": package.name, "error": str(exc)})
                return False
            report.actions.append(ActionReport(package.name, phase, rendered, exit_code))
            if exit_code != 0:
                logger.error(
                    "Action failed",
                    extra={"package": package.name, "phase": phase, "command": rendered, "exit_code": exit_code},
                )
                return False
        return True

    def _fail(self, report: RunReport, unit: DeploymentUnit, detail: str, change: Change | None = None) -> None:
        report.units.append(UnitReport(unit, UnitOutcome.FAILED, change, detail=detail))
        logger.error("Unit failed", extra={"unit": unit.label, "detail": detail})


__all__ = [
    "ActionReport",
    "DeploymentPipeline",
    "RunReport",
    "UnitReport",
]
