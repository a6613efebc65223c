"""Deploy, update and diff commands.

Contents:
    * :func:`cli_deploy` - Write stored packages to their destinations.
    * :func:`cli_update` - Copy edited destinations back into the store.
    * :func:`cli_diff` - Preview what ``deploy`` would change.
"""

from __future__ import annotations

import logging
from pathlib import Path

import lib_log_rich.runtime
import rich_click as click

from dotr.application.pipeline import ActionReport, RunReport, UnitReport
from dotr.domain.diffing import format_unified
from dotr.domain.enums import Direction, UnitOutcome

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context
from ..exit_codes import ExitCode
from ._shared import domain_errors, run_direction

logger = logging.getLogger(__name__)

_packages_option = click.option(
    "-p",
    "--packages",
    "packages",
    multiple=True,
    metavar="NAME",
    help="Only process this package (repeatable). Defaults to every package without skip.",
)
_profile_option = click.option(
    "--profile",
    type=str,
    default=None,
    help="Dotfiles profile to activate (falls back to DOTR_PROFILE)",
)

_DIFF_STYLES = {"+": "green", "-": "red", "@": "cyan"}


def _display(path: Path, repo_root: Path) -> str:
    """Show repository paths relative to the root, everything else as is."""
    try:
        return path.relative_to(repo_root).as_posix()
    except ValueError:
        return str(path)


def _echo_failure(unit: UnitReport) -> None:
    click.secho(f"  x {unit.unit.label}: {unit.detail}", fg="red", err=True)


def _echo_action_failure(action: ActionReport) -> None:
    reason = action.detail if action.detail else f"exited with {action.exit_code}"
    click.secho(f"  x {action.package} {action.phase}_action '{action.command}': {reason}", fg="red", err=True)


def _echo_summary(report: RunReport) -> None:
    counts = ", ".join(
        f"{report.count(outcome)} {outcome.value}"
        for outcome in (UnitOutcome.WRITTEN, UnitOutcome.UNCHANGED, UnitOutcome.SKIPPED, UnitOutcome.FAILED)
    )
    click.echo(f"\n{report.direction.value.capitalize()}: {counts}")


def _echo_deploy(report: RunReport, _repo_root: Path) -> None:
    for unit in report.units:
        if unit.outcome is UnitOutcome.WRITTEN:
            backup = f" (backup: {unit.backup_path})" if unit.backup_path else ""
            click.echo(f"  + {unit.unit.label} -> {unit.unit.dest_path}{backup}")
        elif unit.outcome is UnitOutcome.FAILED:
            _echo_failure(unit)


def _echo_update(report: RunReport, _repo_root: Path) -> None:
    for unit in report.units:
        if unit.outcome is UnitOutcome.WRITTEN:
            click.echo(f"  + {unit.unit.label} <- {unit.unit.dest_path}")
        elif unit.outcome is UnitOutcome.SKIPPED:
            click.echo(f"  - {unit.unit.label}: {unit.detail}")
        elif unit.outcome is UnitOutcome.FAILED:
            _echo_failure(unit)


def _echo_diff(report: RunReport, repo_root: Path) -> None:
    for unit in report.units:
        if unit.outcome is UnitOutcome.FAILED:
            _echo_failure(unit)
            continue
        if unit.change is None or unit.outcome is UnitOutcome.UNCHANGED:
            continue
        text = format_unified(
            unit.change,
            dest_label=str(unit.unit.dest_path),
            source_label=_display(unit.unit.source_path, repo_root),
        )
        for line in text.splitlines():
            click.secho(line, fg=_DIFF_STYLES.get(line[:1]) if not line.startswith(("---", "+++")) else None)
        click.echo()
    pending = report.count(UnitOutcome.PENDING)
    click.echo(f"{pending} file(s) would change" if pending else "No changes")


def _run(ctx: click.Context, direction: Direction, packages: tuple[str, ...], profile: str | None) -> None:
    cli_ctx = get_cli_context(ctx)
    extra = {"command": direction.value, "packages": list(packages), "profile": profile}
    with lib_log_rich.runtime.bind(job_id=f"cli-{direction.value}", extra=extra):
        logger.info("Running %s", direction.value, extra={"packages": list(packages), "profile": profile})
        with domain_errors():
            report = run_direction(cli_ctx, direction, packages, profile)
        printers = {
            Direction.DEPLOY: _echo_deploy,
            Direction.UPDATE: _echo_update,
            Direction.DIFF: _echo_diff,
        }
        printers[direction](report, cli_ctx.working_dir)
        for action in report.failed_actions:
            _echo_action_failure(action)
        if direction is not Direction.DIFF:
            _echo_summary(report)
        if not report.ok:
            raise SystemExit(ExitCode.UNIT_FAILURE)


@click.command("deploy", context_settings=CLICK_CONTEXT_SETTINGS)
@_packages_option
@_profile_option
@click.pass_context
def cli_deploy(ctx: click.Context, packages: tuple[str, ...], profile: str | None) -> None:
    """Deploy dotfiles from the repository to their destinations.

    Only files whose rendered content differs from the destination are
    written; the previous destination is kept as ``<file>.dotrbak``.
    """
    _run(ctx, Direction.DEPLOY, packages, profile)


@click.command("update", context_settings=CLICK_CONTEXT_SETTINGS)
@_packages_option
@_profile_option
@click.pass_context
def cli_update(ctx: click.Context, packages: tuple[str, ...], profile: str | None) -> None:
    """Copy edited destination files back into the repository.

    Templated sources are never overwritten.
    """
    _run(ctx, Direction.UPDATE, packages, profile)


@click.command("diff", context_settings=CLICK_CONTEXT_SETTINGS)
@_packages_option
@_profile_option
@click.pass_context
def cli_diff(ctx: click.Context, packages: tuple[str, ...], profile: str | None) -> None:
    """Show what ``deploy`` would change without touching any file."""
    _run(ctx, Direction.DIFF, packages, profile)


__all__ = ["cli_deploy", "cli_diff", "cli_update"]
