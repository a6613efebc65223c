"""Shared helpers for CLI command modules.

Internal module (underscore prefix) providing common patterns used across
multiple command implementations.

Contents:
    * :func:`exit_code_for` - Map a domain error to its POSIX exit code.
    * :func:`domain_errors` - Report domain errors and exit with that code.
    * :func:`load_tree` - Read ``config.toml`` and print the banner.
    * :func:`prompt_store` - Prompt store bound to the repository.
    * :func:`active_profile` - Resolve the dotfiles profile for this run.
    * :func:`run_direction` - Resolve, prompt and run deploy/update/diff.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

import rich_click as click

from dotr.application.pipeline import DeploymentPipeline, RunReport
from dotr.application.prompts import PromptStore, gather_prompts
from dotr.application.resolver import resolve_units, select_packages
from dotr.domain.enums import Direction
from dotr.domain.errors import (
    ConfigurationError,
    DotrError,
    ImportPathError,
    PromptAbortedError,
    UnknownPackageError,
    UnknownProfileError,
)
from dotr.domain.models import ConfigTree, Profile
from dotr.domain.variables import select_profile_name

from ..constants import BANNER
from ..context import CLIContext
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)

_EXIT_CODES: dict[type[DotrError], ExitCode] = {
    UnknownPackageError: ExitCode.INVALID_ARGUMENT,
    UnknownProfileError: ExitCode.INVALID_ARGUMENT,
    ImportPathError: ExitCode.INVALID_ARGUMENT,
    ConfigurationError: ExitCode.CONFIG_ERROR,
    PromptAbortedError: ExitCode.NO_INPUT,
}


def exit_code_for(exc: DotrError) -> ExitCode:
    """Return the exit code for *exc*, falling back to ``GENERAL_ERROR``.

    Example:
        >>> exit_code_for(UnknownPackageError("vim"))
        <ExitCode.INVALID_ARGUMENT: 22>
        >>> exit_code_for(DotrError("boom"))
        <ExitCode.GENERAL_ERROR: 1>
    """
    for error_type, code in _EXIT_CODES.items():
        if isinstance(exc, error_type):
            return code
    return ExitCode.GENERAL_ERROR


@contextmanager
def domain_errors() -> Iterator[None]:
    """Turn fatal domain errors into an error line and a ``SystemExit``."""
    try:
        yield
    except DotrError as exc:
        code = exit_code_for(exc)
        logger.error("Command aborted", extra={"error": str(exc), "error_type": type(exc).__name__})
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(code) from exc


def load_tree(cli_ctx: CLIContext, *, banner: bool = True) -> ConfigTree:
    """Load the repository configuration, printing the banner when enabled."""
    tree = cli_ctx.services.load_repository(cli_ctx.working_dir)
    if banner and tree.banner:
        click.echo(BANNER)
    return tree


def prompt_store(cli_ctx: CLIContext) -> PromptStore:
    services = cli_ctx.services
    return PromptStore(
        path=cli_ctx.user_variables_path,
        load_variables=services.load_user_variables,
        save_variables=services.save_user_variables,
        read_line=services.read_line,
    )


def active_profile(
    tree: ConfigTree,
    explicit: str | None,
    user_variables: dict[str, Any],
) -> Profile | None:
    """Return the profile chosen by ``--profile`` or ``DOTR_PROFILE``."""
    name = select_profile_name(explicit, config=tree, user_variables=user_variables, environ=os.environ)
    return tree.profile(name) if name is not None else None


def run_direction(
    cli_ctx: CLIContext,
    direction: Direction,
    packages: Sequence[str],
    profile: str | None,
) -> RunReport:
    """Run one pipeline direction against the repository.

    Resolution errors surface before any prompt or file I/O. Prompts are
    answered next, then units are expanded and processed.
    """
    services = cli_ctx.services
    settings = cli_ctx.settings
    repo_root = cli_ctx.working_dir
    requested = list(packages) or None

    tree = load_tree(cli_ctx)
    store = prompt_store(cli_ctx)
    stored = store.load()
    profile_obj = active_profile(tree, profile, stored)
    selected = select_packages(tree, requested, profile_obj)

    user_variables = store.ensure(gather_prompts(tree, selected, profile_obj))
    units = resolve_units(
        tree,
        requested,
        profile_obj,
        repo_root=repo_root,
        list_files=services.list_files,
        read_file=services.read_file,
        detect_template=services.detect_template,
        backup_suffix=settings.backup_suffix,
        include_destination=direction is Direction.UPDATE,
    )
    pipeline = DeploymentPipeline(
        repo_root=repo_root,
        read_file=services.read_file,
        write_file=services.write_file,
        copy_file=services.copy_file,
        detect_template=services.detect_template,
        render_template=services.render_template,
        run_action=services.run_action,
        shell=cli_ctx.action_shell,
        backup_suffix=settings.backup_suffix,
        context_lines=settings.diff_context_lines,
        environ=dict(os.environ),
    )
    return pipeline.run(direction, tree, units, profile=profile_obj, user_variables=user_variables)


__all__ = [
    "active_profile",
    "domain_errors",
    "exit_code_for",
    "load_tree",
    "prompt_store",
    "run_direction",
]
