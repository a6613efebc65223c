"""Root CLI command group and global option handling.

Defines the top-level Click command group that serves as the entry point for
all subcommands. Handles global flags like --traceback, --working-dir,
--config-profile and --set.

Contents:
    * :func:`cli` - Root command group with global options.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import rich_click as click
from lib_layered_config import Config

from dotr import __init__conf__
from dotr.adapters.config.overrides import apply_overrides
from dotr.adapters.config.settings import DotrSettings, load_settings
from dotr.domain.errors import ConfigurationError

from .constants import CLICK_CONTEXT_SETTINGS
from .context import apply_traceback_preferences, load_tool_config, store_cli_context
from .exit_codes import ExitCode

if TYPE_CHECKING:
    from dotr.composition import AppServices


def _apply_cli_overrides(config: Config, set_overrides: tuple[str, ...]) -> Config:
    """Apply ``--set`` overrides to a Config, raising UsageError on failure.

    Args:
        config: Base settings loaded from file/env layers.
        set_overrides: Raw ``SECTION.KEY=VALUE`` strings from the CLI.

    Returns:
        New Config with overrides applied, or original if none given.

    Raises:
        click.UsageError: If any override string is malformed or targets
            a non-dict section/intermediate.
    """
    try:
        return apply_overrides(config, set_overrides)
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc


def _parse_settings(config: Config) -> DotrSettings:
    try:
        return load_settings(config)
    except ConfigurationError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(ExitCode.CONFIG_ERROR) from exc


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.option(
    "-w",
    "--working-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Dotfiles repository root (defaults to the current directory)",
)
@click.option(
    "--config-profile",
    type=str,
    default=None,
    help="Load tool settings from a named lib_layered_config profile (unrelated to dotfiles profiles)",
)
@click.option(
    "--set",
    "set_overrides",
    multiple=True,
    default=(),
    metavar="SECTION.KEY=VALUE",
    help="Override a tool setting (repeatable), e.g. dotr.backup_suffix=.bak",
)
@click.pass_context
def cli(
    ctx: click.Context,
    traceback: bool,
    working_dir: Path | None,
    config_profile: str | None,
    set_overrides: tuple[str, ...],
) -> None:
    """Root command storing global flags and syncing shared traceback state.

    Loads tool settings once with the profile, applies any ``--set`` overrides,
    and stores them in the Click context for all subcommands to access. Mirrors
    the traceback flag into ``lib_cli_exit_tools.config`` so downstream helpers
    observe the preference.

    Example:
        >>> from click.testing import CliRunner
        >>> from dotr.composition import build_testing
        >>> runner = CliRunner()
        >>> result = runner.invoke(cli, ["info"], obj=build_testing)
        >>> result.exit_code
        0
    """
    # ctx.obj is always the services factory (production or test)
    if not callable(ctx.obj):
        raise RuntimeError("Services factory not provided. This is a bug.")
    services: AppServices = ctx.obj()  # type: ignore[assignment]  # Click's obj is typed as Any
    config = load_tool_config(services, config_profile)
    config = _apply_cli_overrides(config, set_overrides)
    services.init_logging(config)
    store_cli_context(
        ctx,
        traceback=traceback,
        config=config,
        services=services,
        settings=_parse_settings(config),
        working_dir=(working_dir or Path.cwd()).resolve(),
        config_profile=config_profile,
        set_overrides=set_overrides,
    )
    apply_traceback_preferences(traceback)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Deferred import required to break a circular dependency: this module defines
# the ``cli`` group, commands register themselves onto it, and those command
# modules import from package ancestors. This is the standard Click pattern.
def _register_commands() -> None:
    from .commands import (
        cli_config,
        cli_deploy,
        cli_diff,
        cli_import,
        cli_info,
        cli_init,
        cli_print_vars,
        cli_update,
    )

    for cmd in (
        cli_init,
        cli_import,
        cli_deploy,
        cli_update,
        cli_diff,
        cli_print_vars,
        cli_config,
        cli_info,
    ):
        cli.add_command(cmd)


_register_commands()


__all__ = ["cli"]
