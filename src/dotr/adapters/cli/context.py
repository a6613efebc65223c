"""Per-invocation state shared between the root group and its subcommands.

The root command resolves global flags once (working directory, tool
settings, ``--set`` overrides, traceback preference) and stores them as a
:class:`CLIContext` on ``ctx.obj``. Subcommands read it back with
:func:`get_cli_context` and derive repository paths from it.

Contents:
    * :class:`CLIContext` - Typed state plus derived repository paths.
    * :func:`store_cli_context` / :func:`get_cli_context` - ``ctx.obj`` access.
    * :func:`load_tool_config` - Settings loading with usage-error reporting.
    * Traceback helpers mirroring ``--traceback`` into lib_cli_exit_tools.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import lib_cli_exit_tools
import rich_click as click
from lib_layered_config import Config

from dotr.adapters.config.settings import DotrSettings
from dotr.adapters.system.actions import default_shell
from dotr.application.importer import CONFIG_FILENAME

if TYPE_CHECKING:
    from dotr.composition import AppServices

TracebackState = tuple[bool, bool]
"""Captured traceback configuration: (traceback_enabled, force_color)."""


@dataclass(slots=True)
class CLIContext:
    """Resolved global options for one ``dotr`` invocation.

    Example:
        >>> from unittest.mock import MagicMock
        >>> state = CLIContext(
        ...     traceback=False, config=MagicMock(), services=MagicMock(),
        ...     settings=DotrSettings(shell="/bin/zsh"), working_dir=Path("/repo"),
        ... )
        >>> state.config_path.as_posix(), state.user_variables_path.as_posix(), state.action_shell
        ('/repo/config.toml', '/repo/.uservariables.toml', '/bin/zsh')
    """

    traceback: bool
    config: Config
    services: AppServices
    settings: DotrSettings
    working_dir: Path
    config_profile: str | None = None
    set_overrides: tuple[str, ...] = ()

    @property
    def config_path(self) -> Path:
        return self.working_dir / CONFIG_FILENAME

    @property
    def user_variables_path(self) -> Path:
        return self.working_dir / self.settings.user_variables_file

    @property
    def action_shell(self) -> str:
        """Configured shell, else ``$SHELL``, else ``/bin/sh``."""
        return default_shell(self.settings.shell)


def store_cli_context(
    ctx: click.Context,
    *,
    traceback: bool,
    config: Config,
    services: AppServices,
    settings: DotrSettings,
    working_dir: Path,
    config_profile: str | None = None,
    set_overrides: tuple[str, ...] = (),
) -> None:
    """Store CLI state in the Click context for subcommand access.

    Args:
        ctx: Click context associated with the current invocation.
        traceback: Whether verbose tracebacks were requested.
        config: Loaded layered tool settings for all subcommands.
        services: All application services from composition layer.
        settings: Parsed ``[dotr]`` section of *config*.
        working_dir: Absolute dotfiles repository root.
        config_profile: Optional lib_layered_config profile name.
        set_overrides: Raw ``--set`` override strings for reapplication when
            subcommands reload config with a different profile.

    Example:
        >>> from unittest.mock import MagicMock
        >>> from dotr.composition import build_testing
        >>> ctx = MagicMock()
        >>> ctx.obj = None
        >>> store_cli_context(
        ...     ctx, traceback=True, config=MagicMock(), services=build_testing(),
        ...     settings=DotrSettings(), working_dir=Path("/repo"),
        ... )
        >>> ctx.obj.traceback, ctx.obj.working_dir
        (True, PosixPath('/repo'))
    """
    ctx.obj = CLIContext(
        traceback=traceback,
        config=config,
        services=services,
        settings=settings,
        working_dir=working_dir,
        config_profile=config_profile,
        set_overrides=set_overrides,
    )


def get_cli_context(ctx: click.Context) -> CLIContext:
    """Retrieve typed CLI state from Click context.

    Args:
        ctx: Click context containing CLI state.

    Returns:
        CLIContext dataclass with typed access to CLI state.

    Raises:
        RuntimeError: If CLI context was not properly initialized.

    Example:
        >>> from unittest.mock import MagicMock
        >>> ctx = MagicMock()
        >>> ctx.obj = CLIContext(
        ...     traceback=False, config=MagicMock(), services=MagicMock(),
        ...     settings=DotrSettings(), working_dir=Path("."),
        ... )
        >>> get_cli_context(ctx).traceback
        False
    """
    if not isinstance(ctx.obj, CLIContext):
        raise RuntimeError("CLI context not initialized. Call store_cli_context first.")
    return ctx.obj


def load_tool_config(services: AppServices, profile: str | None) -> Config:
    """Load tool settings for *profile*, reporting unsafe profile names as usage errors."""
    try:
        return services.get_config(profile=profile)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="'--config-profile'") from exc


def apply_traceback_preferences(enabled: bool) -> None:
    """Synchronise shared traceback flags with the requested preference.

    Args:
        enabled: ``True`` enables full tracebacks with colour.

    Example:
        >>> apply_traceback_preferences(True)
        >>> bool(lib_cli_exit_tools.config.traceback)
        True
    """
    lib_cli_exit_tools.config.traceback = bool(enabled)
    lib_cli_exit_tools.config.traceback_force_color = bool(enabled)


def snapshot_traceback_state() -> TracebackState:
    """Capture the current traceback configuration for later restoration.

    Returns:
        Tuple of (traceback_enabled, force_color) booleans.

    Example:
        >>> state = snapshot_traceback_state()
        >>> isinstance(state, tuple) and len(state) == 2
        True
    """
    return (
        bool(getattr(lib_cli_exit_tools.config, "traceback", False)),
        bool(getattr(lib_cli_exit_tools.config, "traceback_force_color", False)),
    )


def restore_traceback_state(state: TracebackState) -> None:
    """Reapply a previously captured traceback configuration.

    Args:
        state: Tuple from :func:`snapshot_traceback_state`.

    Example:
        >>> original = snapshot_traceback_state()
        >>> apply_traceback_preferences(True)
        >>> restore_traceback_state(original)
        >>> lib_cli_exit_tools.config.traceback == original[0]
        True
    """
    lib_cli_exit_tools.config.traceback = state[0]
    lib_cli_exit_tools.config.traceback_force_color = state[1]


__all__ = [
    "CLIContext",
    "TracebackState",
    "apply_traceback_preferences",
    "get_cli_context",
    "load_tool_config",
    "restore_traceback_state",
    "snapshot_traceback_state",
    "store_cli_context",
]
