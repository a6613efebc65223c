"""Process-level entry for the ``dotr`` command.

Runs the Click group with the services factory as ``ctx.obj``, turns every
escaping exception into an exit code through ``lib_cli_exit_tools``, and
shuts logging down once the command is over.

Contents:
    * :func:`main` - Run one ``dotr`` invocation and return its exit code.
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import click
import lib_cli_exit_tools
import lib_log_rich.runtime

from dotr import __init__conf__

from .constants import TRACEBACK_SUMMARY_LIMIT, TRACEBACK_VERBOSE_LIMIT
from .context import (
    apply_traceback_preferences,
    restore_traceback_state,
    snapshot_traceback_state,
)
from .exit_codes import ExitCode

if TYPE_CHECKING:
    from dotr.composition import AppServices


def _report_unexpected(exc: BaseException) -> int:
    """Print *exc* the way lib_cli_exit_tools formats it and return its exit code."""
    tracebacks_enabled = bool(getattr(lib_cli_exit_tools.config, "traceback", False))
    apply_traceback_preferences(tracebacks_enabled)
    length_limit = TRACEBACK_VERBOSE_LIMIT if tracebacks_enabled else TRACEBACK_SUMMARY_LIMIT
    lib_cli_exit_tools.print_exception_message(trace_back=tracebacks_enabled, length_limit=length_limit)
    return lib_cli_exit_tools.get_system_exit_code(exc)


def _run_cli(argv: Sequence[str] | None, *, services_factory: Callable[[], AppServices]) -> int:
    from .root import cli

    # lib_cli_exit_tools.run_cli cannot pass ctx.obj, so Click is driven directly.
    args = list(argv) if argv is not None else sys.argv[1:]
    try:
        cli.main(
            args=args,
            prog_name=__init__conf__.shell_command,
            obj=services_factory,
            standalone_mode=False,
        )
    except click.exceptions.Exit as exc:
        return exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except SystemExit as exc:
        # Commands print their own error line before raising SystemExit(ExitCode.X).
        return lib_cli_exit_tools.get_system_exit_code(exc)
    except BrokenPipeError:
        # ``dotr diff | head`` closed the pipe; nothing left to report to.
        return ExitCode.BROKEN_PIPE
    except BaseException as exc:  # noqa: BLE001 - every exit path goes through lib_cli_exit_tools
        return _report_unexpected(exc)
    return ExitCode.SUCCESS


def main(
    argv: Sequence[str] | None = None,
    *,
    restore_traceback: bool = True,
    services_factory: Callable[[], AppServices] | None = None,
) -> int:
    """Run one ``dotr`` invocation and return its exit code.

    Commands signal failures with ``SystemExit(ExitCode.X)``; those and any
    unexpected exception are converted here, so the console script and
    ``python -m dotr`` behave the same.

    Args:
        argv: Arguments without the program name. ``None`` reads ``sys.argv``.
        restore_traceback: Put the traceback flags back the way they were
            before the run.
        services_factory: Returns the :class:`~dotr.composition.AppServices`
            for this run; ``build_production`` outside tests.

    Raises:
        ValueError: If services_factory is not provided.

    Example:
        >>> from dotr.composition import build_testing
        >>> main(["--version"], services_factory=build_testing)  # doctest: +SKIP
        0
    """
    if services_factory is None:
        raise ValueError("services_factory is required. Pass build_production from composition layer.")

    previous_state = snapshot_traceback_state()
    try:
        return _run_cli(argv, services_factory=services_factory)
    finally:
        if restore_traceback:
            restore_traceback_state(previous_state)
        # Logging is process-wide; worker threads must not shut it down.
        if threading.current_thread() is threading.main_thread() and lib_log_rich.runtime.is_initialised():
            lib_log_rich.runtime.shutdown()


__all__ = ["main"]
