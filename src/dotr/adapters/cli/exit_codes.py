"""POSIX-conventional exit codes for CLI error paths.

Provides a single :class:`ExitCode` enum so every ``SystemExit`` raised by a
CLI command carries a meaningful, grep-friendly integer instead of a bare ``1``.

Signal codes 130 and 143 are informational; lib_cli_exit_tools translates
those signals itself. 141 is returned when stdout is closed early, as in
``dotr diff | head``.

Contents:
    * :class:`ExitCode` - IntEnum of all exit codes used by this application.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """POSIX-conventional exit codes for CLI error paths.

    Values follow sysexits.h and errno conventions where applicable:

    * 0-1: generic success / failure
    * 3: at least one deployment unit or action failed
    * 13: EACCES
    * 22: EINVAL (unknown package/profile, bad import path)
    * 66: EX_NOINPUT (prompt input ended before an answer)
    * 78: EX_CONFIG (sysexits.h)
    * 128+N: signal N (informational only)

    Example:
        >>> ExitCode.SUCCESS
        <ExitCode.SUCCESS: 0>
        >>> int(ExitCode.NO_INPUT)
        66
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    UNIT_FAILURE = 3
    PERMISSION_DENIED = 13
    INVALID_ARGUMENT = 22
    NO_INPUT = 66
    CONFIG_ERROR = 78
    SIGNAL_INT = 130
    BROKEN_PIPE = 141
    SIGNAL_TERM = 143


__all__ = ["ExitCode"]
