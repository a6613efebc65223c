"""Shell execution for package ``pre_actions`` and ``post_actions``."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

#: Shell used when neither settings nor ``$SHELL`` name one.
FALLBACK_SHELL = "/bin/sh"


def default_shell(configured: str = "") -> str:
    """Pick the shell for actions: configured value, then ``$SHELL``, then ``/bin/sh``.

    Example:
        >>> default_shell("/bin/bash")
        '/bin/bash'
    """
    return configured or os.environ.get("SHELL") or FALLBACK_SHELL


def normalize_returncode(code: int) -> int:
    """Convert negative signal return codes to POSIX 128+N convention.

    Python's ``subprocess`` reports signal-killed processes as negative values
    (e.g., -2 for SIGINT). POSIX convention is 128+N (e.g., 130 for SIGINT).

    Example:
        >>> normalize_returncode(-15)
        143
        >>> normalize_returncode(3)
        3
    """
    if code < 0:
        return 128 + abs(code)
    return code


def run_action(command: str, *, cwd: Path, shell: str) -> int:
    """Run *command* through ``<shell> -c`` inside *cwd* and return its exit status.

    Output is not captured; it goes straight to the user's terminal.

    Raises:
        OSError: When the shell cannot be started.
    """
    logger.info("Running action", extra={"command": command, "cwd": str(cwd), "shell": shell})
    result = subprocess.run([shell, "-c", command], cwd=cwd, check=False)  # noqa: S603
    return normalize_returncode(result.returncode)


__all__ = ["FALLBACK_SHELL", "default_shell", "normalize_returncode", "run_action"]
