"""System adapter - shell actions and terminal prompts.

Contents:
    * :mod:`.actions` - ``$SHELL -c`` runner for pre/post actions
    * :mod:`.prompt` - Console line reader
"""

from __future__ import annotations

from .actions import default_shell, normalize_returncode, run_action
from .prompt import read_line

__all__ = ["default_shell", "normalize_returncode", "read_line", "run_action"]
