"""Repository adapter - rtoml persistence for ``config.toml`` and user variables.

Contents:
    * :mod:`.store` - Load/save the repository configuration tree
    * :mod:`.uservariables` - Load/save answered prompts
"""

from __future__ import annotations

from .store import load_repository, save_repository
from .uservariables import load_user_variables, save_user_variables

__all__ = [
    "load_repository",
    "load_user_variables",
    "save_repository",
    "save_user_variables",
]
