"""CLI command implementations.

Collects all subcommand functions and re-exports them for registration
with the root CLI group.

Contents:
    * Repository commands (init, import) from :mod:`.repository`
    * Deploy, update and diff from :mod:`.sync`
    * Variable display from :mod:`.variables`
    * Settings display from :mod:`.config`
    * Metadata from :mod:`.info`
"""

from __future__ import annotations

from .config import cli_config
from .info import cli_info
from .repository import cli_import, cli_init
from .sync import cli_deploy, cli_diff, cli_update
from .variables import cli_print_vars

__all__ = [
    "cli_config",
    "cli_deploy",
    "cli_diff",
    "cli_import",
    "cli_info",
    "cli_init",
    "cli_print_vars",
    "cli_update",
]
