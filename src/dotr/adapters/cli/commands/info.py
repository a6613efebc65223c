"""Installation and environment summary.

Contents:
    * :func:`cli_info` - Print package metadata plus the settings dotr would use here.
"""

from __future__ import annotations

import logging

import lib_log_rich.runtime
import rich_click as click

from dotr import __init__conf__

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context

logger = logging.getLogger(__name__)


@click.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
@click.pass_context
def cli_info(ctx: click.Context) -> None:
    """Print package metadata and where this invocation would read and write.

    Example:
        >>> from click.testing import CliRunner
        >>> from dotr.adapters.cli.root import cli
        >>> from dotr.composition import build_testing
        >>> CliRunner().invoke(cli, ["info"], obj=build_testing).exit_code
        0
    """
    cli_ctx = get_cli_context(ctx)
    with lib_log_rich.runtime.bind(job_id="cli-info", extra={"command": "info"}):
        logger.info("Displaying package information", extra={"working_dir": str(cli_ctx.working_dir)})
        __init__conf__.print_info()
        click.echo("")
        click.echo(f"    repository    = {cli_ctx.working_dir}")
        click.echo(f"    config.toml   = {'found' if cli_ctx.config_path.is_file() else 'missing'}")
        click.echo(f"    action shell  = {cli_ctx.action_shell}")
        click.echo(f"    backup suffix = {cli_ctx.settings.backup_suffix}")


__all__ = ["cli_info"]
