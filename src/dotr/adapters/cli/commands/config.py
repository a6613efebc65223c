"""Tool settings display command.

Contents:
    * :func:`cli_config` - Display merged tool settings.
"""

from __future__ import annotations

import logging

import lib_log_rich.runtime
import rich_click as click
from lib_layered_config import Config

from dotr.adapters.config.overrides import apply_overrides
from dotr.domain.enums import OutputFormat

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import CLIContext, get_cli_context, load_tool_config
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)


@click.command("config", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
    default=OutputFormat.HUMAN.value,
    help="Output format (human-readable or JSON)",
)
@click.option(
    "--section",
    type=str,
    default=None,
    help="Show only a specific settings section (e.g., 'dotr' or 'lib_log_rich')",
)
@click.option(
    "--config-profile",
    type=str,
    default=None,
    help="Override the settings profile from the root command",
)
@click.pass_context
def cli_config(ctx: click.Context, output_format: str, section: str | None, config_profile: str | None) -> None:
    """Display dotr's merged tool settings from all sources.

    Shows settings loaded from defaults, application/user config files,
    .env files, and environment variables. The dotfiles repository's own
    ``config.toml`` is not part of these layers.

    Precedence: defaults -> app -> host -> user -> dotenv -> env -> --set
    """
    cli_ctx = get_cli_context(ctx)
    effective_config, effective_profile = _resolve_config(cli_ctx, config_profile)
    fmt = OutputFormat(output_format.lower())

    extra = {"command": "config", "format": fmt.value, "profile": effective_profile}
    with lib_log_rich.runtime.bind(job_id="cli-config", extra=extra):
        logger.info(
            "Displaying configuration",
            extra={"format": fmt.value, "section": section, "profile": effective_profile},
        )
        click.echo()
        try:
            cli_ctx.services.display_config(
                effective_config, output_format=fmt, section=section, profile=effective_profile
            )
        except ValueError as exc:
            click.echo(f"\nError: {exc}", err=True)
            raise SystemExit(ExitCode.INVALID_ARGUMENT) from exc


def _resolve_config(cli_ctx: CLIContext, profile: str | None) -> tuple[Config, str | None]:
    """Resolve settings from context or reload with a profile override.

    When a subcommand-level profile override is specified, reloads settings
    with that profile and reapplies any root-level ``--set`` overrides
    stored in the CLI context.

    Args:
        cli_ctx: CLI context containing stored settings and services.
        profile: Optional profile override.

    Returns:
        Tuple of (config, effective_profile).
    """
    if profile:
        config = load_tool_config(cli_ctx.services, profile)
        return apply_overrides(config, cli_ctx.set_overrides), profile
    return cli_ctx.config, cli_ctx.config_profile


__all__ = ["cli_config"]
