"""Resolved variable display (``print-vars``)."""

from __future__ import annotations

import logging
import os

import lib_log_rich.runtime
import orjson
import rich_click as click

from dotr.application.inspect import collect_variables, format_variable_tree
from dotr.domain.enums import OutputFormat

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context
from ._shared import active_profile, domain_errors, load_tree, prompt_store

logger = logging.getLogger(__name__)


@click.command("print-vars", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--profile",
    type=str,
    default=None,
    help="Dotfiles profile to activate (falls back to DOTR_PROFILE)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
    default=OutputFormat.HUMAN.value,
    help="Output format (human-readable tree or JSON)",
)
@click.option(
    "--no-env",
    "no_env",
    is_flag=True,
    default=False,
    help="Leave process environment variables out",
)
@click.pass_context
def cli_print_vars(ctx: click.Context, profile: str | None, output_format: str, no_env: bool) -> None:
    """Print the variables templates see: globals, profile and user answers.

    Package variables are only merged while that package is processed and
    are therefore not shown.
    """
    cli_ctx = get_cli_context(ctx)
    fmt = OutputFormat(output_format.lower())
    extra = {"command": "print-vars", "profile": profile, "format": fmt.value}
    with lib_log_rich.runtime.bind(job_id="cli-print-vars", extra=extra):
        logger.info("Printing variables", extra={"profile": profile, "no_env": no_env})
        with domain_errors():
            tree = load_tree(cli_ctx, banner=fmt is OutputFormat.HUMAN)
            user_variables = prompt_store(cli_ctx).load()
            profile_obj = active_profile(tree, profile, user_variables)
        variables = collect_variables(
            tree,
            profile=profile_obj,
            user_variables=user_variables,
            environ=os.environ,
            include_environment=not no_env,
        )
        if fmt is OutputFormat.JSON:
            click.echo(orjson.dumps(variables.as_dict(), option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS).decode())
        else:
            click.echo(format_variable_tree(variables))


__all__ = ["cli_print_vars"]
