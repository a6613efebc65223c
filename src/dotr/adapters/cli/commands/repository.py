"""Repository bootstrap and import commands.

Contents:
    * :func:`cli_init` - Create ``config.toml``, ``dotfiles/`` and ``.gitignore``.
    * :func:`cli_import` - Copy a file or directory into the store as a package.
"""

from __future__ import annotations

import logging

import lib_log_rich.runtime
import rich_click as click

from dotr.application.importer import import_path, init_repository

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context
from ._shared import domain_errors, load_tree

logger = logging.getLogger(__name__)


@click.command("init", context_settings=CLICK_CONTEXT_SETTINGS)
@click.pass_context
def cli_init(ctx: click.Context) -> None:
    """Initialise a dotfiles repository in the working directory.

    Running it again on an initialised repository changes nothing.
    """
    cli_ctx = get_cli_context(ctx)
    services = cli_ctx.services
    extra = {"command": "init", "working_dir": str(cli_ctx.working_dir)}
    with lib_log_rich.runtime.bind(job_id="cli-init", extra=extra):
        logger.info("Initialising repository")
        with domain_errors():
            result = init_repository(
                cli_ctx.working_dir,
                read_file=services.read_file,
                write_file=services.write_file,
                make_directory=services.make_directory,
                save_repository=services.save_repository,
                user_variables_file=cli_ctx.settings.user_variables_file,
            )
        if result.created:
            click.echo(f"Initialised dotfiles repository: {result.config_path}")
        else:
            click.echo(f"Already initialised: {result.config_path}")


@click.command("import", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("path", type=str)
@click.option(
    "--profile",
    type=str,
    default=None,
    help="Add the package to this profile's dependencies and mark it skip",
)
@click.option(
    "--name",
    type=str,
    default=None,
    help="Package name to use instead of the one derived from PATH",
)
@click.pass_context
def cli_import(ctx: click.Context, path: str, profile: str | None, name: str | None) -> None:
    r"""Import a dotfile or directory into the repository.

    \b
    The file is copied to dotfiles/<name> and registered in config.toml with
    its current location as destination, e.g.:
        dotr import ~/.bashrc            -> package f_bashrc
        dotr import ~/.config/nvim       -> package d_nvim
    """
    cli_ctx = get_cli_context(ctx)
    services = cli_ctx.services
    extra = {"command": "import", "path": path, "profile": profile, "name": name}
    with lib_log_rich.runtime.bind(job_id="cli-import", extra=extra):
        logger.info("Importing path", extra={"path": path, "profile": profile})
        with domain_errors():
            tree = load_tree(cli_ctx)
            result = import_path(
                tree,
                path,
                repo_root=cli_ctx.working_dir,
                list_files=services.list_files,
                read_file=services.read_file,
                copy_file=services.copy_file,
                save_repository=services.save_repository,
                profile=profile,
                name=name,
                backup_suffix=cli_ctx.settings.backup_suffix,
            )
        package = result.package
        click.echo(f"Imported '{package.name}' ({result.copied} file(s)): {package.src} -> {package.dest}")
        if profile:
            click.echo(f"Added to profile '{profile}' dependencies (skip = true)")


__all__ = ["cli_import", "cli_init"]
