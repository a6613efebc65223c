"""Repository bootstrap and import use cases.

Contents:
    * :func:`init_repository` - create ``config.toml``, ``dotfiles/`` and ``.gitignore``.
    * :func:`import_path` - copy an existing file or directory into the store
      and register it as a package.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..domain.errors import ImportPathError
from ..domain.models import ConfigTree, Package
from ..domain.paths import derive_package_name, normalize_home_path, resolve_path
from .ports import CopyFile, ListFiles, MakeDirectory, ReadFile, SaveRepository, WriteFile

logger = logging.getLogger(__name__)

#: Repository configuration file name.
CONFIG_FILENAME = "config.toml"
#: Directory inside the repository holding package sources.
STORE_DIRNAME = "dotfiles"


@dataclass(frozen=True, slots=True)
class InitResult:
    """Outcome of :func:`init_repository`."""

    config_path: Path
    created: bool


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Outcome of :func:`import_path`."""

    package: Package
    tree: ConfigTree
    copied: int


def init_repository(
    repo_root: Path,
    *,
    read_file: ReadFile,
    write_file: WriteFile,
    make_directory: MakeDirectory,
    save_repository: SaveRepository,
    user_variables_file: str = ".uservariables.toml",
) -> InitResult:
    """Create a fresh dotfiles repository layout under *repo_root*.

    An existing ``config.toml`` is left untouched and nothing else is
    written, so running ``init`` twice is harmless.
    """
    config_path = repo_root / CONFIG_FILENAME
    if read_file(config_path) is not None:
        logger.info("Repository already initialised", extra={"config": str(config_path)})
        return InitResult(config_path, created=False)

    save_repository(repo_root, ConfigTree(banner=True))
    make_directory(repo_root / STORE_DIRNAME)

    gitignore = repo_root / ".gitignore"
    existing = (read_file(gitignore) or b"").decode("utf-8")
    if user_variables_file not in existing.splitlines():
        prefix = existing if not existing or existing.endswith("\n") else existing + "\n"
        write_file(gitignore, f"{prefix}{user_variables_file}\n".encode())

    logger.info("Repository initialised", extra={"config": str(config_path)})
    return InitResult(config_path, created=True)


def import_path(
    config: ConfigTree,
    raw_path: str,
    *,
    repo_root: Path,
    list_files: ListFiles,
    read_file: ReadFile,
    copy_file: CopyFile,
    save_repository: SaveRepository,
    profile: str | None = None,
    name: str | None = None,
    backup_suffix: str = ".dotrbak",
    home: Path | None = None,
) -> ImportResult:
    """Copy *raw_path* into the store and register it as a package.

    The package name is derived from the path unless *name* is given. With a
    *profile*, the package is marked ``skip`` and added to that profile's
    dependencies (creating the profile if needed). The updated tree is
    written back through *save_repository*.

    Raises:
        ImportPathError: When the path is missing or unreadable, when the
            package name is taken, and when copying into the store fails.
    """
    source = resolve_path(raw_path, repo_root, home=home)
    files = list_files(source)
    is_dir = files is not None
    try:
        exists = is_dir or read_file(source) is not None
    except OSError as exc:
        raise ImportPathError(f"Path '{source}' cannot be read: {exc}") from exc
    if not exists:
        raise ImportPathError(f"Path '{source}' does not exist")

    package_name = name or derive_package_name(source, is_dir=is_dir)
    if package_name in config.packages:
        raise ImportPathError(f"Package '{package_name}' already exists; pass --name to import under another name")

    store_relative = f"{STORE_DIRNAME}/{package_name}"
    store_path = repo_root / store_relative
    copied = 0
    try:
        if files is None:
            copy_file(source, store_path)
            copied = 1
        else:
            for rel in files:
                if rel.name.endswith(backup_suffix):
                    continue
                copy_file(source / rel, store_path / rel)
                copied += 1
    except OSError as exc:
        raise ImportPathError(f"Could not copy '{source}' into the store: {exc}") from exc

    dest = raw_path if raw_path.startswith("~") else normalize_home_path(source, home=home)
    package = Package(name=package_name, src=store_relative, dest=dest, skip=profile is not None)
    tree = config.with_package(package, profile=profile)
    save_repository(repo_root, tree)
    logger.info(
        "Imported package",
        extra={"package": package_name, "dest": dest, "files": copied, "profile": profile},
    )
    return ImportResult(package, tree, copied)


__all__ = [
    "CONFIG_FILENAME",
    "STORE_DIRNAME",
    "ImportResult",
    "InitResult",
    "import_path",
    "init_repository",
]
