"""Repository bootstrap and importing existing dotfiles."""

from __future__ import annotations

from pathlib import Path

import pytest

from dotr.adapters.filesystem import copy_file, list_files, make_directory, read_file, write_file
from dotr.adapters.repository import load_repository, save_repository
from dotr.application.importer import ImportResult, import_path, init_repository
from dotr.domain.errors import ImportPathError
from dotr.domain.models import ConfigTree


def _init(repo: Path) -> bool:
    return init_repository(
        repo,
        read_file=read_file,
        write_file=write_file,
        make_directory=make_directory,
        save_repository=save_repository,
    ).created


def _import(repo: Path, home: Path, raw: str, *, profile: str | None = None, name: str | None = None) -> ImportResult:
    return import_path(
        load_repository(repo),
        raw,
        repo_root=repo,
        list_files=list_files,
        read_file=read_file,
        copy_file=copy_file,
        save_repository=save_repository,
        profile=profile,
        name=name,
        home=home,
    )


# ======================== init ========================


@pytest.mark.os_agnostic
def test_init_creates_layout(repo: Path) -> None:
    """config.toml, dotfiles/ and a .gitignore entry appear."""
    assert _init(repo) is True

    assert load_repository(repo).banner is True
    assert (repo / "dotfiles").is_dir()
    assert (repo / ".gitignore").read_text() == ".uservariables.toml\n"


@pytest.mark.os_agnostic
def test_init_is_idempotent(repo: Path) -> None:
    """A second init leaves an edited config alone."""
    _init(repo)
    (repo / "config.toml").write_text('[packages.vim]\nsrc = "a"\ndest = "b"\n')

    assert _init(repo) is False
    assert "vim" in load_repository(repo).packages


@pytest.mark.os_agnostic
def test_init_appends_to_existing_gitignore(repo: Path) -> None:
    """An existing .gitignore keeps its lines and gains the user-variables file."""
    (repo / ".gitignore").write_text("*.swp")

    _init(repo)

    assert (repo / ".gitignore").read_text() == "*.swp\n.uservariables.toml\n"


# ======================== import ========================


@pytest.mark.os_agnostic
def test_import_file_copies_and_registers(repo: Path, home: Path) -> None:
    """A single file becomes an f_ package with a ~ destination."""
    _init(repo)
    (home / ".bashrc").write_text("alias ll='ls -l'\n")

    result = _import(repo, home, "~/.bashrc")

    assert result.package.name == "f_bashrc"
    assert result.copied == 1
    assert (repo / "dotfiles" / "f_bashrc").read_text() == "alias ll='ls -l'\n"
    package = load_repository(repo).package("f_bashrc")
    assert (package.src, package.dest, package.skip) == ("dotfiles/f_bashrc", "~/.bashrc", False)


@pytest.mark.os_agnostic
def test_import_directory_copies_every_file(repo: Path, home: Path) -> None:
    """A directory becomes a d_ package holding all files except backups."""
    _init(repo)
    nvim = home / ".config" / "nvim"
    (nvim / "lua").mkdir(parents=True)
    (nvim / "init.lua").write_text("-- init\n")
    (nvim / "lua" / "plugins.lua").write_text("return {}\n")
    (nvim / "init.lua.dotrbak").write_text("-- old\n")

    result = _import(repo, home, str(nvim))

    assert result.package.name == "d_nvim"
    assert result.package.dest == "~/.config/nvim"
    assert result.copied == 2
    assert (repo / "dotfiles" / "d_nvim" / "lua" / "plugins.lua").exists()


@pytest.mark.os_agnostic
def test_import_with_profile_marks_skip_and_adds_dependency(repo: Path, home: Path) -> None:
    """Profile imports are skip = true and listed under the profile."""
    _init(repo)
    (home / ".ssh").mkdir()
    (home / ".ssh" / "config").write_text("Host *\n")

    _import(repo, home, "~/.ssh/config", profile="work")

    tree = load_repository(repo)
    assert tree.package("f_config").skip is True
    assert tree.profile("work").dependencies == ("f_config",)


@pytest.mark.os_agnostic
def test_import_with_explicit_name(repo: Path, home: Path) -> None:
    """--name overrides the derived package name."""
    _init(repo)
    (home / ".ssh").mkdir()
    (home / ".ssh" / "config").write_text("Host *\n")

    result = _import(repo, home, "~/.ssh/config", name="ssh")

    assert result.package.src == "dotfiles/ssh"
    assert (repo / "dotfiles" / "ssh").exists()


@pytest.mark.os_agnostic
def test_import_refuses_existing_package_name(repo: Path, home: Path) -> None:
    """A taken name is an error and the store stays as it was."""
    _init(repo)
    (home / ".bashrc").write_text("a\n")
    _import(repo, home, "~/.bashrc")
    (home / ".bashrc").write_text("b\n")

    with pytest.raises(ImportPathError, match="f_bashrc"):
        _import(repo, home, "~/.bashrc")

    assert (repo / "dotfiles" / "f_bashrc").read_text() == "a\n"


@pytest.mark.os_agnostic
def test_import_of_missing_path_fails(repo: Path, home: Path) -> None:
    """Nothing at the path raises ImportPathError."""
    _init(repo)

    with pytest.raises(ImportPathError, match="does not exist"):
        _import(repo, home, "~/.nothing")


@pytest.mark.os_agnostic
def test_import_copy_failure_becomes_import_error(repo: Path, home: Path) -> None:
    """An OSError while copying into the store is reported as a bad import path."""
    _init(repo)
    (home / ".vimrc").write_text("set nu\n")

    def _refuse(source: Path, target: Path) -> None:
        raise PermissionError(13, "Permission denied", str(target))

    with pytest.raises(ImportPathError, match="Could not copy") as excinfo:
        import_path(
            load_repository(repo),
            "~/.vimrc",
            repo_root=repo,
            list_files=list_files,
            read_file=read_file,
            copy_file=_refuse,
            save_repository=save_repository,
            home=home,
        )

    assert isinstance(excinfo.value.__cause__, PermissionError)
    assert "f_vimrc" not in load_repository(repo).packages


@pytest.mark.os_agnostic
def test_import_keeps_original_tree_unchanged(repo: Path, home: Path) -> None:
    """The returned tree is new; the loaded one is not mutated."""
    _init(repo)
    (home / ".vimrc").write_text("set nu\n")
    before = load_repository(repo)

    result = import_path(
        before,
        "~/.vimrc",
        repo_root=repo,
        list_files=list_files,
        read_file=read_file,
        copy_file=copy_file,
        save_repository=save_repository,
        home=home,
    )

    assert before == ConfigTree(banner=True)
    assert "f_vimrc" in result.tree.packages
