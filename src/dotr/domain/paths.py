"""Path helpers shared by the resolver, the pipeline and ``import``.

Contents:
    * :func:`resolve_path` - ``~``, absolute and repo-relative path forms.
    * :func:`normalize_home_path` - collapse the home directory back to ``~``.
    * :func:`derive_package_name` - package name from an imported path.
    * :func:`is_ignored` - glob matching for directory-package ignore lists.
    * :func:`backup_path_for` - sibling backup location for a destination.
"""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Iterable
from pathlib import Path, PurePosixPath


def resolve_path(raw: str, repo_root: Path, *, home: Path | None = None) -> Path:
    """Turn a configured path into an absolute one.

    ``~`` and ``~/...`` expand to *home* (defaults to the current user's
    home), absolute paths are kept, anything else is taken relative to the
    repository root.

    Example:
        >>> resolve_path("~/.bashrc", Path("/repo"), home=Path("/home/u")).as_posix()
        '/home/u/.bashrc'
        >>> resolve_path("/etc/hosts", Path("/repo")).as_posix()
        '/etc/hosts'
        >>> resolve_path("dotfiles/f_bashrc", Path("/repo")).as_posix()
        '/repo/dotfiles/f_bashrc'
    """
    home_dir = home if home is not None else Path.home()
    if raw == "~":
        return home_dir
    if raw.startswith("~/"):
        return home_dir / raw[2:]
    candidate = Path(raw)
    if candidate.is_absolute():
        return candidate
    return Path(os.path.abspath(repo_root / candidate))


def normalize_home_path(path: Path, *, home: Path | None = None) -> str:
    """Render *path* with the home directory collapsed to ``~``.

    Example:
        >>> normalize_home_path(Path("/home/u/.config/nvim"), home=Path("/home/u"))
        '~/.config/nvim'
        >>> normalize_home_path(Path("/etc/hosts"), home=Path("/home/u"))
        '/etc/hosts'
    """
    home_dir = home if home is not None else Path.home()
    try:
        relative = path.relative_to(home_dir)
    except ValueError:
        return path.as_posix()
    if relative == Path("."):
        return "~"
    return f"~/{relative.as_posix()}"


def derive_package_name(path: Path, *, is_dir: bool) -> str:
    """Derive a package name from the last component of an imported path.

    A leading ``.`` is dropped, the text from the last ``-`` onwards is cut
    (``nvim-0.9`` becomes ``nvim``), a ``d_`` or ``f_`` prefix marks
    directories and files, and remaining ``-`` and ``.`` become ``_``.

    Example:
        >>> derive_package_name(Path("/home/u/.bashrc"), is_dir=False)
        'f_bashrc'
        >>> derive_package_name(Path("/home/u/.config/nvim"), is_dir=True)
        'd_nvim'
        >>> derive_package_name(Path("/home/u/.git.conf-old"), is_dir=False)
        'f_git_conf'
    """
    name = path.name.lstrip(".")
    cut = name.rfind("-")
    if cut != -1:
        name = name[:cut]
    prefix = "d_" if is_dir else "f_"
    return f"{prefix}{name}".replace("-", "_").replace(".", "_")


def is_ignored(relative: PurePosixPath | str, patterns: Iterable[str]) -> bool:
    """Return True when *relative* matches any ignore glob.

    Patterns are matched against the POSIX relative path; patterns without
    a ``/`` also match the bare file name at any depth, and a leading
    ``**/`` matches zero or more directories.

    Example:
        >>> is_ignored("logs/app.log", ["*.log"])
        True
        >>> is_ignored("ignore_me/file.txt", ["ignore_me/*"])
        True
        >>> is_ignored("top.cache", ["**/*.cache"])
        True
        >>> is_ignored("target/debug/out", ["target/**"])
        True
        >>> is_ignored("src/main.rs", ["target/**", "*.log"])
        False
    """
    rel = PurePosixPath(relative)
    text = rel.as_posix()
    for pattern in patterns:
        pat = pattern.replace("\\", "/")
        if fnmatch.fnmatchcase(text, pat):
            return True
        if "/" not in pat and fnmatch.fnmatchcase(rel.name, pat):
            return True
        if pat.startswith("**/") and fnmatch.fnmatchcase(text, pat[3:]):
            return True
    return False


def backup_path_for(dest: Path, suffix: str) -> Path:
    """Return the sibling backup path for *dest*.

    Example:
        >>> backup_path_for(Path("/home/u/.bashrc"), ".dotrbak").as_posix()
        '/home/u/.bashrc.dotrbak'
    """
    return dest.with_name(dest.name + suffix)


__all__ = [
    "backup_path_for",
    "derive_package_name",
    "is_ignored",
    "normalize_home_path",
    "resolve_path",
]
