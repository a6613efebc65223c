"""Local filesystem adapter backing the application's file ports.

Writes are whole-file replace-or-nothing: content goes to a temporary
sibling first and is moved over the target with :func:`os.replace`, so a
crash never leaves a half-written dotfile behind. A symlinked target is
written through: the file the link points at is replaced and the link
stays. An existing target's permission bits are carried over to the new
file.
"""

from __future__ import annotations

import os
import shutil
import stat
import tempfile
from pathlib import Path, PurePosixPath


def read_file(path: Path) -> bytes | None:
    """Return the bytes of *path*, or ``None`` when nothing exists there.

    Raises:
        IsADirectoryError: When *path* is a directory.
        OSError: For permission and other read errors.
    """
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None


def write_file(path: Path, data: bytes) -> None:
    """Atomically replace *path* with *data*, creating parent directories."""
    if path.is_symlink():
        path = Path(os.path.realpath(path))
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = _existing_mode(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        if mode is not None:
            os.chmod(tmp, mode)
        else:
            os.chmod(tmp, 0o666 & ~_current_umask())
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def copy_file(source: Path, target: Path) -> None:
    """Copy bytes and permission bits from *source* to *target*."""
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, target)
    shutil.copymode(source, target)


def make_directory(path: Path) -> None:
    """Create *path* and missing parents."""
    path.mkdir(parents=True, exist_ok=True)


def list_files(root: Path) -> list[PurePosixPath] | None:
    """Return every regular file below *root* as sorted relative POSIX paths.

    Returns ``None`` when *root* is not a directory. Symlinked directories
    are not followed.
    """
    if not root.is_dir():
        return None
    found: list[PurePosixPath] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        base = Path(dirpath)
        for filename in filenames:
            found.append(PurePosixPath((base / filename).relative_to(root).as_posix()))
    return sorted(found)


def _existing_mode(path: Path) -> int | None:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return None


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


__all__ = [
    "copy_file",
    "list_files",
    "make_directory",
    "read_file",
    "write_file",
]
