"""Filesystem adapter - local file reads, atomic writes, copies and listings.

Contents:
    * :mod:`.local` - Functions satisfying the application's file ports
"""

from __future__ import annotations

from .local import copy_file, list_files, make_directory, read_file, write_file

__all__ = [
    "copy_file",
    "list_files",
    "make_directory",
    "read_file",
    "write_file",
]
