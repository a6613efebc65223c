"""Static package metadata surfaced to CLI commands and documentation.

Values mirror ``[project]`` in ``pyproject.toml``; the version line is kept
in sync on release.

Contents:
    * Module-level constants: ``name``, ``title``, ``version``, ``shell_command``.
    * ``LAYEREDCONF_*`` identifiers used by lib_layered_config path discovery.
    * :func:`print_info` rendering the constants for the ``info`` command.
"""

from __future__ import annotations

#: Distribution name declared in ``pyproject.toml``.
name = "dotr"
#: Human-readable summary shown in CLI help output.
title = "Manage, template and deploy dotfiles from a version-controlled repository"
#: Release version, kept in sync with ``[project].version``.
version = "0.3.0"
#: Console-script name published by the package.
shell_command = "dotr"

#: Vendor identifier for lib_layered_config paths (macOS/Windows).
LAYEREDCONF_VENDOR: str = "dotr"
#: Application display name for lib_layered_config paths (macOS/Windows).
LAYEREDCONF_APP: str = "dotr"
#: Configuration slug for lib_layered_config Linux paths and environment variables.
LAYEREDCONF_SLUG: str = "dotr"


def print_info() -> None:
    """Print the summarised metadata block used by the CLI ``info`` command.

    Example:
        >>> print_info()  # doctest: +ELLIPSIS
        Info for dotr:
        ...
    """
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    print("\n".join(lines))
