"""Shared CLI constants.

Centralizes configuration values used across CLI modules to ensure consistency.

Contents:
    * :data:`CLICK_CONTEXT_SETTINGS` - Shared Click settings for help display.
    * :data:`TRACEBACK_SUMMARY_LIMIT` - Character limit for truncated tracebacks.
    * :data:`TRACEBACK_VERBOSE_LIMIT` - Character limit for verbose tracebacks.
    * :data:`BANNER` - Text shown before commands when ``banner = true``.
"""

from __future__ import annotations

from typing import Final

#: Shared Click context flags so help output stays consistent across commands.
CLICK_CONTEXT_SETTINGS: Final[dict[str, list[str]]] = {"help_option_names": ["-h", "--help"]}

#: Character limit used when printing truncated tracebacks.
TRACEBACK_SUMMARY_LIMIT: Final[int] = 500

#: Character limit used when verbose tracebacks are enabled.
TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

#: Printed before repository commands when the repository sets ``banner = true``.
BANNER: Final[str] = "\n".join(
    (
        r"     _       _",
        r"  __| | ___ | |_ _ __",
        r" / _` |/ _ \| __| '__|",
        r"| (_| | (_) | |_| |",
        r" \__,_|\___/ \__|_|",
    )
)

__all__ = [
    "BANNER",
    "CLICK_CONTEXT_SETTINGS",
    "TRACEBACK_SUMMARY_LIMIT",
    "TRACEBACK_VERBOSE_LIMIT",
]
