"""Show dotr's merged tool settings through lib_layered_config's Rich display.

Pending log records are flushed first so they do not interleave with the
settings dump.
"""

from __future__ import annotations

import lib_log_rich.runtime
from lib_layered_config import Config
from lib_layered_config import OutputFormat as LibOutputFormat
from lib_layered_config import display_config as _lib_display
from rich.console import Console

from dotr.domain.enums import OutputFormat


def display_config(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    console: Console | None = None,
    profile: str | None = None,
) -> None:
    """Print *config*, optionally restricted to one *section*.

    Args:
        config: Loaded layered settings.
        output_format: Human-readable TOML-like view or JSON.
        section: Only show this top-level section (e.g. ``dotr``).
        console: Rich console to print to; mainly for tests.
        profile: Settings profile name shown in provenance comments.

    Raises:
        ValueError: When *section* does not exist.
    """
    if lib_log_rich.runtime.is_initialised():
        lib_log_rich.runtime.flush()

    _lib_display(
        config,
        output_format=LibOutputFormat(output_format.value),
        section=section,
        profile=profile,
        console=console,
    )


__all__ = ["display_config"]
