"""In-memory settings adapters for testing.

Satisfy the same Protocols as the production adapters without touching
the filesystem or lib_layered_config's discovery.
"""

from __future__ import annotations

from lib_layered_config import Config

from ...domain.enums import OutputFormat


def get_config_in_memory(
    *,
    profile: str | None = None,
    start_dir: str | None = None,
) -> Config:
    """Return settings holding only the ``[dotr]`` defaults."""
    return Config(
        {
            "dotr": {
                "backup_suffix": ".dotrbak",
                "diff_context_lines": 3,
                "shell": "/bin/sh",
                "user_variables_file": ".uservariables.toml",
            }
        },
        {},
    )


def display_config_in_memory(
    config: Config,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    section: str | None = None,
    profile: str | None = None,
) -> None:
    """No-op display -- satisfies the DisplayConfig protocol."""


__all__ = [
    "display_config_in_memory",
    "get_config_in_memory",
]
