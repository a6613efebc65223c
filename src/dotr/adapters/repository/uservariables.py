"""TOML persistence for answered prompts (``.uservariables.toml``).

The file lives inside the repository but is listed in ``.gitignore`` by
``dotr init``; it is only ever written by the prompt store.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import rtoml

from ...domain.errors import ConfigurationError
from ..filesystem.local import write_file


def load_user_variables(path: Path) -> dict[str, Any]:
    """Return stored answers, or an empty dict when the file does not exist.

    Raises:
        ConfigurationError: When the file exists but is not valid TOML.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    try:
        return dict(rtoml.loads(text))
    except rtoml.TomlParsingError as exc:
        raise ConfigurationError(f"Failed to parse {path}: {exc}") from exc


def save_user_variables(path: Path, variables: Mapping[str, Any]) -> None:
    """Replace the file content with *variables*."""
    write_file(path, rtoml.dumps(dict(variables), pretty=True).encode("utf-8"))


__all__ = ["load_user_variables", "save_user_variables"]
