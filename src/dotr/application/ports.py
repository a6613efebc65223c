"""Application ports - callable Protocol definitions for adapter functions.

Each Protocol class defines a ``__call__`` method whose signature exactly
matches the corresponding adapter function.  Module-level adapter functions
satisfy these protocols automatically via structural subtyping (PEP 544).

System Role:
    Sits between domain and adapters.  Infrastructure types (``Config``)
    are imported under ``TYPE_CHECKING`` only so that layer contracts
    remain satisfied at runtime.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, Any, Protocol

from ..domain.enums import OutputFormat
from ..domain.models import ConfigTree
from ..domain.variables import VariableContext

if TYPE_CHECKING:
    from lib_layered_config import Config


class GetConfig(Protocol):
    """Load layered tool settings with application defaults."""

    def __call__(self, *, profile: str | None = ..., start_dir: str | None = ...) -> Config: ...


class DisplayConfig(Protocol):
    """Display the provided tool settings in the requested format."""

    def __call__(
        self, config: Config, *, output_format: OutputFormat = ..., section: str | None = ..., profile: str | None = ...
    ) -> None: ...


class InitLogging(Protocol):
    """Initialize lib_log_rich runtime with the provided configuration."""

    def __call__(self, config: Config) -> None: ...


class LoadRepository(Protocol):
    """Parse ``config.toml`` under a repository root into a ConfigTree."""

    def __call__(self, repo_root: Path) -> ConfigTree: ...


class SaveRepository(Protocol):
    """Write a ConfigTree back to ``config.toml``; returns the written path."""

    def __call__(self, repo_root: Path, tree: ConfigTree) -> Path: ...


class LoadUserVariables(Protocol):
    """Read answered prompts; a missing file yields an empty mapping."""

    def __call__(self, path: Path) -> dict[str, Any]: ...


class SaveUserVariables(Protocol):
    """Persist answered prompts, replacing the previous file content."""

    def __call__(self, path: Path, variables: Mapping[str, Any]) -> None: ...


class ReadLine(Protocol):
    """Show a prompt and block for one line of input."""

    def __call__(self, prompt: str) -> str: ...


class DetectTemplate(Protocol):
    """Report whether text contains template delimiters."""

    def __call__(self, text: str) -> bool: ...


class RenderTemplate(Protocol):
    """Render template text against a variable context."""

    def __call__(self, template: str, context: VariableContext) -> str: ...


class RunAction(Protocol):
    """Run one shell command line and return its exit status."""

    def __call__(self, command: str, *, cwd: Path, shell: str) -> int: ...


class ReadFile(Protocol):
    """Return a regular file's bytes, or ``None`` when it does not exist."""

    def __call__(self, path: Path) -> bytes | None: ...


class WriteFile(Protocol):
    """Replace a file's content atomically, creating parent directories."""

    def __call__(self, path: Path, data: bytes) -> None: ...


class CopyFile(Protocol):
    """Copy one file's bytes and mode to a target, creating parent directories."""

    def __call__(self, source: Path, target: Path) -> None: ...


class MakeDirectory(Protocol):
    """Create a directory and its parents; existing directories are fine."""

    def __call__(self, path: Path) -> None: ...


class ListFiles(Protocol):
    """List files below a directory as sorted relative paths.

    Returns ``None`` when *root* is not a directory.
    """

    def __call__(self, root: Path) -> list[PurePosixPath] | None: ...


__all__ = [
    "CopyFile",
    "DetectTemplate",
    "DisplayConfig",
    "GetConfig",
    "InitLogging",
    "ListFiles",
    "LoadRepository",
    "LoadUserVariables",
    "MakeDirectory",
    "ReadFile",
    "ReadLine",
    "RenderTemplate",
    "RunAction",
    "SaveRepository",
    "SaveUserVariables",
    "WriteFile",
]
