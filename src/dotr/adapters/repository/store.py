"""Read and write a dotfiles repository's ``config.toml`` with rtoml."""

from __future__ import annotations

import logging
from pathlib import Path

import rtoml

from ...application.importer import CONFIG_FILENAME
from ...domain.errors import ConfigurationError
from ...domain.models import ConfigTree
from ..filesystem.local import write_file

logger = logging.getLogger(__name__)


def load_repository(repo_root: Path) -> ConfigTree:
    """Parse ``<repo_root>/config.toml`` into a validated tree.

    Raises:
        ConfigurationError: When the file is missing, unreadable, not valid
            TOML, or does not match the expected structure.

    Example:
        >>> load_repository(Path("/nonexistent"))  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        dotr.domain.errors.ConfigurationError: config.toml not found in /nonexistent
    """
    config_path = repo_root / CONFIG_FILENAME
    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigurationError(
            f"{CONFIG_FILENAME} not found in {repo_root} (run 'dotr init' to create one)"
        ) from None
    except OSError as exc:
        raise ConfigurationError(f"Cannot read {config_path}: {exc}") from exc

    try:
        document = rtoml.loads(text)
    except rtoml.TomlParsingError as exc:
        raise ConfigurationError(f"Failed to parse {config_path}: {exc}") from exc

    tree = ConfigTree.from_mapping(document)
    logger.debug(
        "Loaded repository configuration",
        extra={"config": str(config_path), "packages": len(tree.packages), "profiles": len(tree.profiles)},
    )
    return tree


def save_repository(repo_root: Path, tree: ConfigTree) -> Path:
    """Serialise *tree* to ``<repo_root>/config.toml`` and return its path."""
    config_path = repo_root / CONFIG_FILENAME
    write_file(config_path, rtoml.dumps(tree.to_document(), pretty=True).encode("utf-8"))
    logger.debug("Saved repository configuration", extra={"config": str(config_path)})
    return config_path


__all__ = ["load_repository", "save_repository"]
