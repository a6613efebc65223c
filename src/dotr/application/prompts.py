"""Prompt store: collect user-secret variables once and remember them.

Prompt texts come from three additive scopes (global, package, profile).
Each key is asked at most once per repository: answers are written to the
user-variables file right after they are given, and keys already present
there are never asked again.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..domain.errors import PromptAbortedError
from ..domain.models import ConfigTree, Package, Profile
from .ports import LoadUserVariables, ReadLine, SaveUserVariables

logger = logging.getLogger(__name__)


def gather_prompts(
    config: ConfigTree,
    packages: Iterable[Package] = (),
    profile: Profile | None = None,
) -> dict[str, str]:
    """Merge prompt texts from every scope in play.

    Later scopes replace the text of an earlier key; the stored answer is
    still one shared value.

    Example:
        >>> tree = ConfigTree.from_mapping({
        ...     "prompts": {"EMAIL": "Email?"},
        ...     "packages": {"git": {"src": "a", "dest": "b", "prompts": {"EMAIL": "Git email?", "NAME": "Name?"}}},
        ... })
        >>> gather_prompts(tree, tree.packages.values())
        {'EMAIL': 'Git email?', 'NAME': 'Name?'}
    """
    specs: dict[str, str] = dict(config.prompts)
    for package in packages:
        specs.update(package.prompts)
    if profile is not None:
        specs.update(profile.prompts)
    return specs


@dataclass(slots=True)
class PromptStore:
    """Owner of the user-variables file for one repository.

    Attributes:
        path: Location of the user-variables file.
        load_variables: Port reading the file.
        save_variables: Port writing the file.
        read_line: Port asking one question.
    """

    path: Path
    load_variables: LoadUserVariables
    save_variables: SaveUserVariables
    read_line: ReadLine

    def load(self) -> dict[str, Any]:
        """Return the answers stored so far."""
        return self.load_variables(self.path)

    def ensure(self, specs: Mapping[str, str]) -> dict[str, Any]:
        """Ask for every prompt key that has no stored answer yet.

        Args:
            specs: Prompt key to prompt text.

        Returns:
            All stored answers, including the ones just collected.

        Raises:
            PromptAbortedError: When input ends before all keys are answered.
                Answers given before that point are already saved.
        """
        answers = self.load()
        for key, text in specs.items():
            if key in answers:
                continue
            try:
                answers[key] = self.read_line(text)
            except PromptAbortedError as exc:
                raise PromptAbortedError(key) from exc
            self.save_variables(self.path, answers)
            logger.info("Stored prompt answer", extra={"key": key, "file": str(self.path)})
        return answers


__all__ = ["PromptStore", "gather_prompts"]
