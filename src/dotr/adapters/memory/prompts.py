"""In-memory prompt and user-variable adapters for testing."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from ...domain.errors import PromptAbortedError


class ScriptedLineReader:
    """Answer prompts from a fixed script and remember what was asked.

    Example:
        >>> reader = ScriptedLineReader(["me@example.com"])
        >>> reader("Email?")
        'me@example.com'
        >>> reader.asked
        ['Email?']
        >>> reader("Name?")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        dotr.domain.errors.PromptAbortedError: No input available for prompt 'Name?'
    """

    def __init__(self, answers: Iterable[str] = ()) -> None:
        self._answers = list(answers)
        self.asked: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.asked.append(prompt)
        if not self._answers:
            raise PromptAbortedError(prompt)
        return self._answers.pop(0)


class InMemoryUserVariables:
    """Dict-backed user-variable files keyed by path.

    ``load`` and ``save`` satisfy the LoadUserVariables and SaveUserVariables
    ports; ``saves`` counts writes so tests can check persist-per-answer.
    """

    def __init__(self, initial: Mapping[Path, Mapping[str, Any]] | None = None) -> None:
        self.files: dict[Path, dict[str, Any]] = {path: dict(values) for path, values in (initial or {}).items()}
        self.saves = 0

    def load(self, path: Path) -> dict[str, Any]:
        return copy.deepcopy(self.files.get(path, {}))

    def save(self, path: Path, variables: Mapping[str, Any]) -> None:
        self.files[path] = copy.deepcopy(dict(variables))
        self.saves += 1


__all__ = ["InMemoryUserVariables", "ScriptedLineReader"]
