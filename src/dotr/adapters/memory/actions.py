"""In-memory action runner for testing."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class RecordedAction:
    """One captured ``run_action`` call."""

    command: str
    cwd: Path
    shell: str


@dataclass
class ActionRecorder:
    """Record action calls instead of spawning a shell.

    Attributes:
        exit_codes: Command line to exit status; unlisted commands succeed.
        calls: Captured calls in order.

    Example:
        >>> recorder = ActionRecorder(exit_codes={"false": 1})
        >>> recorder("echo hi", cwd=Path("/repo"), shell="/bin/sh"), recorder("false", cwd=Path("/repo"), shell="/bin/sh")
        (0, 1)
        >>> recorder.commands
        ['echo hi', 'false']
    """

    exit_codes: Mapping[str, int] = field(default_factory=dict)
    calls: list[RecordedAction] = field(default_factory=list)

    def __call__(self, command: str, *, cwd: Path, shell: str) -> int:
        self.calls.append(RecordedAction(command, cwd, shell))
        return self.exit_codes.get(command, 0)

    @property
    def commands(self) -> list[str]:
        return [call.command for call in self.calls]


__all__ = ["ActionRecorder", "RecordedAction"]
