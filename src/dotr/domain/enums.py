"""Type-safe domain enums for pipeline directions, change kinds, and output formats."""

from __future__ import annotations

from enum import Enum


class OutputFormat(str, Enum):
    """Output format options for configuration and variable display.

    Inherits from str to allow direct string comparison and Click integration.

    Attributes:
        HUMAN: Human-readable indented output.
        JSON: Machine-readable JSON output.

    Example:
        >>> OutputFormat.HUMAN.value
        'human'
        >>> OutputFormat.JSON == "json"
        True
    """

    HUMAN = "human"
    JSON = "json"


class Direction(str, Enum):
    """Which way a pipeline run moves file content.

    Attributes:
        DEPLOY: Repository store to destination filesystem.
        UPDATE: Destination filesystem back into the repository store.
        DIFF: Read-only comparison; nothing is written.

    Example:
        >>> Direction("deploy") is Direction.DEPLOY
        True
    """

    DEPLOY = "deploy"
    UPDATE = "update"
    DIFF = "diff"


class ChangeKind(str, Enum):
    """Outcome of comparing effective source content with a destination file.

    Attributes:
        IDENTICAL: Both sides hold the same bytes.
        CHANGED: Both sides exist and differ.
        DEST_MISSING: The destination file does not exist yet.
        SOURCE_MISSING: The stored source file does not exist.
    """

    IDENTICAL = "identical"
    CHANGED = "changed"
    DEST_MISSING = "dest_missing"
    SOURCE_MISSING = "source_missing"


class LineTag(str, Enum):
    """Per-line label inside a diff hunk.

    Attributes:
        ADDED: Present in the effective source, absent in the destination.
        REMOVED: Present in the destination, absent in the effective source.
        CONTEXT: Unchanged line kept for readability.

    Example:
        >>> LineTag.ADDED.marker
        '+'
    """

    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"

    @property
    def marker(self) -> str:
        """Return the unified-diff prefix character for this tag."""
        return {LineTag.ADDED: "+", LineTag.REMOVED: "-", LineTag.CONTEXT: " "}[self]


class UnitOutcome(str, Enum):
    """Final state of one deployment unit after a pipeline run.

    Attributes:
        WRITTEN: Content was written (destination on deploy, store on update).
        UNCHANGED: Content was identical; nothing was written or backed up.
        PENDING: Diff mode found a difference that a deploy would write.
        SKIPPED: Unit intentionally not processed (template on update, nothing to pull).
        FAILED: A render, I/O, or action error occurred for this unit.
    """

    WRITTEN = "written"
    UNCHANGED = "unchanged"
    PENDING = "pending"
    SKIPPED = "skipped"
    FAILED = "failed"


__all__ = [
    "ChangeKind",
    "Direction",
    "LineTag",
    "OutputFormat",
    "UnitOutcome",
]
