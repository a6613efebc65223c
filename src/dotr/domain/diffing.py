"""Content-based change detection between effective source and destination.

Comparison runs on bytes first; identical bytes never produce hunks. When
both sides decode as UTF-8, a line diff (``difflib.SequenceMatcher``) builds
ordered hunks with the destination as the "old" side and the effective
source as the "new" side, so lines only in the store show up as
:attr:`LineTag.ADDED` and local edits as :attr:`LineTag.REMOVED`.

Contents:
    * :class:`DiffLine`, :class:`Hunk`, :class:`Change` - value objects.
    * :func:`compute_change` - classify and diff one pair of contents.
    * :func:`format_unified` - render a change as unified-diff text.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass

from .enums import ChangeKind, LineTag

#: Default number of unchanged lines kept around each hunk.
DEFAULT_CONTEXT_LINES = 3


@dataclass(frozen=True, slots=True)
class DiffLine:
    """One tagged line inside a hunk, without its line terminator."""

    tag: LineTag
    text: str


@dataclass(frozen=True, slots=True)
class Hunk:
    """A contiguous block of changes plus surrounding context.

    Starts are zero-based offsets into the destination (``dest_*``) and the
    effective source (``source_*``) line lists.
    """

    dest_start: int
    dest_length: int
    source_start: int
    source_length: int
    lines: tuple[DiffLine, ...]

    @property
    def header(self) -> str:
        """Return the ``@@ -a,b +c,d @@`` header line."""
        old = _format_range(self.dest_start, self.dest_length)
        new = _format_range(self.source_start, self.source_length)
        return f"@@ -{old} +{new} @@"


@dataclass(frozen=True, slots=True)
class Change:
    """Result of comparing one effective source with its destination.

    Attributes:
        kind: Classification of the comparison.
        hunks: Ordered hunks; only populated for textual ``CHANGED`` results.
        binary: True when either side is not valid UTF-8.
    """

    kind: ChangeKind
    hunks: tuple[Hunk, ...] = ()
    binary: bool = False

    @property
    def needs_write(self) -> bool:
        """Whether a deploy would write the destination."""
        return self.kind in (ChangeKind.CHANGED, ChangeKind.DEST_MISSING)

    @property
    def added(self) -> int:
        """Count of lines tagged ADDED across all hunks."""
        return sum(1 for hunk in self.hunks for line in hunk.lines if line.tag is LineTag.ADDED)

    @property
    def removed(self) -> int:
        """Count of lines tagged REMOVED across all hunks."""
        return sum(1 for hunk in self.hunks for line in hunk.lines if line.tag is LineTag.REMOVED)


def compute_change(
    source: bytes | None,
    dest: bytes | None,
    *,
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> Change:
    """Classify *source* against *dest* and build hunks when they differ.

    Args:
        source: Effective source content (rendered template or raw bytes),
            or ``None`` when the stored source is missing.
        dest: Current destination content, or ``None`` when absent.
        context_lines: Unchanged lines to keep around each hunk.

    Example:
        >>> compute_change(b"a\\n", b"a\\n").kind
        <ChangeKind.IDENTICAL: 'identical'>
        >>> compute_change(b"a\\n", None).kind
        <ChangeKind.DEST_MISSING: 'dest_missing'>
        >>> change = compute_change(b"a\\nb\\n", b"a\\nc\\n")
        >>> [(line.tag.value, line.text) for line in change.hunks[0].lines]
        [('context', 'a'), ('removed', 'c'), ('added', 'b')]
    """
    if source is None:
        return Change(ChangeKind.SOURCE_MISSING)
    if dest is None:
        return Change(ChangeKind.DEST_MISSING)
    if source == dest:
        return Change(ChangeKind.IDENTICAL)

    try:
        source_text = source.decode("utf-8")
        dest_text = dest.decode("utf-8")
    except UnicodeDecodeError:
        return Change(ChangeKind.CHANGED, binary=True)

    return Change(ChangeKind.CHANGED, hunks=_build_hunks(dest_text, source_text, context_lines))


def _build_hunks(dest_text: str, source_text: str, context_lines: int) -> tuple[Hunk, ...]:
    dest_lines = dest_text.splitlines(keepends=True)
    source_lines = source_text.splitlines(keepends=True)
    matcher = difflib.SequenceMatcher(None, dest_lines, source_lines, autojunk=False)

    hunks: list[Hunk] = []
    for group in matcher.get_grouped_opcodes(context_lines):
        lines: list[DiffLine] = []
        for tag, i1, i2, j1, j2 in group:
            if tag == "equal":
                lines.extend(DiffLine(LineTag.CONTEXT, _strip_eol(text)) for text in dest_lines[i1:i2])
                continue
            if tag in ("replace", "delete"):
                lines.extend(DiffLine(LineTag.REMOVED, _strip_eol(text)) for text in dest_lines[i1:i2])
            if tag in ("replace", "insert"):
                lines.extend(DiffLine(LineTag.ADDED, _strip_eol(text)) for text in source_lines[j1:j2])
        first, last = group[0], group[-1]
        hunks.append(
            Hunk(
                dest_start=first[1],
                dest_length=last[2] - first[1],
                source_start=first[3],
                source_length=last[4] - first[3],
                lines=tuple(lines),
            )
        )
    return tuple(hunks)


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def _format_range(start: int, length: int) -> str:
    """Format a hunk range the way ``diff -u`` does (one-based, empty ranges point before)."""
    beginning = start + 1
    if length == 1:
        return f"{beginning}"
    if length == 0:
        beginning -= 1
    return f"{beginning},{length}"


def format_unified(change: Change, *, dest_label: str, source_label: str) -> str:
    """Render *change* as unified-diff text.

    Returns an empty string for identical content. Missing sides and binary
    content produce a single explanatory line instead of hunks.

    Example:
        >>> change = compute_change(b"x\\n", b"y\\n")
        >>> print(format_unified(change, dest_label="~/.bashrc", source_label="dotfiles/f_bashrc"))
        --- ~/.bashrc
        +++ dotfiles/f_bashrc
        @@ -1 +1 @@
        -y
        +x
    """
    if change.kind is ChangeKind.IDENTICAL:
        return ""
    if change.kind is ChangeKind.DEST_MISSING:
        return f"{dest_label}: does not exist, would be created from {source_label}"
    if change.kind is ChangeKind.SOURCE_MISSING:
        return f"{source_label}: source does not exist"
    if change.binary:
        return f"Binary files {dest_label} and {source_label} differ"

    out = [f"--- {dest_label}", f"+++ {source_label}"]
    for hunk in change.hunks:
        out.append(hunk.header)
        out.extend(f"{line.tag.marker}{line.text}" for line in hunk.lines)
    return "\n".join(out)


__all__ = [
    "DEFAULT_CONTEXT_LINES",
    "Change",
    "DiffLine",
    "Hunk",
    "compute_change",
    "format_unified",
]
