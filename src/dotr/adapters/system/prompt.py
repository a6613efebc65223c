"""Interactive console input for prompts."""

from __future__ import annotations

import rich_click as click

from ...domain.errors import PromptAbortedError


def read_line(prompt: str) -> str:
    """Ask *prompt* on the terminal and return the raw answer.

    Empty answers are accepted. End of input and Ctrl+C become
    :class:`PromptAbortedError`.
    """
    try:
        return click.prompt(prompt, default="", show_default=False, prompt_suffix=" ")
    except (click.Abort, EOFError) as exc:
        raise PromptAbortedError(prompt) from exc


__all__ = ["read_line"]
