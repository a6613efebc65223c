"""Inspect resolved variables (``print-vars``)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..domain.models import ConfigTree, Profile
from ..domain.variables import VariableContext, resolve_variables


def collect_variables(
    config: ConfigTree,
    *,
    profile: Profile | None = None,
    user_variables: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    include_environment: bool = True,
) -> VariableContext:
    """Resolve the repository-wide context (globals, profile and user answers).

    Package variables are not included; they only exist while a package is
    being processed.
    """
    return resolve_variables(
        config,
        profile=profile,
        user_variables=user_variables,
        environ=environ if include_environment else None,
    )


def format_variable_tree(variables: Mapping[str, Any], *, indent: str = "  ") -> str:
    """Render variables as an indented, sorted tree.

    Example:
        >>> print(format_variable_tree({"git": {"email": "me@x", "signing": True}, "paths": ["a", "b"]}))
        Variables:
          git =
            email = me@x
            signing = true
          paths = [
            - a
            - b
          ]
        >>> print(format_variable_tree({}))
        Variables:
          (none)
    """
    lines = ["Variables:"]
    if not variables:
        lines.append(f"{indent}(none)")
    for key in sorted(variables):
        _render(lines, key, variables[key], 1, indent)
    return "\n".join(lines)


def _render(lines: list[str], key: str, value: Any, level: int, indent: str) -> None:
    pad = indent * level
    if isinstance(value, Mapping):
        lines.append(f"{pad}{key} =")
        for child in sorted(value):  # type: ignore[arg-type]
            _render(lines, str(child), value[child], level + 1, indent)  # type: ignore[index]
    elif isinstance(value, (list, tuple)):
        lines.append(f"{pad}{key} = [")
        for item in value:  # type: ignore[union-attr]
            if isinstance(item, Mapping):
                lines.append(f"{indent * (level + 1)}-")
                for child in sorted(item):  # type: ignore[arg-type]
                    _render(lines, str(child), item[child], level + 2, indent)  # type: ignore[index]
            else:
                lines.append(f"{indent * (level + 1)}- {_scalar(item)}")
        lines.append(f"{pad}]")
    else:
        lines.append(f"{pad}{key} = {_scalar(value)}")


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


__all__ = ["collect_variables", "format_variable_tree"]
