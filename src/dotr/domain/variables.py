"""Variable resolution with fixed precedence across five sources.

Merge order, lowest to highest precedence:

1. process environment (flat, string values)
2. global ``variables`` from ``config.toml``
3. package ``variables``
4. profile ``variables``
5. user variables (answered prompts)

Nested tables merge key by key; any non-table value (arrays included)
replaces the lower-precedence value wholesale. Everything here is pure:
the environment arrives as an explicit mapping and no input is mutated.

Contents:
    * :func:`deep_merge` - recursive table merge.
    * :class:`VariableContext` - immutable, dotted-path addressable mapping.
    * :func:`resolve_variables` - build one context per (package, profile).
    * :func:`select_profile_name` - explicit profile, else ``DOTR_PROFILE``.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping
from typing import Any

from .errors import UnknownProfileError
from .models import ConfigTree, Package, Profile

#: Variable consulted when no profile is passed on the command line.
PROFILE_VARIABLE = "DOTR_PROFILE"


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new dict with *override* merged over *base*.

    Example:
        >>> deep_merge({"git": {"name": "a", "email": "x"}}, {"git": {"email": "y"}})
        {'git': {'name': 'a', 'email': 'y'}}
        >>> deep_merge({"paths": [1, 2]}, {"paths": [3]})
        {'paths': [3]}
        >>> deep_merge({"k": {"a": 1}}, {"k": "flat"})
        {'k': 'flat'}
    """
    merged: dict[str, Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)  # type: ignore[arg-type]
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class VariableContext(Mapping[str, Any]):
    """Read-only evaluation context handed to the template renderer.

    Example:
        >>> ctx = VariableContext({"git": {"email": "me@example.com"}})
        >>> ctx["git"]["email"]
        'me@example.com'
        >>> ctx.get_path("git.email")
        'me@example.com'
        >>> ctx.get_path("git.missing", "n/a")
        'n/a'
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(dict(data or {}))

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"VariableContext({self._data!r})"

    def get_path(self, dotted: str, default: Any = None) -> Any:
        """Look up a nested value by ``a.b.c`` path."""
        node: Any = self._data
        for part in dotted.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return default
            node = node[part]  # type: ignore[index]
        return node

    def as_dict(self) -> dict[str, Any]:
        """Return a deep, mutable copy for renderers that need a plain dict."""
        return copy.deepcopy(self._data)


def resolve_variables(
    config: ConfigTree,
    *,
    package: Package | None = None,
    profile: Profile | None = None,
    user_variables: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> VariableContext:
    """Merge every variable source into one immutable context.

    Args:
        config: Parsed repository configuration.
        package: Package being processed; omit for repository-wide contexts.
        profile: Active profile, if any.
        user_variables: Answered prompts; these always win.
        environ: Environment snapshot; only string values are taken.

    Returns:
        Context for one (package, profile) evaluation.

    Example:
        >>> from dotr.domain.models import ConfigTree
        >>> tree = ConfigTree.from_mapping({"variables": {"SHELL_NAME": "bash"}})
        >>> ctx = resolve_variables(tree, environ={"SHELL_NAME": "zsh", "HOME": "/home/u"})
        >>> ctx["SHELL_NAME"], ctx["HOME"]
        ('bash', '/home/u')
    """
    layers: list[Mapping[str, Any]] = [
        {key: value for key, value in (environ or {}).items() if isinstance(value, str)},
        config.variables,
    ]
    if package is not None:
        layers.append(package.variables)
    if profile is not None:
        layers.append(profile.variables)
    layers.append(user_variables or {})

    merged: dict[str, Any] = {}
    for layer in layers:
        merged = deep_merge(merged, layer)
    return VariableContext(merged)


def select_profile_name(
    explicit: str | None,
    *,
    config: ConfigTree,
    user_variables: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> str | None:
    """Decide which profile is active for this invocation.

    An explicit name wins; otherwise ``DOTR_PROFILE`` is read from the user
    variables, then from the environment. Empty values count as unset.

    Raises:
        UnknownProfileError: When the chosen name is not defined in *config*.

    Example:
        >>> from dotr.domain.models import ConfigTree
        >>> tree = ConfigTree.from_mapping({"profiles": {"work": {}, "home": {}}})
        >>> select_profile_name(None, config=tree, environ={"DOTR_PROFILE": "work"})
        'work'
        >>> select_profile_name("home", config=tree, environ={"DOTR_PROFILE": "work"})
        'home'
        >>> select_profile_name(None, config=tree) is None
        True
    """
    chosen = explicit
    if not chosen:
        stored = (user_variables or {}).get(PROFILE_VARIABLE)
        chosen = stored if isinstance(stored, str) and stored else None
    if not chosen:
        chosen = (environ or {}).get(PROFILE_VARIABLE) or None
    if chosen is None:
        return None
    if chosen not in config.profiles:
        raise UnknownProfileError(chosen)
    return chosen


__all__ = [
    "PROFILE_VARIABLE",
    "VariableContext",
    "deep_merge",
    "resolve_variables",
    "select_profile_name",
]
