"""Variable resolution: merge order, nested merges, profile selection."""

from __future__ import annotations

from typing import Any

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from dotr.domain.errors import UnknownProfileError
from dotr.domain.models import ConfigTree, Package, Profile
from dotr.domain.variables import (
    PROFILE_VARIABLE,
    VariableContext,
    deep_merge,
    resolve_variables,
    select_profile_name,
)

KEYS = st.text(alphabet="abcdefgh", min_size=1, max_size=3)
SCALARS = st.one_of(st.integers(), st.text(max_size=5), st.booleans(), st.lists(st.integers(), max_size=3))
TREES = st.recursive(
    st.dictionaries(KEYS, SCALARS, max_size=4),
    lambda children: st.dictionaries(KEYS, st.one_of(SCALARS, children), max_size=4),
    max_leaves=12,
)


def _tree(
    *,
    config: dict[str, Any] | None = None,
    package: dict[str, Any] | None = None,
    profile: dict[str, Any] | None = None,
) -> tuple[ConfigTree, Package, Profile]:
    tree = ConfigTree.from_mapping(
        {
            "variables": config or {},
            "packages": {"git": {"src": "dotfiles/git", "dest": "~/.gitconfig", "variables": package or {}}},
            "profiles": {"work": {"variables": profile or {}}},
        }
    )
    return tree, tree.package("git"), tree.profile("work")


# ======================== deep_merge ========================


@pytest.mark.os_agnostic
def test_deep_merge_overrides_nested_keys_individually() -> None:
    """Nested tables merge key by key instead of replacing the table."""
    merged = deep_merge({"git": {"name": "Ann", "email": "ann@home"}}, {"git": {"email": "ann@work"}})

    assert merged == {"git": {"name": "Ann", "email": "ann@work"}}


@pytest.mark.os_agnostic
def test_deep_merge_replaces_arrays_wholesale() -> None:
    """Arrays from the higher layer replace lower arrays, never concatenate."""
    merged = deep_merge({"paths": ["/usr/bin", "/bin"]}, {"paths": ["/opt/bin"]})

    assert merged == {"paths": ["/opt/bin"]}


@pytest.mark.os_agnostic
def test_deep_merge_leaves_inputs_untouched() -> None:
    """Merging never mutates either argument."""
    base = {"a": {"b": 1}}
    override = {"a": {"c": 2}}

    deep_merge(base, override)

    assert base == {"a": {"b": 1}}
    assert override == {"a": {"c": 2}}


@pytest.mark.os_agnostic
def test_deep_merge_scalar_replaces_table() -> None:
    """A scalar in the higher layer replaces a whole table below it."""
    assert deep_merge({"a": {"b": 1}}, {"a": "flat"}) == {"a": "flat"}


@pytest.mark.os_agnostic
@given(tree=TREES)
@settings(max_examples=150)
def test_deep_merge_with_empty_override_is_identity(tree: dict[str, Any]) -> None:
    """Merging an empty override returns an equal tree."""
    assert deep_merge(tree, {}) == tree
    assert deep_merge({}, tree) == tree


@pytest.mark.os_agnostic
@given(base=TREES, override=TREES)
@settings(max_examples=150)
def test_deep_merge_keeps_every_top_level_key(base: dict[str, Any], override: dict[str, Any]) -> None:
    """The merged tree holds the union of both key sets."""
    assert set(deep_merge(base, override)) == set(base) | set(override)


@pytest.mark.os_agnostic
@given(base=TREES, override=TREES)
@settings(max_examples=150)
def test_deep_merge_override_scalars_always_win(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Every non-table value of the override survives the merge unchanged."""
    merged = deep_merge(base, override)

    for key, value in override.items():
        if not isinstance(value, dict):
            assert merged[key] == value


# ======================== resolve_variables ========================


@pytest.mark.os_agnostic
def test_resolve_variables_applies_documented_precedence() -> None:
    """env < config < package < profile < user, checked one key per layer boundary."""
    tree, package, profile = _tree(
        config={"a": "config", "b": "config", "c": "config", "d": "config"},
        package={"b": "package", "c": "package", "d": "package"},
        profile={"c": "profile", "d": "profile"},
    )

    ctx = resolve_variables(
        tree,
        package=package,
        profile=profile,
        user_variables={"d": "user"},
        environ={"a": "env", "e": "env"},
    )

    assert (ctx["a"], ctx["b"], ctx["c"], ctx["d"], ctx["e"]) == ("config", "package", "profile", "user", "env")


@pytest.mark.os_agnostic
def test_resolve_variables_skips_package_layer_without_package() -> None:
    """Repository-wide contexts leave package variables out."""
    tree, _, _ = _tree(package={"only_in_package": 1})

    ctx = resolve_variables(tree)

    assert "only_in_package" not in ctx


@pytest.mark.os_agnostic
def test_resolve_variables_ignores_non_string_environment_values() -> None:
    """Only string environment values enter the context."""
    tree, _, _ = _tree()

    ctx = resolve_variables(tree, environ={"HOME": "/home/u", "BROKEN": 3})  # type: ignore[dict-item]

    assert ctx["HOME"] == "/home/u"
    assert "BROKEN" not in ctx


@pytest.mark.os_agnostic
def test_resolve_variables_does_not_mutate_config_tree() -> None:
    """Resolution is pure: the tree's variables are unchanged afterwards."""
    tree, package, profile = _tree(config={"git": {"name": "a"}}, profile={"git": {"name": "b"}})

    resolve_variables(tree, package=package, profile=profile, user_variables={"git": {"email": "x"}})

    assert tree.variables == {"git": {"name": "a"}}


@pytest.mark.os_agnostic
def test_resolve_variables_merges_profile_tables_into_config_tables() -> None:
    """A profile override of one nested key keeps the sibling keys."""
    tree, package, profile = _tree(config={"git": {"name": "Ann", "email": "ann@home"}}, profile={"git": {"email": "ann@work"}})

    ctx = resolve_variables(tree, package=package, profile=profile)

    assert ctx["git"] == {"name": "Ann", "email": "ann@work"}


LAYER_NAMES = ("env", "config", "package", "profile", "user")


@pytest.mark.os_agnostic
@given(present=st.lists(st.booleans(), min_size=5, max_size=5))
@settings(max_examples=64)
def test_resolve_variables_highest_defining_layer_wins(present: list[bool]) -> None:
    """For any subset of layers defining a key, the highest one supplies the value."""
    values = {name: f"from-{name}" for name, on in zip(LAYER_NAMES, present, strict=True) if on}
    tree, package, profile = _tree(
        config={"K": values["config"]} if "config" in values else None,
        package={"K": values["package"]} if "package" in values else None,
        profile={"K": values["profile"]} if "profile" in values else None,
    )

    ctx = resolve_variables(
        tree,
        package=package,
        profile=profile,
        user_variables={"K": values["user"]} if "user" in values else None,
        environ={"K": values["env"]} if "env" in values else None,
    )

    winners = [name for name in LAYER_NAMES if name in values]
    if winners:
        assert ctx["K"] == values[winners[-1]]
    else:
        assert "K" not in ctx


# ======================== VariableContext ========================


@pytest.mark.os_agnostic
def test_variable_context_reads_dotted_paths() -> None:
    """get_path walks nested tables and falls back to the default."""
    ctx = VariableContext({"git": {"user": {"email": "me@example.com"}}})

    assert ctx.get_path("git.user.email") == "me@example.com"
    assert ctx.get_path("git.user.name", "anonymous") == "anonymous"


@pytest.mark.os_agnostic
def test_variable_context_as_dict_returns_independent_copy() -> None:
    """Changing the copy leaves the context untouched."""
    ctx = VariableContext({"git": {"email": "a"}})

    copy = ctx.as_dict()
    copy["git"]["email"] = "b"

    assert ctx["git"]["email"] == "a"


# ======================== select_profile_name ========================


@pytest.mark.os_agnostic
def test_select_profile_prefers_explicit_name() -> None:
    """An explicit --profile beats stored and environment values."""
    tree = ConfigTree.from_mapping({"profiles": {"work": {}, "home": {}}})

    chosen = select_profile_name(
        "home",
        config=tree,
        user_variables={PROFILE_VARIABLE: "work"},
        environ={PROFILE_VARIABLE: "work"},
    )

    assert chosen == "home"


@pytest.mark.os_agnostic
def test_select_profile_prefers_user_variables_over_environment() -> None:
    """DOTR_PROFILE in the user variables wins over the environment."""
    tree = ConfigTree.from_mapping({"profiles": {"work": {}, "home": {}}})

    chosen = select_profile_name(
        None,
        config=tree,
        user_variables={PROFILE_VARIABLE: "home"},
        environ={PROFILE_VARIABLE: "work"},
    )

    assert chosen == "home"


@pytest.mark.os_agnostic
def test_select_profile_rejects_unknown_name() -> None:
    """A profile name that is not configured raises UnknownProfileError."""
    tree = ConfigTree.from_mapping({"profiles": {"work": {}}})

    with pytest.raises(UnknownProfileError, match="laptop"):
        select_profile_name(None, config=tree, environ={PROFILE_VARIABLE: "laptop"})


@pytest.mark.os_agnostic
def test_select_profile_treats_empty_environment_value_as_unset() -> None:
    """An empty DOTR_PROFILE selects no profile."""
    tree = ConfigTree.from_mapping({"profiles": {"work": {}}})

    assert select_profile_name(None, config=tree, environ={PROFILE_VARIABLE: ""}) is None
