"""Immutable configuration tree parsed from a dotfiles repository's ``config.toml``.

The tree is validated once at the boundary with pydantic and then passed by
value into every resolver call. Nothing in the application layer mutates it;
``import`` builds a new tree through :meth:`ConfigTree.with_package`.

Contents:
    * :class:`Package` - one deployable source/destination mapping.
    * :class:`Profile` - a named bundle of dependencies and variable overrides.
    * :class:`ConfigTree` - root aggregate for globals, packages and profiles.
    * :class:`DeploymentUnit` - one resolved file-level work item.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError, UnknownPackageError, UnknownProfileError

VariableTree = dict[str, Any]
"""Nested key/value mapping as read from a TOML ``variables`` table."""


class Package(BaseModel):
    """A named, independently deployable dotfile mapping.

    Attributes:
        name: Unique key taken from the ``[packages.<name>]`` table header.
        src: Source path inside the repository (usually ``dotfiles/<name>``).
        dest: Deployment target; ``~``-prefixed, absolute, or repo-relative.
        dependencies: Packages pulled in right after this one.
        variables: Package-scoped variables (override globals).
        prompts: Prompt texts for user variables this package needs.
        pre_actions: Shell commands run before this package writes anything.
        post_actions: Shell commands run after this package wrote something.
        targets: Profile name to destination override.
        skip: Excluded from "deploy all" unless selected or pulled in.
        ignore: Glob patterns for files inside a directory package to leave alone.

    Example:
        >>> pkg = Package(name="bashrc", src="dotfiles/f_bashrc", dest="~/.bashrc")
        >>> pkg.skip
        False
        >>> pkg.destination_for("work")
        '~/.bashrc'
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    src: str
    dest: str
    dependencies: tuple[str, ...] = ()
    variables: VariableTree = Field(default_factory=dict)
    prompts: dict[str, str] = Field(default_factory=dict)
    pre_actions: tuple[str, ...] = ()
    post_actions: tuple[str, ...] = ()
    targets: dict[str, str] = Field(default_factory=dict)
    skip: bool = False
    ignore: tuple[str, ...] = ()

    def destination_for(self, profile: str | None) -> str:
        """Return the destination for *profile*, honouring ``targets`` overrides."""
        if profile is not None and profile in self.targets:
            return self.targets[profile]
        return self.dest

    def to_document(self) -> dict[str, Any]:
        """Serialise to a TOML-ready table omitting empty and default fields."""
        document: dict[str, Any] = {"src": self.src, "dest": self.dest}
        if self.dependencies:
            document["dependencies"] = list(self.dependencies)
        if self.variables:
            document["variables"] = dict(self.variables)
        if self.prompts:
            document["prompts"] = dict(self.prompts)
        if self.pre_actions:
            document["pre_actions"] = list(self.pre_actions)
        if self.post_actions:
            document["post_actions"] = list(self.post_actions)
        if self.targets:
            document["targets"] = dict(self.targets)
        if self.skip:
            document["skip"] = True
        if self.ignore:
            document["ignore"] = list(self.ignore)
        return document


class Profile(BaseModel):
    """A named deployment environment.

    Example:
        >>> Profile(name="work", dependencies=("ssh",)).dependencies
        ('ssh',)
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    dependencies: tuple[str, ...] = ()
    variables: VariableTree = Field(default_factory=dict)
    prompts: dict[str, str] = Field(default_factory=dict)

    def to_document(self) -> dict[str, Any]:
        """Serialise to a TOML-ready table omitting empty fields."""
        document: dict[str, Any] = {}
        if self.dependencies:
            document["dependencies"] = list(self.dependencies)
        if self.variables:
            document["variables"] = dict(self.variables)
        if self.prompts:
            document["prompts"] = dict(self.prompts)
        return document


class ConfigTree(BaseModel):
    """Root aggregate of a dotfiles repository configuration.

    Package and profile order follows the order of their tables in
    ``config.toml``; "deploy all" walks packages in that order.

    Example:
        >>> tree = ConfigTree.from_mapping({
        ...     "variables": {"EDITOR": "vim"},
        ...     "packages": {"bashrc": {"src": "dotfiles/f_bashrc", "dest": "~/.bashrc"}},
        ...     "profiles": {"work": {"dependencies": ["bashrc"]}},
        ... })
        >>> tree.package("bashrc").dest
        '~/.bashrc'
        >>> tree.profile("work").dependencies
        ('bashrc',)
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    banner: bool = False
    variables: VariableTree = Field(default_factory=dict)
    prompts: dict[str, str] = Field(default_factory=dict)
    packages: dict[str, Package] = Field(default_factory=dict)
    profiles: dict[str, Profile] = Field(default_factory=dict)

    @field_validator("packages", "profiles", mode="before")
    @classmethod
    def _inject_names(cls, value: Any) -> Any:
        """Copy each table key into the entry's ``name`` field."""
        if not isinstance(value, Mapping):
            return value
        named: dict[str, Any] = {}
        for key, entry in value.items():
            if isinstance(entry, Mapping):
                named[key] = {**entry, "name": key}
            else:
                named[key] = entry
        return named

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ConfigTree:
        """Validate a parsed TOML document into a tree.

        Raises:
            ConfigurationError: When a field has the wrong type or a required
                package field is missing. Unknown keys are ignored.
        """
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            raise ConfigurationError(_describe_validation_error(exc)) from exc

    def package(self, name: str) -> Package:
        """Return the package called *name*.

        Raises:
            UnknownPackageError: When no such package exists.
        """
        try:
            return self.packages[name]
        except KeyError:
            raise UnknownPackageError(name) from None

    def profile(self, name: str) -> Profile:
        """Return the profile called *name*.

        Raises:
            UnknownProfileError: When no such profile exists.
        """
        try:
            return self.profiles[name]
        except KeyError:
            raise UnknownProfileError(name) from None

    def with_package(self, package: Package, *, profile: str | None = None) -> ConfigTree:
        """Return a new tree that also contains *package*.

        When *profile* is given, the package is appended to that profile's
        dependencies, creating the profile when it does not exist yet.
        """
        packages = {**self.packages, package.name: package}
        profiles = dict(self.profiles)
        if profile is not None:
            existing = profiles.get(profile, Profile(name=profile))
            if package.name not in existing.dependencies:
                existing = existing.model_copy(update={"dependencies": (*existing.dependencies, package.name)})
            profiles[profile] = existing
        return self.model_copy(update={"packages": packages, "profiles": profiles})

    def to_document(self) -> dict[str, Any]:
        """Serialise the tree to a TOML-ready mapping omitting empty sections."""
        document: dict[str, Any] = {"banner": self.banner}
        if self.variables:
            document["variables"] = dict(self.variables)
        if self.prompts:
            document["prompts"] = dict(self.prompts)
        document["packages"] = {name: pkg.to_document() for name, pkg in self.packages.items()}
        if self.profiles:
            document["profiles"] = {name: prof.to_document() for name, prof in self.profiles.items()}
        return document


def _describe_validation_error(exc: ValidationError) -> str:
    """Flatten pydantic errors into one readable line per problem."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        problems.append(f"{location}: {error['msg']}")
    return "Invalid config.toml: " + "; ".join(problems)


@dataclass(frozen=True, slots=True)
class DeploymentUnit:
    """One resolved (source, destination) file pair for a single command run.

    Attributes:
        package: Package the file belongs to.
        profile: Effective profile name, or ``None``.
        source_path: Absolute path of the stored file in the repository.
        dest_path: Absolute destination path with profile overrides applied.
        is_template: Whether the stored content carries template syntax.
        relative_path: Sub-path inside a directory package; ``None`` for files.
    """

    package: Package
    profile: str | None
    source_path: Path
    dest_path: Path
    is_template: bool = False
    relative_path: Path | None = None

    @property
    def label(self) -> str:
        """Human-readable identity used in reports and log records."""
        if self.relative_path is None:
            return self.package.name
        return f"{self.package.name}/{self.relative_path.as_posix()}"


__all__ = [
    "ConfigTree",
    "DeploymentUnit",
    "Package",
    "Profile",
    "VariableTree",
]
