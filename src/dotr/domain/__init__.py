"""Domain layer - pure dotfiles logic with no I/O or framework dependencies.

Contents:
    * :mod:`.enums` - Domain enumerations (Direction, ChangeKind, LineTag, ...)
    * :mod:`.errors` - Domain exception types
    * :mod:`.models` - Configuration tree, packages, profiles, deployment units
    * :mod:`.variables` - Variable precedence and profile selection
    * :mod:`.diffing` - Change detection and hunk building
    * :mod:`.paths` - Path forms, package naming, ignore globs
"""

from __future__ import annotations

from .diffing import Change, DiffLine, Hunk, compute_change, format_unified
from .enums import ChangeKind, Direction, LineTag, OutputFormat, UnitOutcome
from .errors import (
    ConfigurationError,
    DotrError,
    ImportPathError,
    PromptAbortedError,
    RenderError,
    UnitIOError,
    UnknownPackageError,
    UnknownProfileError,
)
from .models import ConfigTree, DeploymentUnit, Package, Profile
from .variables import VariableContext, deep_merge, resolve_variables, select_profile_name

__all__ = [
    # Diffing
    "Change",
    "DiffLine",
    "Hunk",
    "compute_change",
    "format_unified",
    # Enums
    "ChangeKind",
    "Direction",
    "LineTag",
    "OutputFormat",
    "UnitOutcome",
    # Errors
    "ConfigurationError",
    "DotrError",
    "ImportPathError",
    "PromptAbortedError",
    "RenderError",
    "UnitIOError",
    "UnknownPackageError",
    "UnknownProfileError",
    # Models
    "ConfigTree",
    "DeploymentUnit",
    "Package",
    "Profile",
    # Variables
    "VariableContext",
    "deep_merge",
    "resolve_variables",
    "select_profile_name",
]
