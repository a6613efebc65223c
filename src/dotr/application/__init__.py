"""Application layer - use cases and port definitions.

Contains use cases that orchestrate domain logic and port protocols that
define the interfaces for adapter implementations.

Contents:
    * :mod:`.ports` - Callable Protocol definitions for adapter functions
    * :mod:`.resolver` - Package selection and unit expansion
    * :mod:`.prompts` - Prompt store for user-secret variables
    * :mod:`.pipeline` - Deploy, update and diff over units
    * :mod:`.importer` - Repository init and path import
    * :mod:`.inspect` - Resolved variable display
"""

from __future__ import annotations

from .importer import ImportResult, InitResult, import_path, init_repository
from .inspect import collect_variables, format_variable_tree
from .pipeline import ActionReport, DeploymentPipeline, RunReport, UnitReport
from .prompts import PromptStore, gather_prompts
from .resolver import resolve_units, select_packages

__all__ = [
    "ActionReport",
    "DeploymentPipeline",
    "ImportResult",
    "InitResult",
    "PromptStore",
    "RunReport",
    "UnitReport",
    "collect_variables",
    "format_variable_tree",
    "gather_prompts",
    "import_path",
    "init_repository",
    "resolve_units",
    "select_packages",
]
