"""Public package surface exposing the deployment engine, metadata and wiring.

This module provides the stable public API for the package, routing imports
through the proper architectural layers:
- Domain exports: configuration models and errors
- Application exports: package resolution and the deployment pipeline
- Composition exports: wired adapter services
- Metadata: Package information
"""

from __future__ import annotations

# Metadata
from .__init__conf__ import print_info

# Application exports
from .application import DeploymentPipeline, RunReport, resolve_units

# Composition exports (wired adapters)
from .composition import AppServices, build_production, build_testing

# Domain exports
from .domain import ConfigTree, DeploymentUnit, Direction, DotrError, Package, Profile, resolve_variables

__all__ = [
    "AppServices",
    "ConfigTree",
    "DeploymentPipeline",
    "DeploymentUnit",
    "Direction",
    "DotrError",
    "Package",
    "Profile",
    "RunReport",
    "build_production",
    "build_testing",
    "print_info",
    "resolve_units",
    "resolve_variables",
]
