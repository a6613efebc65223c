"""Configuration adapter - dotr's own layered settings.

Contents:
    * :mod:`.loader` - Settings loading with caching
    * :mod:`.settings` - Typed ``[dotr]`` section
    * :mod:`.display` - Settings display in human/JSON formats
    * :mod:`.overrides` - CLI ``--set`` override parsing and application
"""

from __future__ import annotations

from .display import display_config
from .loader import get_config, get_default_config_path
from .overrides import apply_overrides
from .settings import DotrSettings, load_settings

__all__ = [
    "DotrSettings",
    "apply_overrides",
    "display_config",
    "get_config",
    "get_default_config_path",
    "load_settings",
]
