"""Adapters layer - infrastructure and framework integrations.

Contains adapter implementations that connect the application to external
systems and frameworks (CLI, settings, files, templates, shell, logging).

Contents:
    * :mod:`.config` - Tool settings loading, overrides, and display
    * :mod:`.repository` - ``config.toml`` and user-variable files via rtoml
    * :mod:`.filesystem` - Local atomic file I/O
    * :mod:`.templating` - Jinja2 detection and rendering
    * :mod:`.system` - Shell actions and console prompts
    * :mod:`.logging` - Logging setup with lib_log_rich
    * :mod:`.memory` - In-memory doubles for tests
    * :mod:`.cli` - Click CLI framework integration
"""

from __future__ import annotations

__all__: list[str] = []
