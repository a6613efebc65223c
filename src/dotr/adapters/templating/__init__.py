"""Templating adapter - Jinja2 detection and rendering.

Contents:
    * :mod:`.jinja` - Template detection and strict renderer
"""

from __future__ import annotations

from .jinja import detect_template, render_template

__all__ = ["detect_template", "render_template"]
