"""Jinja2 template adapter.

Detection is a syntactic check for the engine's delimiters (``{{ }}``,
``{% %}``, ``{# #}`` and their whitespace-control ``-`` forms); a file
without them is copied byte for byte. Rendering uses strict undefined
handling so a missing variable fails the unit instead of rendering an
empty string.
"""

from __future__ import annotations

import re
from functools import lru_cache

from jinja2 import Environment, StrictUndefined, TemplateError, TemplateSyntaxError

from ...domain.errors import RenderError
from ...domain.variables import VariableContext

TEMPLATE_PATTERN = re.compile(r"(\{\{-?|-?\}\}|\{%-?|-?%\}|\{#-?|-?#\})")


def detect_template(text: str) -> bool:
    """Return True when *text* contains template delimiters.

    Example:
        >>> detect_template("export EDITOR={{ EDITOR }}")
        True
        >>> detect_template("{%- if work %}x{% endif -%}")
        True
        >>> detect_template("plain = value")
        False
    """
    return TEMPLATE_PATTERN.search(text) is not None


@lru_cache(maxsize=1)
def _environment() -> Environment:
    return Environment(
        autoescape=False,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def render_template(template: str, context: VariableContext) -> str:
    """Render *template* against *context*.

    Raises:
        RenderError: On syntax errors, unknown filters, undefined names, or
            runtime errors raised while evaluating expressions.

    Example:
        >>> render_template("Hi {{ user.name }}\\n", VariableContext({"user": {"name": "Ada"}}))
        'Hi Ada\\n'
        >>> render_template("{{ missing }}", VariableContext())  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ...
        dotr.domain.errors.RenderError: 'missing' is undefined
    """
    try:
        compiled = _environment().from_string(template)
    except TemplateSyntaxError as exc:
        raise RenderError(exc.message or str(exc), line=exc.lineno) from exc
    try:
        return compiled.render(context.as_dict())
    except TemplateError as exc:
        raise RenderError(exc.message or str(exc)) from exc
    except (TypeError, ValueError, ArithmeticError, LookupError) as exc:
        raise RenderError(f"{type(exc).__name__}: {exc}") from exc


__all__ = ["TEMPLATE_PATTERN", "detect_template", "render_template"]
