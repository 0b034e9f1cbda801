"""Rendering of help, usage and version templates for commands."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import jinja2


def rpad(text: Any, padding: int) -> str:
    """Left-justify ``text`` in a field at least ``padding`` characters wide."""
    return f"{text!s:<{int(padding)}}"


def trim_trailing_whitespaces(text: Any) -> str:
    """Remove all trailing whitespace from ``text``."""
    return str(text).rstrip()


def _build_environment() -> jinja2.Environment:
    environment = jinja2.Environment(
        autoescape=False,
        keep_trailing_newline=True,
        undefined=jinja2.StrictUndefined,
    )
    helpers = {
        "rpad": rpad,
        "trim_trailing_whitespaces": trim_trailing_whitespaces,
    }
    environment.filters.update(helpers)
    environment.globals.update(helpers)
    return environment


_ENVIRONMENT = _build_environment()


@lru_cache(maxsize=64)
def _compile(template: str) -> jinja2.Template:
    return _ENVIRONMENT.from_string(template)


def render(template: str, command: Any) -> str:
    """Render a Jinja2 ``template`` with ``command`` available as ``cmd``.

    The helpers ``rpad`` and ``trim_trailing_whitespaces`` are available both
    as filters and as functions. Unknown names or attributes raise
    :class:`jinja2.UndefinedError`; syntax errors raise
    :class:`jinja2.TemplateSyntaxError`.
    """
    return _compile(template).render(cmd=command)