# File: axumgen/rendering.py
"""
axumgen - Template Rendering
=============================
Boundary to the template engine.  The orchestrator only depends on the
``TemplateRenderer`` protocol; ``JinjaRenderer`` is the shipped
implementation, backed by Jinja2 and the templates bundled in
``axumgen/templates``.

Template files are stored as ``<source path>.j2``; a source path such as
``server/src/main.rs`` is looked up as ``server/src/main.rs.j2``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional, Protocol

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from axumgen.errors import TemplateRenderError
from axumgen.naming import (
    normalize,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_plural,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("axumgen.rendering")

TEMPLATE_SUFFIX: str = ".j2"
BUILTIN_TEMPLATES_DIR: Path = Path(__file__).parent / "templates"


class TemplateRenderer(Protocol):
    def render(self, source_template: str, context: Mapping[str, Any]) -> str:
        ...


def create_jinja_env(templates_dir: Path) -> Environment:
    """Jinja2 environment with the naming helpers registered as filters."""
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=False,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["snake_case"] = normalize
    env.filters["camel_case"] = to_camel_case
    env.filters["pascal_case"] = to_pascal_case
    env.filters["kebab_case"] = to_kebab_case
    env.filters["plural"] = to_plural
    env.filters["upper_snake"] = lambda s: normalize(s).upper()
    return env


class JinjaRenderer:
    """Renders bundled (or user-supplied) ``.j2`` templates."""

    def __init__(self, templates_dir: Optional[Path] = None) -> None:
        self.templates_dir: Path = templates_dir or BUILTIN_TEMPLATES_DIR
        self.env: Environment = create_jinja_env(self.templates_dir)

    def render(self, source_template: str, context: Mapping[str, Any]) -> str:
        name: str = source_template + TEMPLATE_SUFFIX
        try:
            template = self.env.get_template(name)
            return template.render(**dict(context))
        except TemplateError as exc:
            logger.error("Template %s failed: %s", name, exc)
            raise TemplateRenderError(source_template, str(exc)) from exc

    def has_template(self, source_template: str) -> bool:
        return (self.templates_dir / (source_template + TEMPLATE_SUFFIX)).is_file()


__all__: List[str] = [
    "TEMPLATE_SUFFIX",
    "BUILTIN_TEMPLATES_DIR",
    "TemplateRenderer",
    "create_jinja_env",
    "JinjaRenderer",
]

logger.debug("axumgen.rendering loaded — %d public symbols.", len(__all__))
