# File: axumgen/errors.py
"""
axumgen - Error Taxonomy
=========================

Exceptions raised across the generation pipeline.

    AxumgenError
    ├── PlanningError          — raised before any file is written
    ├── MarkerNotFoundError    — strict-mode injection target lacks its marker
    └── TemplateRenderError    — a template could not be loaded or rendered

``ToolInvocationWarning`` is a warning *category*: external tool failures are
recorded on the ``GenerationReport`` and never abort a run.

Unmapped field kinds are not an error at all — see ``axumgen.type_mapping``.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union


class AxumgenError(Exception):
    """Base class for every error raised by axumgen."""


class PlanningError(AxumgenError):
    """
    The file-set plan cannot be built from the current configuration.

    Raised when a required exclusive choice matches zero or several of its
    groups, or when an entity-scoped template is planned without an entity.
    Planning errors surface before anything is written.
    """

    def __init__(self, message: str, *, group: Optional[str] = None) -> None:
        super().__init__(message)
        self.group: Optional[str] = group


class MarkerNotFoundError(AxumgenError):
    """A strict injection could not find its marker in the target file."""

    def __init__(self, marker: str, path: Optional[Union[str, Path]] = None) -> None:
        self.marker: str = marker
        self.path: Optional[str] = str(path) if path is not None else None
        where: str = self.path if self.path is not None else "<content>"
        super().__init__(f"Marker '{marker}' not found in {where}")


class TemplateRenderError(AxumgenError):
    """A template failed to load or render."""

    def __init__(self, template: str, reason: str) -> None:
        self.template: str = template
        super().__init__(f"Cannot render template '{template}': {reason}")


class ToolInvocationWarning(UserWarning):
    """Category for failures of optional external tools (schema sync)."""


__all__: List[str] = [
    "AxumgenError",
    "PlanningError",
    "MarkerNotFoundError",
    "TemplateRenderError",
    "ToolInvocationWarning",
]
