# File: axumgen/injection.py
"""
axumgen - Marker-Based Code Injection
======================================
Edits already-generated aggregator files (``mod.rs``, ``main.rs``,
``openapi.rs``) so that they reference newly generated entity modules.

A *marker* is a stable comment token placed in a template, e.g.::

    // axumgen-needle-add-entity-model

``inject`` inserts the addition on the line(s) immediately before the marker
line, each inserted line indented exactly like the marker line.  Everything
else in the file is left byte-for-byte unchanged, so the marker stays in
place for the next insertion.

There is no deduplication: injecting the same addition twice inserts it
twice.  The orchestrator relies on running each injection once per entity
per run.

Two policies for a missing marker:

    StrictInjector    raises ``MarkerNotFoundError``
    TolerantInjector  logs a warning, records it and leaves the content as is
"""

from __future__ import annotations

import abc
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from axumgen.errors import MarkerNotFoundError
from axumgen.models import EntityDescriptor
from axumgen.utils import read_file, write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("axumgen.injection")


class Marker(str, Enum):
    """Marker tokens carried by the aggregator templates."""

    ENTITY_MODEL = "axumgen-needle-add-entity-model"
    ENTITY_HANDLER = "axumgen-needle-add-entity-handler"
    ENTITY_SERVICE = "axumgen-needle-add-entity-service"
    ENTITY_DTO = "axumgen-needle-add-entity-dto"
    ENTITY_ROUTE = "axumgen-needle-add-entity-route"
    OPENAPI_PATH = "axumgen-needle-add-openapi-path"
    OPENAPI_SCHEMA = "axumgen-needle-add-openapi-schema"
    OPENAPI_TAG = "axumgen-needle-add-openapi-tag"


MarkerLike = Union[Marker, str]


def _token(marker: MarkerLike) -> str:
    return marker.value if isinstance(marker, Marker) else marker


def _line_ending(line: str) -> str:
    return "\r\n" if line.endswith("\r\n") else "\n"


def insert_before_marker(content: str, token: str, addition: str) -> Optional[str]:
    """
    Return *content* with *addition* inserted before the first line holding
    *token*, or ``None`` when no line holds it.
    """
    lines: List[str] = content.splitlines(keepends=True)
    for index, line in enumerate(lines):
        if token not in line:
            continue
        indent: str = line[: len(line) - len(line.lstrip(" \t"))]
        eol: str = _line_ending(line)
        inserted: List[str] = [
            f"{indent}{part}{eol}" for part in addition.splitlines()
        ]
        return "".join(lines[:index] + inserted + lines[index:])
    return None


# ---------------------------------------------------------------------------
# Injectors
# ---------------------------------------------------------------------------


class Injector(abc.ABC):
    """Inserts text before a marker line; subclasses decide what a miss means."""

    def inject(
        self,
        content: str,
        marker: MarkerLike,
        addition: str,
        *,
        path: Optional[Path] = None,
    ) -> str:
        token: str = _token(marker)
        updated: Optional[str] = insert_before_marker(content, token, addition)
        if updated is None:
            return self._on_missing(content, token, path)
        logger.debug("Injected %d line(s) before '%s' in %s.", len(addition.splitlines()), token, path or "<content>")
        return updated

    def inject_file(self, path: Path, marker: MarkerLike, addition: str) -> bool:
        """
        Apply ``inject`` to the file at *path* and write it back.

        Returns True when the file was modified.  A missing file is treated
        like a missing marker.
        """
        if not path.is_file():
            self._on_missing("", _token(marker), path)
            return False
        original: str = read_file(path)
        updated: str = self.inject(original, marker, addition, path=path)
        if updated == original:
            return False
        write_file(path, updated)
        return True

    @abc.abstractmethod
    def _on_missing(self, content: str, token: str, path: Optional[Path]) -> str:
        """Handle a marker that is not present; returns the content to keep."""


class StrictInjector(Injector):
    """A missing marker aborts the run."""

    def _on_missing(self, content: str, token: str, path: Optional[Path]) -> str:
        logger.error("Marker '%s' not found in %s.", token, path or "<content>")
        raise MarkerNotFoundError(token, path)


class TolerantInjector(Injector):
    """A missing marker is recorded in ``warnings`` and skipped."""

    def __init__(self) -> None:
        self.warnings: List[str] = []

    def _on_missing(self, content: str, token: str, path: Optional[Path]) -> str:
        message: str = f"Marker '{token}' not found in {path or '<content>'}; injection skipped"
        logger.warning(message)
        self.warnings.append(message)
        return content


# ---------------------------------------------------------------------------
# Source helpers
# ---------------------------------------------------------------------------


class SourceHelpers:
    """
    Named injection operations on the generated server crate.

    Each method issues exactly one injection.  Sibling generators (and the
    orchestrator's post-writing phase) call these instead of editing files
    directly.
    """

    def __init__(self, injector: Injector, server_dir: Path) -> None:
        self.injector: Injector = injector
        self.server_dir: Path = server_dir

    def _src(self, *parts: str) -> Path:
        return self.server_dir.joinpath("src", *parts)

    # -- Module registration -------------------------------------------------

    def add_entity_to_models(self, entity: EntityDescriptor) -> bool:
        module: str = entity.module_name
        return self.injector.inject_file(
            self._src("models", "mod.rs"),
            Marker.ENTITY_MODEL,
            f"pub mod {module};\npub use {module}::*;",
        )

    def add_entity_to_handlers(self, entity: EntityDescriptor) -> bool:
        return self.injector.inject_file(
            self._src("handlers", "mod.rs"),
            Marker.ENTITY_HANDLER,
            f"pub mod {entity.module_name};",
        )

    def add_entity_to_services(self, entity: EntityDescriptor) -> bool:
        module: str = f"{entity.module_name}_service"
        return self.injector.inject_file(
            self._src("services", "mod.rs"),
            Marker.ENTITY_SERVICE,
            f"pub mod {module};\npub use {module}::*;",
        )

    def add_entity_to_dto(self, entity: EntityDescriptor) -> bool:
        module: str = f"{entity.module_name}_dto"
        return self.injector.inject_file(
            self._src("dto", "mod.rs"),
            Marker.ENTITY_DTO,
            f"pub mod {module};\npub use {module}::*;",
        )

    def add_entity_routes_to_main(self, entity: EntityDescriptor) -> bool:
        # Routes live inside api_routes(), already nested under /api.
        return self.injector.inject_file(
            self._src("main.rs"),
            Marker.ENTITY_ROUTE,
            f'.nest("/{entity.api_path}", handlers::{entity.module_name}::routes())',
        )

    # -- OpenAPI registration ------------------------------------------------

    def add_entity_to_openapi_paths(self, entity: EntityDescriptor) -> bool:
        module: str = entity.module_name
        handlers: List[str] = [
            f"handlers::{module}::{op},"
            for op in ("get_all", "get_one", "create", "update", "remove")
        ]
        return self.injector.inject_file(
            self._src("openapi.rs"), Marker.OPENAPI_PATH, "\n".join(handlers)
        )

    def add_entity_to_openapi_schemas(self, entity: EntityDescriptor) -> bool:
        cls: str = entity.entity_class
        return self.injector.inject_file(
            self._src("openapi.rs"),
            Marker.OPENAPI_SCHEMA,
            f"{cls}Dto,\nCreate{cls}Dto,\nUpdate{cls}Dto,",
        )

    def add_entity_to_openapi_tags(self, entity: EntityDescriptor) -> bool:
        return self.injector.inject_file(
            self._src("openapi.rs"),
            Marker.OPENAPI_TAG,
            f'(name = "{entity.api_path}", description = "{entity.entity_class} management endpoints"),',
        )


__all__: List[str] = [
    "Marker",
    "insert_before_marker",
    "Injector",
    "StrictInjector",
    "TolerantInjector",
    "SourceHelpers",
]

logger.debug("axumgen.injection loaded — %d public symbols.", len(__all__))
