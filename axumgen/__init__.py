# File: axumgen/__init__.py
"""
axumgen — Rust Backend Generator
=================================

Turns an entity model (JSON/YAML) into a Rust server project: an axum HTTP
layer over Diesel (SQLite, PostgreSQL, MySQL) or MongoDB, with migrations,
docker compose files and CI pipelines.

Architecture overview::

    ┌──────────────┐     ┌────────────────────────┐     ┌──────────────┐
    │  CLI / Entry │────▶│ GenerationOrchestrator │────▶│ JinjaRenderer│
    │   (cli.py)   │     │     (generator.py)     │     │(rendering.py)│
    └──────────────┘     └───────────┬────────────┘     └──────────────┘
                                     │
           ┌──────────────┬──────────┼───────────┬───────────────┐
           ▼              ▼          ▼           ▼               ▼
     ┌───────────┐ ┌────────────┐ ┌────────┐ ┌───────────┐ ┌────────────┐
     │type_mapping│ │  planner   │ │ models │ │ injection │ │ migrations │
     │   (.py)   │ │+ manifests │ │ (.py)  │ │   (.py)   │ │   (.py)    │
     └───────────┘ └────────────┘ └────────┘ └───────────┘ └────────────┘

Usage::

    # As a library
    from axumgen import GenerationOrchestrator, GenerationConfig, EntityDescriptor
    report = GenerationOrchestrator().generate(config, entities, Path("./out"))

    # From the command line
    python -m axumgen --model model.yaml --output ./shop --dialect postgresql
"""

from __future__ import annotations

__version__: str = "0.1.0"

from axumgen.errors import (
    AxumgenError,
    MarkerNotFoundError,
    PlanningError,
    TemplateRenderError,
    ToolInvocationWarning,
)
from axumgen.models import (
    AuthMode,
    CiCdProvider,
    DialectProfile,
    EntityDescriptor,
    FieldSpec,
    GenerationConfig,
    RelationshipSpec,
    ServiceDiscovery,
    Topology,
)
from axumgen.naming import normalize, to_camel_case, to_kebab_case, to_pascal_case
from axumgen.type_mapping import FieldKind, ResolvedType, resolve
from axumgen.planner import ExclusiveChoice, OutputGroup, ResolvedFile, plan
from axumgen.injection import Marker, SourceHelpers, StrictInjector, TolerantInjector
from axumgen.migrations import MigrationRegistry, SchemaSyncTool
from axumgen.validators import ValidationResult, validate_full
from axumgen.generator import GenerationOrchestrator, GenerationReport

__all__: list[str] = [
    "__version__",
    # Orchestrator
    "GenerationOrchestrator",
    "GenerationReport",
    # Models
    "AuthMode",
    "CiCdProvider",
    "DialectProfile",
    "EntityDescriptor",
    "FieldSpec",
    "GenerationConfig",
    "RelationshipSpec",
    "ServiceDiscovery",
    "Topology",
    # Errors
    "AxumgenError",
    "MarkerNotFoundError",
    "PlanningError",
    "TemplateRenderError",
    "ToolInvocationWarning",
    # Components
    "normalize",
    "to_camel_case",
    "to_kebab_case",
    "to_pascal_case",
    "FieldKind",
    "ResolvedType",
    "resolve",
    "ExclusiveChoice",
    "OutputGroup",
    "ResolvedFile",
    "plan",
    "Marker",
    "SourceHelpers",
    "StrictInjector",
    "TolerantInjector",
    "MigrationRegistry",
    "SchemaSyncTool",
    "ValidationResult",
    "validate_full",
]
