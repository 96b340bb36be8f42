# File: axumgen/generator.py
"""
axumgen - Generation Orchestrator
==================================
Drives a complete generation run:

    Model Input → Annotation → Planning → Rendering → Injection → Schema Sync

The ``GenerationOrchestrator`` class provides both a programmatic API and
the backend for the CLI.

Phases (fixed order, single-threaded)::

    1. configure       the frozen ``GenerationConfig`` is adopted as is
    2. dependencies    crate versions for Cargo.toml / Dockerfile
    3. annotate        skip-server and built-in entities are filtered out,
                       remaining fields get their type projections
    4. plan            every file of the run is planned; a ``PlanningError``
                       ends the run before the first write
    5. write           global files
    6. entities        per entity, in caller order: entity files, then its
                       migration (relational dialects only)
    7. post_writing    docker ``services.yml`` override, stale compose files
    8. inject          aggregator registration through ``SourceHelpers``
    9. end             optional schema-sync tool

Error handling strategy:
    - Planning errors abort the run with nothing written.
    - Render errors are isolated per entity; the other entities still
      generate, the failed entity is neither migrated nor injected.
    - A missing marker in strict mode ends the run (no schema sync).
    - Schema-sync failures are tool warnings; they never fail the run.
    - The final report gives a clear pass/fail verdict.

Hooks registered with ``add_hook(phase, fn)`` run right after the named
phase and receive the live ``GenerationRun``.
"""

from __future__ import annotations

import json
import logging
import time
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import yaml
from pydantic import ValidationError

from axumgen.errors import (
    MarkerNotFoundError,
    PlanningError,
    TemplateRenderError,
    ToolInvocationWarning,
)
from axumgen.injection import Injector, SourceHelpers, StrictInjector, TolerantInjector
from axumgen.manifests import (
    CI_CD_FILES,
    DOCKER_FILES,
    DOCKER_OVERRIDE_FILES,
    ENTITY_FILES,
    ENTITY_MIGRATION_TEMPLATES,
    SERVER_DIR,
    SERVER_FILES,
    stale_docker_files,
)
from axumgen.migrations import MigrationRegistry, SchemaSyncTool, ToolOutcome
from axumgen.models import DependencyMetadata, EntityDescriptor, GenerationConfig
from axumgen.planner import ResolvedFile, plan
from axumgen.rendering import JinjaRenderer, TemplateRenderer
from axumgen.type_mapping import AnnotatedField, annotate_field
from axumgen.utils import Timer, count_lines, write_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("axumgen.generator")

PHASES: Tuple[str, ...] = (
    "configure",
    "dependencies",
    "annotate",
    "plan",
    "write",
    "entities",
    "post_writing",
    "inject",
    "end",
)


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline phase."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """
    Report produced by ``GenerationOrchestrator.generate()``.

    ``success`` is False when any planning error, entity error, generation
    error or fatal marker error occurred.  Tool warnings and tolerant
    injection warnings do not affect it.
    """

    success: bool = False
    project_name: str = ""
    output_directory: str = ""

    # Metrics
    total_files: int = 0
    total_bytes: int = 0
    total_lines: int = 0
    entities_processed: int = 0
    total_elapsed_seconds: float = 0.0

    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    written_files: List[str] = field(default_factory=list)
    deleted_files: List[str] = field(default_factory=list)
    migrations_created: List[str] = field(default_factory=list)
    migrations_skipped: List[str] = field(default_factory=list)
    injection_warnings: List[str] = field(default_factory=list)
    tool_warnings: List[str] = field(default_factory=list)
    entity_errors: Dict[str, str] = field(default_factory=dict)
    planning_errors: List[str] = field(default_factory=list)
    generation_errors: List[str] = field(default_factory=list)
    fatal_error: Optional[str] = None

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "✅ SUCCESS" if self.success else "❌ FAILED"
        lines.append(f"{'='*60}")
        lines.append("  axumgen — Generation Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:             {status}")
        lines.append(f"  Project:            {self.project_name}")
        lines.append(f"  Output:             {self.output_directory}")
        lines.append(f"  Entities processed: {self.entities_processed}")
        lines.append(f"  Files written:      {self.total_files}")
        lines.append(f"  Total lines:        {self.total_lines:,}")
        lines.append(f"  Total bytes:        {self.total_bytes:,}")
        lines.append(f"  Migrations:         {len(self.migrations_created)} created, "
                     f"{len(self.migrations_skipped)} skipped")
        lines.append(f"  Total time:         {self.total_elapsed_seconds:.3f}s")
        lines.append(f"{'─'*60}")

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<16s} "
                    f"{step.elapsed_seconds:>7.3f}s  "
                    f"{step.detail}"
                )

        sections: List[Tuple[str, str, List[str]]] = [
            ("Planning Errors", "✗", self.planning_errors),
            ("Generation Errors", "✗", self.generation_errors),
            ("Entity Errors", "✗", [f"{k}: {v}" for k, v in self.entity_errors.items()]),
            ("Injection Warnings", "⚠", self.injection_warnings),
            ("Tool Warnings", "⚠", self.tool_warnings),
            ("Deleted Files", "⊘", self.deleted_files),
        ]
        for title, icon, items in sections:
            if not items:
                continue
            lines.append(f"{'─'*60}")
            lines.append(f"  {title} ({len(items)}):")
            for item in items:
                lines.append(f"    {icon} {item}")

        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Model loader helpers
# ---------------------------------------------------------------------------


def _load_json_file(path: Path) -> Dict[str, Any]:
    """Load and parse a JSON file. Raises ValueError on parse errors."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a JSON object at top level, got {type(data).__name__}."
        )
    return data


def _load_yaml_file(path: Path) -> Dict[str, Any]:
    """Load and parse a YAML file. Raises ValueError on parse errors."""
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(
            f"Expected a YAML mapping at top level, got {type(data).__name__}."
        )
    return data


def load_model_file(path: Path) -> Dict[str, Any]:
    """
    Load an entity model file (JSON or YAML), dispatching on the extension.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file can't be parsed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Model file not found: {path}")
    if not path.is_file():
        raise ValueError(f"Model path is not a file: {path}")

    suffix: str = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _load_yaml_file(path)
    if suffix == ".json":
        return _load_json_file(path)

    logger.info("Unknown extension '%s' — trying JSON then YAML.", suffix)
    try:
        return _load_json_file(path)
    except ValueError:
        return _load_yaml_file(path)


def parse_raw_model(
    raw: Dict[str, Any],
) -> Tuple[GenerationConfig, List[EntityDescriptor]]:
    """
    Parse a raw dictionary (from JSON/YAML) into validated models.

    Expected top-level keys:
        - "config" (or "generation_config"): the run configuration
        - "entities": a list of entity descriptors

    Raises:
        ValueError: If the structure is wrong or model validation fails.
    """
    config_data: Any = raw.get("config", raw.get("generation_config"))
    if config_data is None:
        logger.info("No config found in input — using defaults.")
        config_data = {}
    if not isinstance(config_data, dict):
        raise ValueError("'config' must be a mapping.")

    entities_data: Any = raw.get("entities", [])
    if not isinstance(entities_data, list):
        raise ValueError("'entities' must be a list of entity descriptors.")

    try:
        config: GenerationConfig = GenerationConfig.model_validate(config_data)
    except ValidationError as exc:
        raise ValueError(f"Config validation failed: {exc}") from exc

    entities: List[EntityDescriptor] = []
    for index, item in enumerate(entities_data):
        try:
            entities.append(EntityDescriptor.model_validate(item))
        except ValidationError as exc:
            raise ValueError(f"Entity #{index} validation failed: {exc}") from exc

    return config, entities


def apply_config_overrides(
    raw: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Return a copy of *raw* whose ``config`` mapping is updated with *overrides*.

    Raises:
        ValueError: If the existing ``config`` entry is not a mapping.
    """
    key: str = "generation_config" if "config" not in raw and "generation_config" in raw else "config"
    existing: Any = raw.get(key)
    if existing is not None and not isinstance(existing, dict):
        raise ValueError(f"'{key}' must be a mapping.")
    merged: Dict[str, Any] = dict(existing or {})
    merged.update(overrides)
    return {**raw, key: merged}


# ---------------------------------------------------------------------------
# Run state
# ---------------------------------------------------------------------------


@dataclass
class AnnotatedEntity:
    """An entity that passed filtering, with its server-side fields annotated."""

    entity: EntityDescriptor
    fields: List[AnnotatedField]

    @property
    def name(self) -> str:
        return self.entity.name

    def to_context(self) -> Dict[str, Any]:
        e: EntityDescriptor = self.entity
        return {
            "entity_name": e.name,
            "entity_class": e.entity_class,
            "entity_file_name": e.entity_file_name,
            "module_name": e.module_name,
            "table_name": e.table_name,
            "api_path": e.api_path,
            "changelog_date": e.changelog_date,
            "fields": [f.to_context() for f in self.fields],
        }


@dataclass
class RunPlan:
    """Every file a run will write, computed before the first write."""

    global_files: List[ResolvedFile] = field(default_factory=list)
    override_files: List[ResolvedFile] = field(default_factory=list)
    entity_files: Dict[str, List[ResolvedFile]] = field(default_factory=dict)

    def destinations(self) -> List[str]:
        seen: Dict[str, None] = {}
        for rf in self.global_files:
            seen[rf.destination] = None
        for files in self.entity_files.values():
            for rf in files:
                seen[rf.destination] = None
        for rf in self.override_files:
            seen[rf.destination] = None
        return list(seen)


@dataclass
class GenerationRun:
    """Mutable state of one run, handed to phase hooks."""

    config: GenerationConfig
    destination: Path
    report: GenerationReport
    helpers: SourceHelpers
    dependencies: Dict[str, str] = field(default_factory=dict)
    entities: List[AnnotatedEntity] = field(default_factory=list)
    plan: Optional[RunPlan] = None
    context: Dict[str, Any] = field(default_factory=dict)
    generated_entities: List[AnnotatedEntity] = field(default_factory=list)


Hook = Callable[[GenerationRun], None]


def annotate_entities(
    entities: Sequence[EntityDescriptor], config: GenerationConfig
) -> List[AnnotatedEntity]:
    """Drop skip-server / built-in entities and skip-server fields; annotate the rest."""
    annotated: List[AnnotatedEntity] = []
    for entity in entities:
        if not entity.is_generated:
            logger.info("Entity %s is not generated (skip_server/built_in).", entity.name)
            continue
        fields: List[AnnotatedField] = [
            annotate_field(f, config) for f in entity.fields if not f.skip_server
        ]
        annotated.append(AnnotatedEntity(entity=entity, fields=fields))
    return annotated


def plan_run(config: GenerationConfig, entities: Sequence[AnnotatedEntity]) -> RunPlan:
    """Plan global, docker, CI/CD, override and per-entity files. Raises ``PlanningError``."""
    run_plan: RunPlan = RunPlan()
    run_plan.global_files = plan([*SERVER_FILES, *DOCKER_FILES, *CI_CD_FILES], config)
    run_plan.override_files = plan(DOCKER_OVERRIDE_FILES, config)
    for item in entities:
        run_plan.entity_files[item.name] = plan(ENTITY_FILES, config, item.entity)
    return run_plan


# ---------------------------------------------------------------------------
# GenerationOrchestrator
# ---------------------------------------------------------------------------


class GenerationOrchestrator:
    """
    Runs the generation pipeline.

    Usage::

        orchestrator = GenerationOrchestrator()

        report = orchestrator.generate_from_file(
            Path("model.yaml"), Path("./out"),
        )

        report = orchestrator.generate(config, entities, Path("./out"))
        print(report.summary())

    The orchestrator is reusable; create once, call generate() many times.
    """

    def __init__(
        self,
        renderer: Optional[TemplateRenderer] = None,
        *,
        strict: bool = True,
        schema_sync: Optional[SchemaSyncTool] = None,
        run_schema_sync: bool = True,
        dependency_metadata: Optional[DependencyMetadata] = None,
    ) -> None:
        """
        Args:
            renderer: Template renderer; defaults to the bundled Jinja2 templates.
            strict: Strict injection (missing marker ends the run) or tolerant.
            schema_sync: Tool run at the end of relational runs.
            run_schema_sync: Set False to never invoke the schema-sync tool.
            dependency_metadata: Toolchain / crate versions for templates.
        """
        self._renderer: TemplateRenderer = renderer or JinjaRenderer()
        self._strict: bool = strict
        self._schema_sync: Optional[SchemaSyncTool] = (
            (schema_sync or SchemaSyncTool()) if run_schema_sync else None
        )
        self._dependency_metadata: DependencyMetadata = (
            dependency_metadata or DependencyMetadata()
        )
        self._hooks: Dict[str, List[Hook]] = {phase: [] for phase in PHASES}

        logger.debug(
            "GenerationOrchestrator initialised: strict=%s, schema_sync=%s.",
            strict,
            self._schema_sync is not None,
        )

    def add_hook(self, phase: str, fn: Hook) -> None:
        """Run *fn(run)* right after *phase* completes."""
        if phase not in self._hooks:
            raise ValueError(f"Unknown phase '{phase}'. Expected one of: {', '.join(PHASES)}")
        self._hooks[phase].append(fn)

    def _new_injector(self) -> Injector:
        return StrictInjector() if self._strict else TolerantInjector()

    # -----------------------------------------------------------------
    # Public: generate from file
    # -----------------------------------------------------------------

    def generate_from_file(
        self,
        model_path: Path,
        destination: Path,
        config_overrides: Optional[Dict[str, Any]] = None,
    ) -> GenerationReport:
        """
        Load a model file, apply *config_overrides* and run ``generate``.

        Load and parse failures are reported, not raised.
        """
        report: GenerationReport = GenerationReport()
        report.output_directory = str(destination.resolve())

        with Timer("load_model") as t_load:
            try:
                raw: Dict[str, Any] = load_model_file(model_path)
                if config_overrides:
                    raw = apply_config_overrides(raw, config_overrides)
                config, entities = parse_raw_model(raw)
            except (FileNotFoundError, ValueError) as exc:
                report.generation_errors.append(str(exc))
                report.step_metrics.append(GenerationStepMetric(
                    step_name="load",
                    success=False,
                    elapsed_seconds=t_load.elapsed,
                    detail=str(exc),
                ))
                return self._finalise_report(report, t_load.elapsed)

        report.step_metrics.append(GenerationStepMetric(
            step_name="load",
            success=True,
            elapsed_seconds=t_load.elapsed,
            detail=f"{len(entities)} entities from {model_path.name}",
        ))
        return self._run_pipeline(config, entities, destination, report)

    # -----------------------------------------------------------------
    # Public: generate from in-memory objects
    # -----------------------------------------------------------------

    def generate(
        self,
        config: GenerationConfig,
        entities: Sequence[EntityDescriptor],
        destination: Path,
    ) -> GenerationReport:
        report: GenerationReport = GenerationReport()
        report.output_directory = str(destination.resolve())
        return self._run_pipeline(config, entities, destination, report)

    # -----------------------------------------------------------------
    # Internal: pipeline
    # -----------------------------------------------------------------

    def _run_pipeline(
        self,
        config: GenerationConfig,
        entities: Sequence[EntityDescriptor],
        destination: Path,
        report: GenerationReport,
    ) -> GenerationReport:
        pipeline_start: float = time.perf_counter()
        report.project_name = config.base_name

        injector: Injector = self._new_injector()
        run: GenerationRun = GenerationRun(
            config=config,
            destination=destination,
            report=report,
            helpers=SourceHelpers(injector, destination / SERVER_DIR),
        )

        self._step_configure(run)
        self._step_dependencies(run)
        self._step_annotate(run, entities)
        if not self._step_plan(run):
            return self._finalise_report(report, time.perf_counter() - pipeline_start)

        self._step_write(run)
        self._step_entities(run)
        self._step_post_writing(run)

        try:
            self._step_inject(run)
        except MarkerNotFoundError as exc:
            report.fatal_error = str(exc)
            report.generation_errors.append(str(exc))
            return self._finalise_report(report, time.perf_counter() - pipeline_start)
        finally:
            if isinstance(injector, TolerantInjector):
                report.injection_warnings.extend(injector.warnings)

        self._step_end(run)
        return self._finalise_report(report, time.perf_counter() - pipeline_start)

    def _metric(
        self, run: GenerationRun, name: str, timer: Timer, success: bool, detail: str
    ) -> None:
        run.report.step_metrics.append(GenerationStepMetric(
            step_name=name,
            success=success,
            elapsed_seconds=timer.elapsed,
            detail=detail,
        ))

    def _run_hooks(self, phase: str, run: GenerationRun) -> None:
        for fn in self._hooks[phase]:
            logger.debug("Running hook %r after phase '%s'.", fn, phase)
            fn(run)

    def _write(self, run: GenerationRun, relative: str, content: str) -> None:
        written: int = write_file(run.destination / relative, content)
        run.report.written_files.append(relative)
        run.report.total_files += 1
        run.report.total_bytes += written
        run.report.total_lines += count_lines(content)

    # -----------------------------------------------------------------
    # Phases
    # -----------------------------------------------------------------

    def _step_configure(self, run: GenerationRun) -> None:
        config: GenerationConfig = run.config
        with Timer("configure") as t:
            if config.email_enabled and not config.email_active:
                logger.info("E-mail disabled: only available with jwt authentication.")
            run.context = config.template_context()
        self._metric(
            run, "configure", t, True,
            f"{config.dialect.value}, {config.auth_mode.value}, {config.topology.value}",
        )
        self._run_hooks("configure", run)

    def _step_dependencies(self, run: GenerationRun) -> None:
        with Timer("dependencies") as t:
            run.dependencies = self._dependency_metadata.for_config(run.config)
            run.context["rust_version"] = self._dependency_metadata.rust_version
            run.context["dependencies"] = run.dependencies
        self._metric(run, "dependencies", t, True, f"{len(run.dependencies)} crates")
        self._run_hooks("dependencies", run)

    def _step_annotate(
        self, run: GenerationRun, entities: Sequence[EntityDescriptor]
    ) -> None:
        with Timer("annotate") as t:
            run.entities = annotate_entities(entities, run.config)
            run.context["entities"] = [e.to_context() for e in run.entities]
        run.report.entities_processed = len(run.entities)
        self._metric(
            run, "annotate", t, True,
            f"{len(run.entities)} of {len(entities)} entities generated",
        )
        self._run_hooks("annotate", run)

    def _step_plan(self, run: GenerationRun) -> bool:
        with Timer("plan") as t:
            try:
                run.plan = plan_run(run.config, run.entities)
            except PlanningError as exc:
                logger.error("Planning failed, nothing written: %s", exc)
                run.report.planning_errors.append(str(exc))
                self._metric(run, "plan", t, False, str(exc))
                return False
        self._metric(run, "plan", t, True, f"{len(run.plan.destinations())} files")
        self._run_hooks("plan", run)
        return True

    def _step_write(self, run: GenerationRun) -> None:
        assert run.plan is not None
        errors_before: int = len(run.report.generation_errors)
        with Timer("write") as t:
            for rf in run.plan.global_files:
                try:
                    content: str = self._renderer.render(rf.source_template, run.context)
                    self._write(run, rf.destination, content)
                except (TemplateRenderError, OSError) as exc:
                    logger.error("Global file %s failed: %s", rf.destination, exc)
                    run.report.generation_errors.append(f"{rf.destination}: {exc}")
        failed: int = len(run.report.generation_errors) - errors_before
        self._metric(
            run, "write", t, failed == 0,
            f"{len(run.plan.global_files) - failed} global files",
        )
        self._run_hooks("write", run)

    def _step_entities(self, run: GenerationRun) -> None:
        assert run.plan is not None
        registry: Optional[MigrationRegistry] = (
            MigrationRegistry(run.destination) if run.config.is_relational else None
        )
        with Timer("entities") as t:
            for item in run.entities:
                ctx: Dict[str, Any] = {**run.context, **item.to_context()}
                try:
                    rendered: List[Tuple[str, str]] = [
                        (rf.destination, self._renderer.render(rf.source_template, ctx))
                        for rf in run.plan.entity_files[item.name]
                    ]
                    migration: Optional[List[Tuple[str, str]]] = None
                    if registry is not None:
                        migration = self._render_migration(registry, item, ctx, run.report)

                    for relative, content in rendered:
                        self._write(run, relative, content)
                    if migration:
                        for relative, content in migration:
                            self._write(run, relative, content)
                except (TemplateRenderError, OSError) as exc:
                    logger.error("Entity %s failed: %s", item.name, exc)
                    run.report.entity_errors[item.name] = str(exc)
                    continue

                if migration:
                    assert registry is not None
                    run.report.migrations_created.append(registry.directory_name(item.entity))
                run.generated_entities.append(item)

        self._metric(
            run, "entities", t, not run.report.entity_errors,
            f"{len(run.generated_entities)} entities, "
            f"{len(run.report.migrations_created)} migrations",
        )
        self._run_hooks("entities", run)

    def _render_migration(
        self,
        registry: MigrationRegistry,
        item: AnnotatedEntity,
        ctx: Dict[str, Any],
        report: GenerationReport,
    ) -> Optional[List[Tuple[str, str]]]:
        if not registry.should_create(item.entity):
            report.migrations_skipped.append(registry.directory_name(item.entity))
            return None
        target: str = registry.record_path(item.entity)
        return [
            (f"{target}/{Path(source).name}", self._renderer.render(source, ctx))
            for source in ENTITY_MIGRATION_TEMPLATES
        ]

    def _step_post_writing(self, run: GenerationRun) -> None:
        assert run.plan is not None
        with Timer("post_writing") as t:
            for rf in run.plan.override_files:
                try:
                    content: str = self._renderer.render(rf.source_template, run.context)
                    self._write(run, rf.destination, content)
                except (TemplateRenderError, OSError) as exc:
                    logger.error("Override %s failed: %s", rf.destination, exc)
                    run.report.generation_errors.append(f"{rf.destination}: {exc}")

            for relative in stale_docker_files(run.config):
                target: Path = run.destination / relative
                if not target.is_file():
                    continue
                try:
                    target.unlink()
                except OSError as exc:
                    logger.error("Cannot remove stale %s: %s", relative, exc)
                    run.report.generation_errors.append(f"{relative}: {exc}")
                    continue
                run.report.deleted_files.append(relative)
                logger.info("Removed stale %s.", relative)
        self._metric(
            run, "post_writing", t, True,
            f"{len(run.plan.override_files)} overrides, {len(run.report.deleted_files)} removed",
        )
        self._run_hooks("post_writing", run)

    def _step_inject(self, run: GenerationRun) -> None:
        helpers: SourceHelpers = run.helpers
        with Timer("inject") as t:
            for item in run.generated_entities:
                entity: EntityDescriptor = item.entity
                helpers.add_entity_to_models(entity)
                helpers.add_entity_to_handlers(entity)
                helpers.add_entity_to_services(entity)
                helpers.add_entity_to_dto(entity)
                helpers.add_entity_routes_to_main(entity)
                if run.config.docs_enabled:
                    helpers.add_entity_to_openapi_paths(entity)
                    helpers.add_entity_to_openapi_schemas(entity)
                    helpers.add_entity_to_openapi_tags(entity)
        self._metric(run, "inject", t, True, f"{len(run.generated_entities)} entities registered")
        self._run_hooks("inject", run)

    def _step_end(self, run: GenerationRun) -> None:
        with Timer("end") as t:
            outcome: Optional[ToolOutcome] = None
            if self._schema_sync is not None and run.config.is_relational:
                outcome = self._schema_sync.run(run.destination)
                if not outcome.success:
                    run.report.tool_warnings.append(outcome.message)
                    warnings.warn(outcome.message, ToolInvocationWarning, stacklevel=2)
        if outcome is None:
            detail: str = "schema sync not run"
        else:
            detail = "schema sync ok" if outcome.success else "schema sync failed"
        self._metric(run, "end", t, True, detail)
        self._run_hooks("end", run)

    # -----------------------------------------------------------------
    # Internal: finalise report
    # -----------------------------------------------------------------

    def _finalise_report(
        self,
        report: GenerationReport,
        total_elapsed: float,
    ) -> GenerationReport:
        report.total_elapsed_seconds = total_elapsed
        report.success = not (
            report.planning_errors
            or report.generation_errors
            or report.entity_errors
            or report.fatal_error
        )
        if report.success:
            logger.info(
                "Generation complete: %d files in %.3fs.",
                report.total_files,
                total_elapsed,
            )
        else:
            logger.error("Generation FAILED after %.3fs.", total_elapsed)
        return report


__all__: List[str] = [
    "PHASES",
    "GenerationStepMetric",
    "GenerationReport",
    "load_model_file",
    "parse_raw_model",
    "apply_config_overrides",
    "AnnotatedEntity",
    "RunPlan",
    "GenerationRun",
    "annotate_entities",
    "plan_run",
    "GenerationOrchestrator",
]

logger.debug("axumgen.generator loaded — %d public symbols.", len(__all__))
