# File: axumgen/validators.py
"""
axumgen - Entity Model & Configuration Validators
==================================================
Semantic checks on top of the structural validation Pydantic already
performs in ``axumgen.models``: duplicate entity and table names, names
that would produce invalid Rust modules, fields clashing with the generated
primary key, unknown field kinds, and configuration options that will be
silently ignored.

Usage:
    from axumgen.validators import validate_full
    result = validate_full(entities, config)
    if not result:
        raise SystemExit(result.format_report())

One check deserves a note: migration existence is detected by a substring
scan of ``migrations/`` (see ``axumgen.migrations``).  Table names that are
substrings of one another (``order`` / ``order_item``) can therefore shadow
each other's migration.  This is reported as a warning; nothing is changed.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Set

from axumgen.manifests import MIGRATIONS_DIR
from axumgen.models import AuthMode, EntityDescriptor, GenerationConfig, Topology
from axumgen.naming import normalize
from axumgen.type_mapping import parse_kind

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("axumgen.validators")


# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationIssue:
    """A single finding of the validation pipeline."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning" | "info"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()


class ValidationResult:
    """Accumulates ``ValidationIssue`` instances; truthy when error-free."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationIssue] = []

    def add_error(self, code: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._items.append(ValidationIssue("error", code, message, context))

    def add_warning(self, code: str, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._items.append(ValidationIssue("warning", code, message, context))

    def merge(self, other: "ValidationResult") -> None:
        self._items.extend(other._items)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self._items if i.is_error]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self._items if i.is_warning]

    @property
    def codes(self) -> Set[str]:
        return {i.code for i in self._items}

    @property
    def has_errors(self) -> bool:
        return any(i.is_error for i in self._items)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def summary(self) -> str:
        return (
            f"Validation: {len(self.errors)} error(s), "
            f"{len(self.warnings)} warning(s)."
        )

    def format_report(self) -> str:
        lines: List[str] = [self.summary()]
        for item in self._items:
            prefix: str = "✗" if item.is_error else "⚠"
            lines.append(f"  {prefix} [{item.code}] {item.message}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------

_RUST_IDENTIFIER_RE: re.Pattern[str] = re.compile(r"^[a-z_][a-z0-9_]*$")

_RUST_KEYWORDS: FrozenSet[str] = frozenset(
    {
        "as", "async", "await", "break", "const", "continue", "crate", "dyn",
        "else", "enum", "extern", "false", "fn", "for", "if", "impl", "in",
        "let", "loop", "match", "mod", "move", "mut", "pub", "ref", "return",
        "self", "static", "struct", "super", "trait", "true", "type",
        "unsafe", "use", "where", "while", "abstract", "become", "box", "do",
        "final", "macro", "override", "priv", "typeof", "unsized",
        "virtual", "yield", "try",
    }
)

_SQL_RESERVED_WORDS: FrozenSet[str] = frozenset(
    {
        "select", "insert", "update", "delete", "drop", "create", "alter",
        "table", "column", "index", "from", "where", "join", "order",
        "group", "limit", "offset", "union", "user", "key", "check",
        "default", "references", "primary", "foreign", "values",
    }
)

# Modules and tables that the project skeleton already defines.
_RESERVED_MODULES: FrozenSet[str] = frozenset(
    {"user", "authority", "account", "health", "management", "common", "pagination"}
)
_BUILTIN_MIGRATIONS: Sequence[str] = (
    "00000000000000_diesel_initial_setup",
    "00000000000001_create_users_authorities",
)


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def validate_entity_names(entities: Sequence[EntityDescriptor]) -> ValidationResult:
    """Duplicate entities and names that make unusable Rust modules."""
    result: ValidationResult = ValidationResult()
    seen: Dict[str, str] = {}

    for entity in entities:
        module: str = entity.module_name
        ctx: Dict[str, Any] = {"entity": entity.name, "module": module}

        if module in seen:
            result.add_error(
                "DUPLICATE_ENTITY",
                f"Entity '{entity.name}' normalises to the same module as '{seen[module]}'.",
                ctx,
            )
            continue
        seen[module] = entity.name

        if not _RUST_IDENTIFIER_RE.match(module):
            result.add_error(
                "INVALID_MODULE_NAME",
                f"Entity '{entity.name}' yields module '{module}', which is not a Rust identifier.",
                ctx,
            )
        elif module in _RUST_KEYWORDS:
            result.add_error(
                "MODULE_NAME_KEYWORD",
                f"Entity '{entity.name}' yields module '{module}', a Rust keyword.",
                ctx,
            )
        elif module in _RESERVED_MODULES:
            result.add_error(
                "MODULE_NAME_RESERVED",
                f"Module '{module}' is already part of the generated project.",
                ctx,
            )

    return result


def validate_table_names(
    entities: Sequence[EntityDescriptor], config: GenerationConfig
) -> ValidationResult:
    """Duplicate tables, reserved words, and migration-scan ambiguities."""
    result: ValidationResult = ValidationResult()
    tables: Dict[str, str] = {}

    for entity in entities:
        table: str = entity.table_name
        if table in tables:
            result.add_error(
                "DUPLICATE_TABLE_NAME",
                f"Table '{table}' is used by both '{tables[table]}' and '{entity.name}'.",
                {"table": table},
            )
            continue
        tables[table] = entity.name
        if config.is_relational and table in _SQL_RESERVED_WORDS:
            result.add_warning(
                "TABLE_NAME_SQL_RESERVED",
                f"Table '{table}' is an SQL reserved word and must be quoted in raw SQL.",
                {"table": table},
            )

    if not config.is_relational:
        return result

    for table, owner in tables.items():
        needle: str = f"create_{table}"
        shadowing: List[str] = sorted(
            other for other in tables if other != table and needle in f"create_{other}"
        )
        shadowing.extend(b for b in _BUILTIN_MIGRATIONS if needle in b)
        if shadowing:
            result.add_warning(
                "MIGRATION_SCAN_AMBIGUITY",
                f"Migration lookup for table '{table}' ({owner}) also matches "
                f"{', '.join(shadowing)} in {MIGRATIONS_DIR}/; its migration may be "
                f"reported as existing when it is not.",
                {"table": table, "matches": shadowing},
            )

    return result


def validate_fields(entities: Sequence[EntityDescriptor]) -> ValidationResult:
    result: ValidationResult = ValidationResult()

    for entity in entities:
        server_fields = [f for f in entity.fields if not f.skip_server]
        if not server_fields:
            result.add_warning(
                "ENTITY_WITHOUT_FIELDS",
                f"Entity '{entity.name}' has no server-side fields.",
                {"entity": entity.name},
            )

        seen: Set[str] = set()
        for field in server_fields:
            column: str = normalize(field.name)
            ctx: Dict[str, Any] = {"entity": entity.name, "field": field.name}
            if column in seen:
                result.add_error(
                    "DUPLICATE_FIELD",
                    f"Field '{field.name}' of '{entity.name}' is defined twice.",
                    ctx,
                )
            seen.add(column)
            if column == "id":
                result.add_error(
                    "FIELD_SHADOWS_ID",
                    f"Field '{field.name}' of '{entity.name}' clashes with the generated primary key.",
                    ctx,
                )
            elif column in _RUST_KEYWORDS:
                result.add_error(
                    "FIELD_NAME_KEYWORD",
                    f"Field '{field.name}' of '{entity.name}' is a Rust keyword.",
                    ctx,
                )
            if parse_kind(field.field_type) is None:
                result.add_warning(
                    "UNMAPPED_FIELD_KIND",
                    f"Field '{entity.name}.{field.name}' has unknown kind "
                    f"'{field.field_type}'; it will be stored as text.",
                    ctx,
                )

    return result


def validate_relationships(entities: Sequence[EntityDescriptor]) -> ValidationResult:
    result: ValidationResult = ValidationResult()
    known: Set[str] = {e.module_name for e in entities} | {"user", "authority"}

    for entity in entities:
        for rel in entity.relationships:
            if normalize(rel.other_entity) not in known:
                result.add_warning(
                    "UNKNOWN_RELATIONSHIP_TARGET",
                    f"Relationship '{entity.name}.{rel.name}' targets unknown entity "
                    f"'{rel.other_entity}'.",
                    {"entity": entity.name, "relationship": rel.name},
                )

    return result


def validate_config(config: GenerationConfig) -> ValidationResult:
    """Options that the planner will silently ignore."""
    result: ValidationResult = ValidationResult()

    if config.email_enabled and config.auth_mode is AuthMode.OAUTH2:
        result.add_warning(
            "EMAIL_IGNORED_WITH_OAUTH2",
            "email_enabled has no effect with oauth2 authentication.",
        )
    if config.service_discovery is not None and config.topology is Topology.MONOLITH:
        result.add_warning(
            "DISCOVERY_IGNORED_FOR_MONOLITH",
            "service_discovery has no effect for a monolith.",
        )
    if not config.crate_name:
        result.add_error(
            "INVALID_BASE_NAME",
            f"base_name '{config.base_name}' does not yield a crate name.",
        )

    return result


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def validate_full(
    entities: Sequence[EntityDescriptor],
    config: GenerationConfig,
) -> ValidationResult:
    """
    Run every check against the generated entities (skip-server and built-in
    entities are excluded before checking).
    """
    generated: List[EntityDescriptor] = [e for e in entities if e.is_generated]
    logger.info(
        "Starting validation — %d entities (%d generated), dialect=%s",
        len(entities),
        len(generated),
        config.dialect.value,
    )

    result: ValidationResult = ValidationResult()
    result.merge(validate_config(config))
    result.merge(validate_entity_names(generated))
    result.merge(validate_table_names(generated, config))
    result.merge(validate_fields(generated))
    result.merge(validate_relationships(generated))

    if result.has_errors:
        logger.error("Validation FAILED. %s", result.summary())
    else:
        logger.info("Validation PASSED. %s", result.summary())
    return result


__all__: List[str] = [
    "ValidationIssue",
    "ValidationResult",
    "validate_entity_names",
    "validate_table_names",
    "validate_fields",
    "validate_relationships",
    "validate_config",
    "validate_full",
]

logger.debug("axumgen.validators loaded — %d public symbols.", len(__all__))
