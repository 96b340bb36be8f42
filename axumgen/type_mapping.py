# File: axumgen/type_mapping.py
"""
axumgen - Field Type Mapping
=============================
Translates an abstract field kind into the backend-specific projections the
templates need:

    storage_type — Rust type of the struct field (``String``, ``Option<i64>``)
    column_type  — SQL DDL type for migrations, or the BSON type tag used in
                   schema documentation for the document store
    orm_type     — Diesel ``table!`` column type (``None`` for the document store)

Each dialect is one ``DialectTypeTable``: a total mapping over ``FieldKind``
plus explicit fallbacks.  ``resolve`` never raises; an unrecognised kind
falls back to the dialect's text type and is logged at INFO level.

Optional wrapping (``Option<…>``) is dialect-independent and applied after
the dialect lookup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional

from axumgen.models import DialectProfile, FieldSpec, GenerationConfig
from axumgen.naming import normalize, to_camel_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("axumgen.type_mapping")


# ---------------------------------------------------------------------------
# Abstract field kinds
# ---------------------------------------------------------------------------


class FieldKind(str, Enum):
    """Abstract field kinds of the entity model."""

    BOOLEAN = "Boolean"
    INTEGER = "Integer"
    LONG = "Long"
    FLOAT = "Float"
    DOUBLE = "Double"
    BIG_DECIMAL = "BigDecimal"
    STRING = "String"
    UUID = "UUID"
    LOCAL_DATE = "LocalDate"
    INSTANT = "Instant"
    ZONED_DATE_TIME = "ZonedDateTime"
    DURATION = "Duration"
    TEXT_BLOB = "TextBlob"
    BLOB = "Blob"
    ANY_BLOB = "AnyBlob"
    IMAGE_BLOB = "ImageBlob"


_KIND_ALIASES: Dict[str, FieldKind] = {
    "Decimal": FieldKind.BIG_DECIMAL,
    "Date": FieldKind.LOCAL_DATE,
    "DateTime": FieldKind.INSTANT,
}


def parse_kind(raw: str) -> Optional[FieldKind]:
    """Return the ``FieldKind`` for *raw*, or ``None`` when it is unknown."""
    if raw in _KIND_ALIASES:
        return _KIND_ALIASES[raw]
    try:
        return FieldKind(raw)
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Per-dialect tables
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DialectTypeTable:
    """All type projections for one dialect."""

    dialect: DialectProfile
    storage_types: Mapping[FieldKind, str]
    column_types: Mapping[FieldKind, str]
    orm_types: Optional[Mapping[FieldKind, str]]
    fallback_storage: str
    fallback_column: str
    fallback_orm: Optional[str]


# Rust field types shared by every relational dialect.
_RUST_TYPES: Mapping[FieldKind, str] = MappingProxyType({
    FieldKind.BOOLEAN: "bool",
    FieldKind.INTEGER: "i32",
    FieldKind.LONG: "i64",
    FieldKind.FLOAT: "f32",
    FieldKind.DOUBLE: "f64",
    FieldKind.BIG_DECIMAL: "bigdecimal::BigDecimal",
    FieldKind.STRING: "String",
    FieldKind.UUID: "uuid::Uuid",
    FieldKind.LOCAL_DATE: "chrono::NaiveDate",
    FieldKind.INSTANT: "NaiveDateTime",
    FieldKind.ZONED_DATE_TIME: "NaiveDateTime",
    FieldKind.DURATION: "i64",
    FieldKind.TEXT_BLOB: "String",
    FieldKind.BLOB: "Vec<u8>",
    FieldKind.ANY_BLOB: "Vec<u8>",
    FieldKind.IMAGE_BLOB: "Vec<u8>",
})

SQLITE_TABLE: DialectTypeTable = DialectTypeTable(
    dialect=DialectProfile.SQLITE,
    storage_types=_RUST_TYPES,
    column_types=MappingProxyType({
        FieldKind.BOOLEAN: "BOOLEAN",
        FieldKind.INTEGER: "INTEGER",
        FieldKind.LONG: "BIGINT",
        FieldKind.FLOAT: "REAL",
        FieldKind.DOUBLE: "REAL",
        FieldKind.BIG_DECIMAL: "DECIMAL",
        FieldKind.STRING: "TEXT",
        FieldKind.UUID: "TEXT",
        FieldKind.LOCAL_DATE: "DATE",
        FieldKind.INSTANT: "TIMESTAMP",
        FieldKind.ZONED_DATE_TIME: "TIMESTAMP",
        FieldKind.DURATION: "BIGINT",
        FieldKind.TEXT_BLOB: "TEXT",
        FieldKind.BLOB: "BLOB",
        FieldKind.ANY_BLOB: "BLOB",
        FieldKind.IMAGE_BLOB: "BLOB",
    }),
    orm_types=MappingProxyType({
        FieldKind.BOOLEAN: "Bool",
        FieldKind.INTEGER: "Integer",
        FieldKind.LONG: "BigInt",
        FieldKind.FLOAT: "Float",
        FieldKind.DOUBLE: "Double",
        FieldKind.BIG_DECIMAL: "Numeric",
        FieldKind.STRING: "Text",
        FieldKind.UUID: "Text",
        FieldKind.LOCAL_DATE: "Date",
        FieldKind.INSTANT: "Timestamp",
        FieldKind.ZONED_DATE_TIME: "Timestamp",
        FieldKind.DURATION: "BigInt",
        FieldKind.TEXT_BLOB: "Text",
        FieldKind.BLOB: "Binary",
        FieldKind.ANY_BLOB: "Binary",
        FieldKind.IMAGE_BLOB: "Binary",
    }),
    fallback_storage="String",
    fallback_column="TEXT",
    fallback_orm="Text",
)

POSTGRESQL_TABLE: DialectTypeTable = DialectTypeTable(
    dialect=DialectProfile.POSTGRESQL,
    storage_types=_RUST_TYPES,
    column_types=MappingProxyType({
        FieldKind.BOOLEAN: "BOOLEAN",
        FieldKind.INTEGER: "INTEGER",
        FieldKind.LONG: "BIGINT",
        FieldKind.FLOAT: "REAL",
        FieldKind.DOUBLE: "DOUBLE PRECISION",
        FieldKind.BIG_DECIMAL: "DECIMAL",
        FieldKind.STRING: "VARCHAR(255)",
        FieldKind.UUID: "UUID",
        FieldKind.LOCAL_DATE: "DATE",
        FieldKind.INSTANT: "TIMESTAMP",
        FieldKind.ZONED_DATE_TIME: "TIMESTAMP WITH TIME ZONE",
        FieldKind.DURATION: "BIGINT",
        FieldKind.TEXT_BLOB: "TEXT",
        FieldKind.BLOB: "BYTEA",
        FieldKind.ANY_BLOB: "BYTEA",
        FieldKind.IMAGE_BLOB: "BYTEA",
    }),
    orm_types=MappingProxyType({
        FieldKind.BOOLEAN: "Bool",
        FieldKind.INTEGER: "Int4",
        FieldKind.LONG: "Int8",
        FieldKind.FLOAT: "Float4",
        FieldKind.DOUBLE: "Float8",
        FieldKind.BIG_DECIMAL: "Numeric",
        FieldKind.STRING: "Varchar",
        FieldKind.UUID: "Uuid",
        FieldKind.LOCAL_DATE: "Date",
        FieldKind.INSTANT: "Timestamp",
        FieldKind.ZONED_DATE_TIME: "Timestamptz",
        FieldKind.DURATION: "Int8",
        FieldKind.TEXT_BLOB: "Text",
        FieldKind.BLOB: "Bytea",
        FieldKind.ANY_BLOB: "Bytea",
        FieldKind.IMAGE_BLOB: "Bytea",
    }),
    fallback_storage="String",
    fallback_column="VARCHAR(255)",
    fallback_orm="Varchar",
)

MYSQL_TABLE: DialectTypeTable = DialectTypeTable(
    dialect=DialectProfile.MYSQL,
    storage_types=_RUST_TYPES,
    column_types=MappingProxyType({
        FieldKind.BOOLEAN: "BOOLEAN",
        FieldKind.INTEGER: "INTEGER",
        FieldKind.LONG: "BIGINT",
        FieldKind.FLOAT: "FLOAT",
        FieldKind.DOUBLE: "DOUBLE",
        FieldKind.BIG_DECIMAL: "DECIMAL(21,2)",
        FieldKind.STRING: "VARCHAR(255)",
        FieldKind.UUID: "VARCHAR(36)",
        FieldKind.LOCAL_DATE: "DATE",
        FieldKind.INSTANT: "DATETIME",
        FieldKind.ZONED_DATE_TIME: "DATETIME",
        FieldKind.DURATION: "BIGINT",
        FieldKind.TEXT_BLOB: "TEXT",
        FieldKind.BLOB: "LONGBLOB",
        FieldKind.ANY_BLOB: "LONGBLOB",
        FieldKind.IMAGE_BLOB: "LONGBLOB",
    }),
    orm_types=MappingProxyType({
        FieldKind.BOOLEAN: "Bool",
        FieldKind.INTEGER: "Integer",
        FieldKind.LONG: "Bigint",
        FieldKind.FLOAT: "Float",
        FieldKind.DOUBLE: "Double",
        FieldKind.BIG_DECIMAL: "Numeric",
        FieldKind.STRING: "Varchar",
        FieldKind.UUID: "Varchar",
        FieldKind.LOCAL_DATE: "Date",
        FieldKind.INSTANT: "Datetime",
        FieldKind.ZONED_DATE_TIME: "Datetime",
        FieldKind.DURATION: "Bigint",
        FieldKind.TEXT_BLOB: "Text",
        FieldKind.BLOB: "Blob",
        FieldKind.ANY_BLOB: "Blob",
        FieldKind.IMAGE_BLOB: "Blob",
    }),
    fallback_storage="String",
    fallback_column="VARCHAR(255)",
    fallback_orm="Varchar",
)

# The document store has no enforced schema: column_type holds the BSON
# type tag used in schema documentation, and there is no ORM projection.
MONGODB_TABLE: DialectTypeTable = DialectTypeTable(
    dialect=DialectProfile.MONGODB,
    storage_types=MappingProxyType({
        FieldKind.BOOLEAN: "bool",
        FieldKind.INTEGER: "i32",
        FieldKind.LONG: "i64",
        FieldKind.FLOAT: "f64",
        FieldKind.DOUBLE: "f64",
        FieldKind.BIG_DECIMAL: "f64",
        FieldKind.STRING: "String",
        FieldKind.UUID: "String",
        FieldKind.LOCAL_DATE: "chrono::NaiveDate",
        FieldKind.INSTANT: "bson::DateTime",
        FieldKind.ZONED_DATE_TIME: "bson::DateTime",
        FieldKind.DURATION: "i64",
        FieldKind.TEXT_BLOB: "String",
        FieldKind.BLOB: "bson::Binary",
        FieldKind.ANY_BLOB: "bson::Binary",
        FieldKind.IMAGE_BLOB: "bson::Binary",
    }),
    column_types=MappingProxyType({
        FieldKind.BOOLEAN: "bool",
        FieldKind.INTEGER: "int",
        FieldKind.LONG: "long",
        FieldKind.FLOAT: "double",
        FieldKind.DOUBLE: "double",
        FieldKind.BIG_DECIMAL: "double",
        FieldKind.STRING: "string",
        FieldKind.UUID: "string",
        FieldKind.LOCAL_DATE: "date",
        FieldKind.INSTANT: "date",
        FieldKind.ZONED_DATE_TIME: "date",
        FieldKind.DURATION: "long",
        FieldKind.TEXT_BLOB: "string",
        FieldKind.BLOB: "binData",
        FieldKind.ANY_BLOB: "binData",
        FieldKind.IMAGE_BLOB: "binData",
    }),
    orm_types=None,
    fallback_storage="String",
    fallback_column="string",
    fallback_orm=None,
)

DIALECT_TABLES: Mapping[DialectProfile, DialectTypeTable] = MappingProxyType({
    DialectProfile.SQLITE: SQLITE_TABLE,
    DialectProfile.POSTGRESQL: POSTGRESQL_TABLE,
    DialectProfile.MYSQL: MYSQL_TABLE,
    DialectProfile.MONGODB: MONGODB_TABLE,
})


def missing_kinds(table: DialectTypeTable) -> FrozenSet[FieldKind]:
    """Kinds lacking an entry in any projection of *table* (should be empty)."""
    missing = set()
    projections: List[Mapping[FieldKind, str]] = [table.storage_types, table.column_types]
    if table.orm_types is not None:
        projections.append(table.orm_types)
    for kind in FieldKind:
        if any(kind not in proj for proj in projections):
            missing.add(kind)
    return frozenset(missing)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ResolvedType:
    """The backend-specific projection of one field."""

    storage_type: str
    column_type: str
    orm_type: Optional[str]
    is_fallback: bool = False


def wrap_optional(storage_type: str) -> str:
    return f"Option<{storage_type}>"


def resolve(kind: str, dialect: DialectProfile, required: bool) -> ResolvedType:
    """
    Resolve *kind* for *dialect*.

    Pure and total: an unknown *kind* resolves to the dialect's text
    fallback instead of raising.  When *required* is False the storage type
    is wrapped in ``Option<…>``.
    """
    table: DialectTypeTable = DIALECT_TABLES[dialect]
    parsed: Optional[FieldKind] = parse_kind(kind)

    if parsed is None:
        logger.info(
            "Unmapped field kind '%s' for %s — using fallback %s / %s.",
            kind,
            dialect.value,
            table.fallback_storage,
            table.fallback_column,
        )
        storage: str = table.fallback_storage
        column: str = table.fallback_column
        orm: Optional[str] = table.fallback_orm
        is_fallback: bool = True
    else:
        storage = table.storage_types[parsed]
        column = table.column_types[parsed]
        orm = table.orm_types[parsed] if table.orm_types is not None else None
        is_fallback = False

    if not required:
        storage = wrap_optional(storage)

    return ResolvedType(
        storage_type=storage,
        column_type=column,
        orm_type=orm,
        is_fallback=is_fallback,
    )


# ---------------------------------------------------------------------------
# Field annotation
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AnnotatedField:
    """A ``FieldSpec`` together with its derived, backend-specific projections."""

    spec: FieldSpec
    resolved: ResolvedType
    field_name_snake: str
    field_name_camel: str
    sql_column_types: Mapping[str, str]

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def required(self) -> bool:
        return self.spec.required

    def to_context(self) -> Dict[str, object]:
        ctx: Dict[str, object] = {
            "field_name": self.spec.name,
            "field_type": self.spec.field_type,
            "field_name_snake": self.field_name_snake,
            "field_name_camel": self.field_name_camel,
            "required": self.spec.required,
            "storage_type": self.resolved.storage_type,
            "column_type": self.resolved.column_type,
            "orm_type": self.resolved.orm_type,
        }
        ctx.update(self.sql_column_types)
        return ctx


def annotate_field(field: FieldSpec, config: GenerationConfig) -> AnnotatedField:
    """
    Attach type projections and names to *field* for the active dialect.

    Relational runs additionally carry the column type for each SQL dialect
    (``sqlite_column_type`` …) so templates can emit portable DDL.
    """
    resolved: ResolvedType = resolve(field.field_type, config.dialect, field.required)

    sql_types: Dict[str, str] = {}
    if config.is_relational:
        for key, dialect in (
            ("sqlite_column_type", DialectProfile.SQLITE),
            ("postgres_column_type", DialectProfile.POSTGRESQL),
            ("mysql_column_type", DialectProfile.MYSQL),
        ):
            sql_types[key] = resolve(field.field_type, dialect, True).column_type

    return AnnotatedField(
        spec=field,
        resolved=resolved,
        field_name_snake=normalize(field.name),
        field_name_camel=to_camel_case(field.name),
        sql_column_types=MappingProxyType(sql_types),
    )


__all__: List[str] = [
    "FieldKind",
    "parse_kind",
    "DialectTypeTable",
    "DIALECT_TABLES",
    "SQLITE_TABLE",
    "POSTGRESQL_TABLE",
    "MYSQL_TABLE",
    "MONGODB_TABLE",
    "missing_kinds",
    "ResolvedType",
    "wrap_optional",
    "resolve",
    "AnnotatedField",
    "annotate_field",
]

logger.debug("axumgen.type_mapping loaded — %d public symbols.", len(__all__))
