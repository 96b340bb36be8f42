"""
tests/test_type_mapping.py
Unit tests for axumgen.type_mapping.

Tests cover:
- Totality of every dialect table over every field kind
- Optional wrapping of non-required fields
- Text fallback for unknown kinds (logged, never raised)
- Field annotation for relational and document-store runs
"""

from __future__ import annotations

import logging

import pytest

from axumgen.models import DialectProfile, FieldSpec, GenerationConfig
from axumgen.type_mapping import (
    DIALECT_TABLES,
    FieldKind,
    annotate_field,
    missing_kinds,
    parse_kind,
    resolve,
)


# ===========================================================================
# Totality
# ===========================================================================


class TestTotality:

    @pytest.mark.parametrize("dialect", list(DialectProfile))
    def test_every_dialect_has_a_table(self, dialect: DialectProfile) -> None:
        assert dialect in DIALECT_TABLES

    @pytest.mark.parametrize("dialect", list(DialectProfile))
    def test_no_kind_missing(self, dialect: DialectProfile) -> None:
        assert missing_kinds(DIALECT_TABLES[dialect]) == frozenset()

    @pytest.mark.parametrize("dialect", list(DialectProfile))
    @pytest.mark.parametrize("kind", list(FieldKind))
    def test_resolve_never_falls_back_for_known_kinds(
        self, dialect: DialectProfile, kind: FieldKind
    ) -> None:
        resolved = resolve(kind.value, dialect, required=True)
        assert not resolved.is_fallback
        assert resolved.storage_type
        assert resolved.column_type

    def test_document_store_has_no_orm_projection(self) -> None:
        assert resolve("String", DialectProfile.MONGODB, True).orm_type is None


# ===========================================================================
# Resolution details
# ===========================================================================


class TestResolve:

    def test_required_is_not_wrapped(self) -> None:
        assert resolve("Long", DialectProfile.SQLITE, True).storage_type == "i64"

    def test_optional_is_wrapped(self) -> None:
        assert resolve("Long", DialectProfile.SQLITE, False).storage_type == "Option<i64>"

    def test_postgres_column_types(self) -> None:
        assert resolve("String", DialectProfile.POSTGRESQL, True).column_type == "VARCHAR(255)"
        assert resolve("UUID", DialectProfile.POSTGRESQL, True).column_type == "UUID"
        assert resolve("ZonedDateTime", DialectProfile.POSTGRESQL, True).orm_type == "Timestamptz"

    def test_mysql_decimal(self) -> None:
        assert resolve("BigDecimal", DialectProfile.MYSQL, True).column_type == "DECIMAL(21,2)"

    def test_mongodb_bson_tags(self) -> None:
        resolved = resolve("Instant", DialectProfile.MONGODB, False)
        assert resolved.column_type == "date"
        assert resolved.storage_type == "Option<bson::DateTime>"

    def test_aliases(self) -> None:
        assert parse_kind("Decimal") is FieldKind.BIG_DECIMAL
        assert parse_kind("Date") is FieldKind.LOCAL_DATE
        assert parse_kind("DateTime") is FieldKind.INSTANT


class TestFallback:

    @pytest.mark.parametrize(
        "dialect, storage, column",
        [
            (DialectProfile.SQLITE, "String", "TEXT"),
            (DialectProfile.POSTGRESQL, "String", "VARCHAR(255)"),
            (DialectProfile.MYSQL, "String", "VARCHAR(255)"),
            (DialectProfile.MONGODB, "String", "string"),
        ],
    )
    def test_unknown_kind_falls_back_to_text(
        self, dialect: DialectProfile, storage: str, column: str
    ) -> None:
        resolved = resolve("Geometry", dialect, True)
        assert resolved.is_fallback
        assert resolved.storage_type == storage
        assert resolved.column_type == column

    def test_fallback_is_optional_wrapped(self) -> None:
        resolved = resolve("Geometry", DialectProfile.SQLITE, False)
        assert resolved.storage_type == "Option<String>"

    def test_fallback_is_logged_at_info(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="axumgen.type_mapping"):
            resolve("Geometry", DialectProfile.POSTGRESQL, True)
        assert any(
            "Geometry" in r.getMessage() and r.levelno == logging.INFO
            for r in caplog.records
        )


# ===========================================================================
# Annotation
# ===========================================================================


class TestAnnotateField:

    def test_product_scenario_postgres(self, product_entity) -> None:
        config = GenerationConfig(dialect="postgresql")
        annotated = [annotate_field(f, config) for f in product_entity.fields]

        assert [a.resolved.storage_type for a in annotated] == [
            "String",
            "Option<bigdecimal::BigDecimal>",
        ]
        assert [a.resolved.column_type for a in annotated] == ["VARCHAR(255)", "DECIMAL"]

    def test_relational_context_carries_all_sql_types(self) -> None:
        field = FieldSpec(name="inStock", field_type="Boolean", required=True)
        ctx = annotate_field(field, GenerationConfig(dialect="sqlite")).to_context()

        assert ctx["field_name_snake"] == "in_stock"
        assert ctx["field_name_camel"] == "inStock"
        assert ctx["sqlite_column_type"] == "BOOLEAN"
        assert ctx["postgres_column_type"] == "BOOLEAN"
        assert ctx["mysql_column_type"] == "BOOLEAN"

    def test_document_context_has_no_sql_types(self) -> None:
        field = FieldSpec(name="title", field_type="String")
        ctx = annotate_field(field, GenerationConfig(dialect="mongodb")).to_context()

        assert "postgres_column_type" not in ctx
        assert ctx["orm_type"] is None
        assert ctx["storage_type"] == "Option<String>"
