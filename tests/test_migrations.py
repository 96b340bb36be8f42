"""
tests/test_migrations.py
Unit tests for axumgen.migrations.

Tests cover:
- Stable migration directory names
- Existence detection by substring scan (including the Order / OrderItem pair)
- An existing migration of the same table under an older date
- Schema-sync tool outcomes (``subprocess.run`` replaced via monkeypatch)
"""

from __future__ import annotations

import pathlib
import subprocess
from typing import Any, List

import pytest

from axumgen.migrations import MigrationRegistry, SchemaSyncTool
from axumgen.models import EntityDescriptor


# ===========================================================================
# MigrationRegistry
# ===========================================================================


class TestMigrationRegistry:

    def test_directory_name_uses_changelog_date(self, product_entity: EntityDescriptor) -> None:
        assert MigrationRegistry.directory_name(product_entity) == "20240102000000_create_product"

    def test_record_path(self, tmp_path: pathlib.Path, product_entity: EntityDescriptor) -> None:
        registry = MigrationRegistry(tmp_path)
        assert registry.record_path(product_entity) == "migrations/20240102000000_create_product"

    def test_should_create_without_migrations_dir(
        self, tmp_path: pathlib.Path, product_entity: EntityDescriptor
    ) -> None:
        registry = MigrationRegistry(tmp_path)
        assert registry.existing() == []
        assert registry.should_create(product_entity)

    def test_existing_migration_is_not_recreated(
        self, tmp_path: pathlib.Path, product_entity: EntityDescriptor
    ) -> None:
        registry = MigrationRegistry(tmp_path)
        (tmp_path / registry.record_path(product_entity)).mkdir(parents=True)
        assert not registry.should_create(product_entity)

    def test_other_tables_do_not_block(
        self, tmp_path: pathlib.Path, product_entity: EntityDescriptor
    ) -> None:
        (tmp_path / "migrations" / "00000000000001_create_users_authorities").mkdir(parents=True)
        (tmp_path / "migrations" / "20240101000000_create_category").mkdir()
        assert MigrationRegistry(tmp_path).should_create(product_entity)

    def test_order_item_shadows_order(
        self, tmp_path: pathlib.Path, order_entities: List[EntityDescriptor]
    ) -> None:
        order_item, order = order_entities
        registry = MigrationRegistry(tmp_path)
        (tmp_path / registry.record_path(order_item)).mkdir(parents=True)

        # "create_order" is a substring of "..._create_order_item".
        assert not registry.should_create(order)

    def test_older_migration_of_same_table_blocks_new_date(self, tmp_path: pathlib.Path) -> None:
        (tmp_path / "migrations" / "20230101_create_order").mkdir(parents=True)
        order = EntityDescriptor(name="Order", changelog_date="20240202000000")

        registry = MigrationRegistry(tmp_path)
        assert registry.directory_name(order) == "20240202000000_create_order"
        assert not registry.should_create(order)

    def test_order_first_does_not_shadow_order_item(
        self, tmp_path: pathlib.Path, order_entities: List[EntityDescriptor]
    ) -> None:
        order_item, order = order_entities
        registry = MigrationRegistry(tmp_path)
        (tmp_path / registry.record_path(order)).mkdir(parents=True)
        assert registry.should_create(order_item)

    def test_existing_is_sorted_and_ignores_files(self, tmp_path: pathlib.Path) -> None:
        migrations = tmp_path / "migrations"
        (migrations / "2_b").mkdir(parents=True)
        (migrations / "1_a").mkdir()
        (migrations / "README").write_text("x", encoding="utf-8")
        assert MigrationRegistry(tmp_path).existing() == ["1_a", "2_b"]


# ===========================================================================
# SchemaSyncTool
# ===========================================================================


class TestSchemaSyncTool:

    def test_not_run_without_migrations(self, tmp_path: pathlib.Path, monkeypatch) -> None:
        def _fail(*args: Any, **kwargs: Any) -> None:
            raise AssertionError("subprocess.run must not be called")

        monkeypatch.setattr(subprocess, "run", _fail)
        outcome = SchemaSyncTool().run(tmp_path)
        assert not outcome.ran
        assert outcome.success

    def test_success(self, tmp_path: pathlib.Path, monkeypatch) -> None:
        (tmp_path / "migrations").mkdir()
        calls: List[Any] = []

        def _run(cmd, **kwargs):
            calls.append((cmd, kwargs))
            return subprocess.CompletedProcess(cmd, 0, stdout="ok", stderr="")

        monkeypatch.setattr(subprocess, "run", _run)
        outcome = SchemaSyncTool().run(tmp_path)

        assert outcome.ran and outcome.success
        assert calls[0][0] == ["diesel", "migration", "run"]
        assert calls[0][1]["cwd"] == str(tmp_path)
        assert (tmp_path / "target" / "db").is_dir()

    def test_missing_executable(self, tmp_path: pathlib.Path, monkeypatch) -> None:
        (tmp_path / "migrations").mkdir()

        def _run(cmd, **kwargs):
            raise FileNotFoundError(2, "No such file or directory", cmd[0])

        monkeypatch.setattr(subprocess, "run", _run)
        outcome = SchemaSyncTool().run(tmp_path)

        assert not outcome.ran
        assert not outcome.success
        assert "diesel migration run" in outcome.message

    def test_nonzero_exit(self, tmp_path: pathlib.Path, monkeypatch) -> None:
        (tmp_path / "migrations").mkdir()
        monkeypatch.setattr(
            subprocess,
            "run",
            lambda cmd, **kw: subprocess.CompletedProcess(cmd, 1, stdout="", stderr="db locked"),
        )
        outcome = SchemaSyncTool(command=["diesel", "migration", "run"]).run(tmp_path)

        assert outcome.ran
        assert not outcome.success
        assert outcome.returncode == 1
        assert "db locked" in outcome.message

    def test_timeout(self, tmp_path: pathlib.Path, monkeypatch) -> None:
        (tmp_path / "migrations").mkdir()

        def _run(cmd, **kwargs):
            raise subprocess.TimeoutExpired(cmd, kwargs.get("timeout"))

        monkeypatch.setattr(subprocess, "run", _run)
        outcome = SchemaSyncTool(timeout=1.0).run(tmp_path)
        assert not outcome.success
