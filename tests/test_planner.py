"""
tests/test_planner.py
Unit tests for axumgen.planner and the manifests in axumgen.manifests.

Tests cover:
- Condition evaluation and determinism of plans
- Last-writer-wins for duplicate destinations
- Exclusive choices (exactly one group must match)
- Entity placeholder substitution
- Manifest contents per dialect / feature toggle
- Stale docker file selection
"""

from __future__ import annotations

from typing import List

import pytest

from axumgen.errors import PlanningError
from axumgen.manifests import (
    CI_CD_FILES,
    DATABASE_DOCS,
    DOCKER_FILES,
    DOCKER_OVERRIDE_FILES,
    ENTITY_FILES,
    SERVER_FILES,
    stale_docker_files,
)
from axumgen.models import EntityDescriptor, GenerationConfig
from axumgen.planner import (
    ExclusiveChoice,
    OutputGroup,
    TemplateSpec,
    plan,
    substitute_entity,
)


def _destinations(files) -> List[str]:
    return [rf.destination for rf in files]


# ===========================================================================
# Core planning
# ===========================================================================


class TestPlan:

    def test_condition_filters_groups(self, sqlite_config: GenerationConfig) -> None:
        groups = [
            OutputGroup("always", ["a.txt"]),
            OutputGroup("never", ["b.txt"], condition=lambda c: False),
        ]
        assert _destinations(plan(groups, sqlite_config)) == ["a.txt"]

    def test_path_prefix_and_rename(self, sqlite_config: GenerationConfig) -> None:
        groups = [
            OutputGroup(
                "g",
                ["x.rs", TemplateSpec("env", rename_to=".env")],
                path="server/",
                rename=lambda p: p.upper(),
            )
        ]
        files = plan(groups, sqlite_config)
        assert [(f.source_template, f.destination) for f in files] == [
            ("server/x.rs", "SERVER/X.RS"),
            ("server/env", "SERVER/.ENV"),
        ]

    def test_last_writer_wins(self, sqlite_config: GenerationConfig) -> None:
        groups = [
            OutputGroup("first", ["a.txt", "services.yml"]),
            OutputGroup(
                "second", [TemplateSpec("services.override.yml", rename_to="services.yml")]
            ),
        ]
        files = plan(groups, sqlite_config)

        assert _destinations(files) == ["a.txt", "services.yml"]
        assert files[1].group == "second"
        assert files[1].source_template == "services.override.yml"

    def test_plan_is_deterministic(self, postgres_config: GenerationConfig) -> None:
        assert plan(SERVER_FILES, postgres_config) == plan(SERVER_FILES, postgres_config)


class TestExclusiveChoice:

    def _choice(self, required: bool = True) -> ExclusiveChoice:
        return ExclusiveChoice(
            "db",
            [
                OutputGroup("pg", ["pg.md"], condition=lambda c: c.dialect.value == "postgresql"),
                OutputGroup("relational", ["sql.md"], condition=lambda c: c.is_relational),
            ],
            required=required,
        )

    def test_single_match(self, mongo_config: GenerationConfig) -> None:
        choice = ExclusiveChoice(
            "db", [OutputGroup("mongo", ["m.md"], condition=lambda c: c.is_document_store)]
        )
        assert choice.select(mongo_config).name == "mongo"

    def test_two_matches_raise(self, postgres_config: GenerationConfig) -> None:
        with pytest.raises(PlanningError) as exc_info:
            plan([self._choice()], postgres_config)
        assert exc_info.value.group == "db"

    def test_no_match_raises_when_required(self, mongo_config: GenerationConfig) -> None:
        with pytest.raises(PlanningError):
            plan([self._choice()], mongo_config)

    def test_no_match_allowed_when_optional(self, mongo_config: GenerationConfig) -> None:
        assert plan([self._choice(required=False)], mongo_config) == []

    @pytest.mark.parametrize(
        "dialect, doc",
        [
            ("sqlite", "docs/SQLITE.md"),
            ("postgresql", "docs/POSTGRES.md"),
            ("mysql", "docs/MYSQL.md"),
            ("mongodb", "docs/MONGODB.md"),
        ],
    )
    def test_database_docs_pick_one(self, dialect: str, doc: str) -> None:
        selected = DATABASE_DOCS.select(GenerationConfig(dialect=dialect))
        assert [t.file for t in selected.templates] == [doc]


# ===========================================================================
# Placeholder substitution
# ===========================================================================


class TestSubstituteEntity:

    @pytest.fixture()
    def entity(self) -> EntityDescriptor:
        return EntityDescriptor(name="StockMovement", changelog_date="1")

    @pytest.mark.parametrize(
        "template, expected",
        [
            ("src/models/_entityFileName_.rs", "src/models/stock_movement.rs"),
            ("src/models/_entityFileName_mongodb.rs", "src/models/stock_movement.rs"),
            ("src/services/_entityFileName_service.rs", "src/services/stock_movement_service.rs"),
            (
                "src/services/_entityFileName_service_mongodb.rs",
                "src/services/stock_movement_service.rs",
            ),
            ("src/dto/_entityFileName_dto.rs", "src/dto/stock_movement_dto.rs"),
        ],
    )
    def test_suffix_rules(self, entity: EntityDescriptor, template: str, expected: str) -> None:
        assert substitute_entity(template, entity) == expected

    def test_paths_without_placeholder_untouched(self) -> None:
        assert substitute_entity("src/main.rs", None) == "src/main.rs"

    def test_placeholder_without_entity_raises(self) -> None:
        with pytest.raises(PlanningError):
            substitute_entity("src/models/_entityFileName_.rs", None)

    def test_entity_manifest_without_entity_raises(self, sqlite_config: GenerationConfig) -> None:
        with pytest.raises(PlanningError):
            plan(ENTITY_FILES, sqlite_config)


# ===========================================================================
# Manifests
# ===========================================================================


class TestManifests:

    def test_document_store_excludes_relational_groups(
        self, mongo_config: GenerationConfig
    ) -> None:
        files = plan(SERVER_FILES, mongo_config)
        groups = {f.group for f in files}
        destinations = _destinations(files)

        assert "server-sql" not in groups
        assert "migrations" not in groups
        assert "cargo-diesel" not in groups
        assert "server-mongodb" in groups
        assert not any(d.startswith("migrations/") for d in destinations)
        assert "server/src/db/schema.rs" not in destinations
        assert "scripts/mongodb_init.js" in destinations

    def test_relational_includes_base_migrations(self, sqlite_config: GenerationConfig) -> None:
        destinations = _destinations(plan(SERVER_FILES, sqlite_config))
        assert "migrations/00000000000001_create_users_authorities/up.sql" in destinations
        assert "diesel.toml" in destinations
        assert "server/src/db/mongodb_connection.rs" not in destinations

    def test_dotfiles_renamed(self, sqlite_config: GenerationConfig) -> None:
        destinations = _destinations(plan(SERVER_FILES, sqlite_config))
        assert ".env" in destinations
        assert ".gitignore" in destinations

    def test_email_requires_jwt(self) -> None:
        jwt = GenerationConfig(email_enabled=True)
        oauth = GenerationConfig(email_enabled=True, auth_mode="oauth2")

        assert "server/src/services/email_service.rs" in _destinations(plan(SERVER_FILES, jwt))
        assert "server/src/services/email_service.rs" not in _destinations(
            plan(SERVER_FILES, oauth)
        )

    def test_docs_toggle(self) -> None:
        on = _destinations(plan(SERVER_FILES, GenerationConfig()))
        off = _destinations(plan(SERVER_FILES, GenerationConfig(docs_enabled=False)))
        assert "server/src/openapi.rs" in on
        assert "server/src/openapi.rs" not in off

    def test_consul_only_for_distributed_topologies(self) -> None:
        mono = GenerationConfig(service_discovery="consul")
        micro = GenerationConfig(service_discovery="consul", topology="microservice")

        assert "docker/consul.yml" not in _destinations(plan(DOCKER_FILES, mono))
        assert "docker/consul.yml" in _destinations(plan(DOCKER_FILES, micro))

    def test_static_files_for_microservice_with_client(self) -> None:
        with_client = GenerationConfig(topology="microservice")
        without = GenerationConfig(topology="microservice", skip_client=True)
        target = "server/src/handlers/static_files.rs"

        assert target in _destinations(plan(SERVER_FILES, with_client))
        assert target not in _destinations(plan(SERVER_FILES, without))

    def test_entity_files_per_dialect(self, product_entity: EntityDescriptor) -> None:
        sql = plan(ENTITY_FILES, GenerationConfig(dialect="mysql"), product_entity)
        mongo = plan(ENTITY_FILES, GenerationConfig(dialect="mongodb"), product_entity)
        expected = [
            "server/src/models/product.rs",
            "server/src/handlers/product.rs",
            "server/src/services/product_service.rs",
            "server/src/dto/product_dto.rs",
        ]

        assert _destinations(sql) == expected
        assert _destinations(mongo) == expected
        assert mongo[0].source_template == "server/src/models/_entityFileName_mongodb.rs"

    def test_ci_cd(self) -> None:
        config = GenerationConfig(ci_cd=["github", "gitlab"])
        assert _destinations(plan(CI_CD_FILES, config)) == [
            ".github/workflows/main.yml",
            ".gitlab-ci.yml",
        ]
        assert plan(CI_CD_FILES, GenerationConfig()) == []

    def test_docker_override_targets_services_yml(self, sqlite_config: GenerationConfig) -> None:
        files = plan(DOCKER_OVERRIDE_FILES, sqlite_config)
        assert [(f.source_template, f.destination) for f in files] == [
            ("docker/services.override.yml", "docker/services.yml")
        ]


class TestStaleDockerFiles:

    def test_sqlite_removes_nothing(self, sqlite_config: GenerationConfig) -> None:
        assert stale_docker_files(sqlite_config) == []

    def test_postgres_removes_others(self, postgres_config: GenerationConfig) -> None:
        assert stale_docker_files(postgres_config) == ["docker/mysql.yml", "docker/mongodb.yml"]

    def test_mongo_keeps_own(self, mongo_config: GenerationConfig) -> None:
        assert "docker/mongodb.yml" not in stale_docker_files(mongo_config)
