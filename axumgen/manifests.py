# File: axumgen/manifests.py
"""
axumgen - Output Manifests
===========================
Declarative file lists of the generated Rust project, consumed by
``axumgen.planner.plan``.  Each manifest is a plain list of ``OutputGroup``
and ``ExclusiveChoice`` items; the conditions are pure predicates over the
``GenerationConfig``.

Manifests:

    SERVER_FILES           project root, ``server/`` crate, migrations,
                           scripts and docs
    ENTITY_FILES           per-entity model / handler / service / DTO
    DOCKER_FILES           ``docker/`` compose fragments
    DOCKER_OVERRIDE_FILES  written in the post-writing phase, replacing any
                           earlier ``docker/services.yml``
    CI_CD_FILES            GitHub / GitLab pipelines

Groups are ordered; a later group targeting an already planned destination
replaces it.
"""

from __future__ import annotations

import logging
from typing import List

from axumgen.models import (
    AuthMode,
    CiCdProvider,
    DialectProfile,
    GenerationConfig,
    Topology,
)
from axumgen.planner import ExclusiveChoice, ManifestItem, OutputGroup, TemplateSpec

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("axumgen.manifests")

SERVER_DIR: str = "server/"
DOCKER_DIR: str = "docker/"
MIGRATIONS_DIR: str = "migrations"


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def _relational(c: GenerationConfig) -> bool:
    return c.is_relational


def _document(c: GenerationConfig) -> bool:
    return c.is_document_store


def _dialect(d: DialectProfile):
    return lambda c: c.dialect is d


def _oauth2(c: GenerationConfig) -> bool:
    return c.auth_mode is AuthMode.OAUTH2


def _docs(c: GenerationConfig) -> bool:
    return c.docs_enabled


def _monolith(c: GenerationConfig) -> bool:
    return c.topology is Topology.MONOLITH


def _email(c: GenerationConfig) -> bool:
    return c.email_active


def _consul(c: GenerationConfig) -> bool:
    return c.uses_consul


def _messaging(c: GenerationConfig) -> bool:
    return c.messaging_enabled


# ---------------------------------------------------------------------------
# Project / server manifest
# ---------------------------------------------------------------------------

CARGO_GROUPS: List[ManifestItem] = [
    OutputGroup(
        "cargo",
        [
            "Cargo.toml",
            TemplateSpec("env", rename_to=".env"),
            TemplateSpec("gitignore", rename_to=".gitignore"),
            "Dockerfile",
            "README.md",
        ],
    ),
    OutputGroup("cargo-diesel", ["diesel.toml"], condition=_relational),
    OutputGroup(
        "docker-compose",
        ["docker-compose.yml"],
        condition=lambda c: c.dialect in (DialectProfile.POSTGRESQL, DialectProfile.MONGODB),
    ),
]

SERVER_GROUPS: List[ManifestItem] = [
    OutputGroup(
        "server",
        [
            "Cargo.toml",
            "src/main.rs",
            "src/lib.rs",
            "src/config/mod.rs",
            "src/config/app_config.rs",
            "src/config/database.rs",
            "src/db/mod.rs",
            "src/models/mod.rs",
            "src/handlers/mod.rs",
            "src/handlers/health.rs",
            "src/handlers/management.rs",
            "src/handlers/user.rs",
            "src/handlers/account.rs",
            "src/services/mod.rs",
            "src/services/auth_service.rs",
            "src/middleware/mod.rs",
            "src/middleware/auth.rs",
            "src/errors/mod.rs",
            "src/errors/app_error.rs",
            "src/dto/mod.rs",
            "src/dto/user_dto.rs",
            "src/dto/pagination.rs",
            "src/dto/common.rs",
            "src/test_utils.rs",
        ],
        path=SERVER_DIR,
    ),
    OutputGroup("server-openapi", ["src/openapi.rs"], condition=_docs, path=SERVER_DIR),
    OutputGroup(
        "server-sql",
        [
            "src/db/connection.rs",
            "src/db/schema.rs",
            "src/models/user.rs",
            "src/models/authority.rs",
            "src/services/user_service.rs",
        ],
        condition=_relational,
        path=SERVER_DIR,
    ),
    OutputGroup(
        "server-mongodb",
        [
            "src/db/mongodb_connection.rs",
            "src/models/user_mongodb.rs",
            "src/models/authority_mongodb.rs",
            "src/services/user_service_mongodb.rs",
        ],
        condition=_document,
        path=SERVER_DIR,
    ),
    OutputGroup(
        "server-oauth2",
        [
            "src/config/oauth2_config.rs",
            "src/security/mod.rs",
            "src/security/jwks.rs",
            "src/security/oauth2_validator.rs",
            "src/handlers/oauth2.rs",
        ],
        condition=_oauth2,
        path=SERVER_DIR,
    ),
    OutputGroup(
        "server-static",
        ["src/handlers/static_files.rs"],
        condition=lambda c: c.serves_static_files,
        path=SERVER_DIR,
    ),
    OutputGroup(
        "server-email",
        [
            "src/config/email_config.rs",
            "src/services/email_service.rs",
            "src/templates/email/activation.html",
            "src/templates/email/password-reset.html",
            "src/templates/email/password-changed.html",
            "src/templates/email/account-created.html",
        ],
        condition=_email,
        path=SERVER_DIR,
    ),
    OutputGroup(
        "server-consul",
        ["src/config/consul_config.rs", "src/services/consul_service.rs"],
        condition=_consul,
        path=SERVER_DIR,
    ),
    OutputGroup(
        "server-messaging",
        [
            "src/config/kafka_config.rs",
            "src/services/kafka_producer.rs",
            "src/services/kafka_consumer.rs",
            "src/handlers/kafka.rs",
        ],
        condition=_messaging,
        path=SERVER_DIR,
    ),
]

MIGRATION_GROUPS: List[ManifestItem] = [
    OutputGroup(
        "migrations",
        [
            "migrations/00000000000000_diesel_initial_setup/up.sql",
            "migrations/00000000000000_diesel_initial_setup/down.sql",
            "migrations/00000000000001_create_users_authorities/up.sql",
            "migrations/00000000000001_create_users_authorities/down.sql",
        ],
        condition=_relational,
    ),
    OutputGroup("scripts-mongodb", ["scripts/mongodb_init.js"], condition=_document),
]

DATABASE_DOCS: ExclusiveChoice = ExclusiveChoice(
    "database-docs",
    [
        OutputGroup("docs-sqlite", ["docs/SQLITE.md"], condition=_dialect(DialectProfile.SQLITE)),
        OutputGroup("docs-postgresql", ["docs/POSTGRES.md"], condition=_dialect(DialectProfile.POSTGRESQL)),
        OutputGroup("docs-mysql", ["docs/MYSQL.md"], condition=_dialect(DialectProfile.MYSQL)),
        OutputGroup("docs-mongodb", ["docs/MONGODB.md"], condition=_dialect(DialectProfile.MONGODB)),
    ],
)

DOCS_GROUPS: List[ManifestItem] = [
    OutputGroup(
        "docs",
        [
            "docs/DOCKER.md",
            "docs/EMAIL_INTEGRATION.md",
            "docs/ENTITY_GENERATION.md",
            "docs/SECURITY.md",
            "docs/TESTING.md",
        ],
    ),
    OutputGroup("docs-openapi", ["docs/OPENAPI.md"], condition=_docs),
    OutputGroup("docs-static", ["docs/STATIC_HOSTING.md"], condition=_monolith),
    OutputGroup("docs-keycloak", ["docs/KEYCLOAK.md"], condition=_oauth2),
    OutputGroup("docs-consul", ["docs/CONSUL.md"], condition=_consul),
    OutputGroup("docs-messaging", ["docs/KAFKA.md"], condition=_messaging),
    DATABASE_DOCS,
]

SERVER_FILES: List[ManifestItem] = [
    *CARGO_GROUPS,
    *SERVER_GROUPS,
    *MIGRATION_GROUPS,
    *DOCS_GROUPS,
]


# ---------------------------------------------------------------------------
# Entity manifest
# ---------------------------------------------------------------------------

ENTITY_FILES: List[ManifestItem] = [
    OutputGroup(
        "entity-sql",
        [
            "src/models/_entityFileName_.rs",
            "src/handlers/_entityFileName_.rs",
            "src/services/_entityFileName_service.rs",
            "src/dto/_entityFileName_dto.rs",
        ],
        condition=_relational,
        path=SERVER_DIR,
    ),
    OutputGroup(
        "entity-mongodb",
        [
            "src/models/_entityFileName_mongodb.rs",
            "src/handlers/_entityFileName_.rs",
            "src/services/_entityFileName_service_mongodb.rs",
            "src/dto/_entityFileName_dto.rs",
        ],
        condition=_document,
        path=SERVER_DIR,
    ),
]

# Per-entity migration pair; rendered into the directory chosen by the
# MigrationRegistry, not planned.
ENTITY_MIGRATION_TEMPLATES: List[str] = [
    "migrations/entity/up.sql",
    "migrations/entity/down.sql",
]


# ---------------------------------------------------------------------------
# Docker / CI-CD manifests
# ---------------------------------------------------------------------------

DOCKER_FILES: List[ManifestItem] = [
    OutputGroup("docker-app", ["app.yml"], path=DOCKER_DIR),
    OutputGroup(
        "docker-keycloak",
        ["keycloak.yml", "realm-config/realm.json"],
        condition=_oauth2,
        path=DOCKER_DIR,
    ),
    OutputGroup("docker-mongodb", ["mongodb.yml"], condition=_document, path=DOCKER_DIR),
    OutputGroup(
        "docker-postgresql",
        ["postgresql.yml"],
        condition=_dialect(DialectProfile.POSTGRESQL),
        path=DOCKER_DIR,
    ),
    OutputGroup(
        "docker-mysql", ["mysql.yml"], condition=_dialect(DialectProfile.MYSQL), path=DOCKER_DIR
    ),
    OutputGroup(
        "docker-consul",
        ["consul.yml", "central-server-config/application.yml"],
        condition=_consul,
        path=DOCKER_DIR,
    ),
    OutputGroup("docker-services-base", ["services.yml"], path=DOCKER_DIR),
]

DOCKER_OVERRIDE_FILES: List[ManifestItem] = [
    OutputGroup(
        "docker-services-override",
        [TemplateSpec("services.override.yml", rename_to="services.yml")],
        path=DOCKER_DIR,
    ),
]

CI_CD_FILES: List[ManifestItem] = [
    OutputGroup(
        "ci-github",
        [TemplateSpec("github/workflows/main.yml", rename_to=".github/workflows/main.yml")],
        condition=lambda c: CiCdProvider.GITHUB in c.ci_cd,
    ),
    OutputGroup(
        "ci-gitlab",
        [TemplateSpec("gitlab-ci.yml", rename_to=".gitlab-ci.yml")],
        condition=lambda c: CiCdProvider.GITLAB in c.ci_cd,
    ),
]


# ---------------------------------------------------------------------------
# Stale files
# ---------------------------------------------------------------------------

_DATABASE_COMPOSE_FILES: List[str] = [
    "docker/postgresql.yml",
    "docker/mysql.yml",
    "docker/mongodb.yml",
]

_OWN_COMPOSE_FILE = {
    DialectProfile.POSTGRESQL: "docker/postgresql.yml",
    DialectProfile.MYSQL: "docker/mysql.yml",
    DialectProfile.MONGODB: "docker/mongodb.yml",
}


def stale_docker_files(config: GenerationConfig) -> List[str]:
    """
    Compose files of *other* databases to delete after writing.

    SQLite has no database container, so nothing is removed for it.
    """
    own = _OWN_COMPOSE_FILE.get(config.dialect)
    if own is None:
        return []
    return [p for p in _DATABASE_COMPOSE_FILES if p != own]


__all__: List[str] = [
    "SERVER_DIR",
    "DOCKER_DIR",
    "MIGRATIONS_DIR",
    "SERVER_FILES",
    "DATABASE_DOCS",
    "ENTITY_FILES",
    "ENTITY_MIGRATION_TEMPLATES",
    "DOCKER_FILES",
    "DOCKER_OVERRIDE_FILES",
    "CI_CD_FILES",
    "stale_docker_files",
]

logger.debug("axumgen.manifests loaded — %d public symbols.", len(__all__))
