# File: axumgen/models.py
"""
axumgen - Core Data Models
===========================
Pydantic V2 models for the two inputs of a generation run:

- ``GenerationConfig`` — the immutable per-run configuration (dialect,
  authentication mode, topology and feature toggles).  It is built once,
  frozen, and passed explicitly to every component.
- ``EntityDescriptor`` / ``FieldSpec`` / ``RelationshipSpec`` — the entity
  model supplied by the caller.  Constructed fresh each run and discarded
  afterwards; only generated files and migration directories persist.

Entity input accepts both snake_case keys and the camelCase keys of
JHipster-style entity JSON (``fieldName``, ``fieldType``,
``fieldValidateRules``, ``changelogDate``, ``entityTableName`` …).
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from axumgen.naming import normalize, to_kebab_case, to_pascal_case, to_plural

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("axumgen.models")

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class DialectProfile(str, Enum):
    """Backend storage engine targeted by a run."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    MONGODB = "mongodb"

    @property
    def is_document_store(self) -> bool:
        return self is DialectProfile.MONGODB


class AuthMode(str, Enum):
    """Authentication mode of the generated server."""

    JWT = "jwt"
    OAUTH2 = "oauth2"


class Topology(str, Enum):
    """Deployment topology of the generated server."""

    MONOLITH = "monolith"
    MICROSERVICE = "microservice"
    GATEWAY = "gateway"


class ServiceDiscovery(str, Enum):
    CONSUL = "consul"


class CiCdProvider(str, Enum):
    GITHUB = "github"
    GITLAB = "gitlab"


# Alternate spellings accepted on input.
_DIALECT_ALIASES: Dict[str, str] = {
    "lite": "sqlite",
    "relational-a": "postgresql",
    "postgres": "postgresql",
    "relational-b": "mysql",
    "document": "mongodb",
    "document-store": "mongodb",
    "mongo": "mongodb",
}

_AUTH_ALIASES: Dict[str, str] = {
    "token-based": "jwt",
    "token": "jwt",
    "federated": "oauth2",
    "oidc": "oauth2",
}

_TOPOLOGY_ALIASES: Dict[str, str] = {
    "single-deployable": "monolith",
    "service": "microservice",
    "edge-gateway": "gateway",
}


def _resolve_alias(value: Any, aliases: Dict[str, str]) -> Any:
    if isinstance(value, str):
        key: str = value.strip().lower()
        return aliases.get(key, key)
    return value


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_FROZEN_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    frozen=True,
    extra="forbid",
)

_ENTITY_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    frozen=True,
    extra="ignore",
)


# ---------------------------------------------------------------------------
# Generation configuration
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """
    Immutable configuration for one generation run.

    Every option gates one or more output groups; combinations are not
    checked against a compatibility matrix — only the disjointness of the
    planner's exclusive choices is enforced.
    """

    model_config = _FROZEN_CONFIG

    base_name: str = Field(
        default="app",
        min_length=1,
        max_length=128,
        validation_alias=AliasChoices("base_name", "baseName"),
        description="Application name; the crate name is derived from it.",
    )
    dialect: DialectProfile = Field(
        default=DialectProfile.SQLITE,
        validation_alias=AliasChoices("dialect", "devDatabaseType", "database"),
        description="Target database backend.",
    )
    auth_mode: AuthMode = Field(
        default=AuthMode.JWT,
        validation_alias=AliasChoices("auth_mode", "authenticationType", "auth"),
        description="Authentication mode.",
    )
    topology: Topology = Field(
        default=Topology.MONOLITH,
        validation_alias=AliasChoices("topology", "applicationType"),
        description="Deployment topology.",
    )
    docs_enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices("docs_enabled", "enableSwaggerCodegen"),
        description="Generate OpenAPI documentation and register entities in it.",
    )
    email_enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices("email_enabled", "enableEmail"),
        description="Generate the e-mail service (JWT authentication only).",
    )
    messaging_enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices("messaging_enabled", "enableMessaging"),
        description="Generate the message-broker integration.",
    )
    service_discovery: Optional[ServiceDiscovery] = Field(
        default=None,
        validation_alias=AliasChoices("service_discovery", "serviceDiscoveryType"),
        description="Service discovery backend (microservices).",
    )
    skip_client: bool = Field(
        default=False,
        validation_alias=AliasChoices("skip_client", "skipClient"),
        description="No front-end is bundled with the server.",
    )
    ci_cd: List[CiCdProvider] = Field(
        default_factory=list,
        validation_alias=AliasChoices("ci_cd", "ciCd"),
        description="CI/CD pipelines to generate.",
    )

    # -- Input normalisation -------------------------------------------------

    @field_validator("dialect", mode="before")
    @classmethod
    def _dialect_alias(cls, v: Any) -> Any:
        return _resolve_alias(v, _DIALECT_ALIASES)

    @field_validator("auth_mode", mode="before")
    @classmethod
    def _auth_alias(cls, v: Any) -> Any:
        return _resolve_alias(v, _AUTH_ALIASES)

    @field_validator("topology", mode="before")
    @classmethod
    def _topology_alias(cls, v: Any) -> Any:
        return _resolve_alias(v, _TOPOLOGY_ALIASES)

    @field_validator("service_discovery", mode="before")
    @classmethod
    def _no_discovery(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip().lower() in {"", "no", "none"}:
            return None
        return v

    # -- Derived flags -------------------------------------------------------

    @property
    def crate_name(self) -> str:
        return normalize(self.base_name)

    @property
    def is_document_store(self) -> bool:
        return self.dialect.is_document_store

    @property
    def is_relational(self) -> bool:
        return not self.dialect.is_document_store

    @property
    def email_active(self) -> bool:
        """E-mail is only generated with JWT; OAuth2 manages users externally."""
        return self.email_enabled and self.auth_mode is AuthMode.JWT

    @property
    def serves_static_files(self) -> bool:
        """Monoliths, and microservices shipping a micro-frontend, host static UI files."""
        if self.topology is Topology.MONOLITH:
            return True
        return self.topology is Topology.MICROSERVICE and not self.skip_client

    @property
    def uses_consul(self) -> bool:
        """Service discovery only applies to microservices and gateways."""
        return (
            self.service_discovery is ServiceDiscovery.CONSUL
            and self.topology is not Topology.MONOLITH
        )

    @property
    def server_port(self) -> int:
        return 8081 if self.topology is Topology.MICROSERVICE else 8080

    def template_context(self) -> Dict[str, Any]:
        """Flatten the configuration into template variables."""
        ctx: Dict[str, Any] = self.model_dump(mode="json")
        ctx.update(
            crate_name=self.crate_name,
            is_document_store=self.is_document_store,
            is_relational=self.is_relational,
            email_active=self.email_active,
            serves_static_files=self.serves_static_files,
            uses_consul=self.uses_consul,
            server_port=self.server_port,
        )
        return ctx


# ---------------------------------------------------------------------------
# Dependency metadata
# ---------------------------------------------------------------------------


_DEFAULT_RUST_DEPENDENCIES: Dict[str, str] = {
    "anyhow": "1",
    "axum": "0.7",
    "tokio": "1",
    "diesel": "2.1",
    "serde": "1",
    "serde_json": "1",
    "dotenvy": "0.15",
    "tracing": "0.1",
    "tracing-subscriber": "0.3",
    "thiserror": "1",
    "chrono": "0.4",
    "uuid": "1",
    "argon2": "0.5",
    "jsonwebtoken": "9",
    "tower-http": "0.5",
    "validator": "0.18",
}


class DependencyMetadata(BaseModel):
    """Toolchain and crate versions exposed to templates (Cargo.toml, Dockerfile)."""

    model_config = _FROZEN_CONFIG

    rust_version: str = Field(default="1.75.0")
    dependencies: Dict[str, str] = Field(
        default_factory=lambda: dict(_DEFAULT_RUST_DEPENDENCIES)
    )

    def for_config(self, config: GenerationConfig) -> Dict[str, str]:
        """Crate dependencies adjusted for the active dialect and features."""
        deps: Dict[str, str] = dict(self.dependencies)
        if config.is_document_store:
            deps.pop("diesel", None)
            deps.setdefault("mongodb", "2")
            deps.setdefault("bson", "2")
            deps.setdefault("futures", "0.3")
        if config.uses_consul or config.auth_mode is AuthMode.OAUTH2:
            deps.setdefault("reqwest", "0.12")
        if config.uses_consul:
            deps.setdefault("hostname", "0.4")
        if config.email_active:
            deps.setdefault("lettre", "0.11")
        if config.docs_enabled:
            deps.setdefault("utoipa", "4")
            deps.setdefault("utoipa-swagger-ui", "7")
        return deps


# ---------------------------------------------------------------------------
# Entity model
# ---------------------------------------------------------------------------


class FieldSpec(BaseModel):
    """
    One entity field.

    ``field_type`` is kept as the raw input string so that unknown kinds
    survive parsing and reach the type mapper's documented fallback.
    """

    model_config = _ENTITY_CONFIG

    name: str = Field(..., min_length=1, validation_alias=AliasChoices("name", "fieldName"))
    field_type: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("field_type", "fieldType", "kind", "type"),
    )
    required: bool = Field(default=False)
    skip_server: bool = Field(
        default=False, validation_alias=AliasChoices("skip_server", "skipServer")
    )

    @model_validator(mode="before")
    @classmethod
    def _required_from_rules(cls, data: Any) -> Any:
        if isinstance(data, dict) and "required" not in data:
            rules = data.get("fieldValidateRules") or data.get("validate_rules") or []
            if "required" in rules:
                data = {**data, "required": True}
        return data


class RelationshipSpec(BaseModel):
    model_config = _ENTITY_CONFIG

    name: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("name", "relationshipName")
    )
    other_entity: str = Field(
        ..., min_length=1, validation_alias=AliasChoices("other_entity", "otherEntityName")
    )
    relationship_type: str = Field(
        default="many-to-one",
        validation_alias=AliasChoices("relationship_type", "relationshipType"),
    )
    join_table: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("join_table", "joinTableName")
    )

    @field_validator("join_table")
    @classmethod
    def _single_underscore(cls, v: Optional[str]) -> Optional[str]:
        # Rust warns on module names such as "rel_store__product".
        if v is None:
            return v
        return v.replace("__", "_")


class EntityDescriptor(BaseModel):
    """
    One entity of the application model.

    ``stable_timestamp`` is the entity's own change-log date.  It names the
    entity's migration directory, so regenerating the same entity always
    computes the same directory name.
    """

    model_config = _ENTITY_CONFIG

    name: str = Field(..., min_length=1)
    table_name: str = Field(
        default="",
        validation_alias=AliasChoices("table_name", "entityTableName", "tableName"),
    )
    api_path: str = Field(
        default="",
        validation_alias=AliasChoices("api_path", "entityApiUrl", "apiPath"),
    )
    fields: List[FieldSpec] = Field(default_factory=list)
    relationships: List[RelationshipSpec] = Field(default_factory=list)
    changelog_date: str = Field(
        ..., validation_alias=AliasChoices("changelog_date", "changelogDate")
    )
    skip_server: bool = Field(
        default=False, validation_alias=AliasChoices("skip_server", "skipServer")
    )
    built_in: bool = Field(
        default=False, validation_alias=AliasChoices("built_in", "builtIn")
    )

    @field_validator("changelog_date", mode="before")
    @classmethod
    def _changelog_as_digits(cls, v: Any) -> Any:
        if isinstance(v, int):
            v = str(v)
        if isinstance(v, str) and not v.isdigit():
            raise ValueError(f"changelog_date must be all digits, got {v!r}")
        return v

    @model_validator(mode="after")
    def _fill_derived_names(self) -> "EntityDescriptor":
        if not self.table_name:
            object.__setattr__(self, "table_name", normalize(self.name))
        if not self.api_path:
            object.__setattr__(self, "api_path", to_kebab_case(to_plural(self.name)))
        return self

    # -- Derived names -------------------------------------------------------

    @property
    def entity_class(self) -> str:
        return to_pascal_case(self.name)

    @property
    def entity_file_name(self) -> str:
        return to_kebab_case(self.name)

    @property
    def module_name(self) -> str:
        return normalize(self.entity_file_name)

    @property
    def stable_timestamp(self) -> str:
        return self.changelog_date

    @property
    def is_generated(self) -> bool:
        """Skip-server and built-in entities never reach the generation engine."""
        return not (self.skip_server or self.built_in)

    def __repr__(self) -> str:
        return f"<Entity {self.name} table={self.table_name} fields={len(self.fields)}>"


__all__: List[str] = [
    "DialectProfile",
    "AuthMode",
    "Topology",
    "ServiceDiscovery",
    "CiCdProvider",
    "GenerationConfig",
    "DependencyMetadata",
    "FieldSpec",
    "RelationshipSpec",
    "EntityDescriptor",
]

logger.debug("axumgen.models loaded — %d public symbols.", len(__all__))
