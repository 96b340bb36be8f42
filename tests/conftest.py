"""
tests/conftest.py
Shared fixtures for the axumgen test suite.

No external mocking libraries are used; real file I/O is performed inside
temporary directories managed by pytest's tmp_path fixture.  The external
schema-sync tool is never executed: generation fixtures disable it, and the
migration tests replace ``subprocess.run`` through ``monkeypatch``.
"""

from __future__ import annotations

import copy
import pathlib
from typing import Any, Dict, List

import pytest
import yaml

from axumgen.generator import GenerationOrchestrator, parse_raw_model
from axumgen.models import EntityDescriptor, GenerationConfig


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

ROOT_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
MODEL_EXAMPLE_PATH: pathlib.Path = ROOT_DIR / "model_example.yaml"


# ---------------------------------------------------------------------------
# Raw model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def raw_model_dict() -> Dict[str, Any]:
    """Load the reference model_example.yaml once per session."""
    assert MODEL_EXAMPLE_PATH.exists(), (
        f"Reference model not found at {MODEL_EXAMPLE_PATH}."
    )
    with open(MODEL_EXAMPLE_PATH, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    assert isinstance(data, dict), "Top-level YAML must be a mapping."
    return data


@pytest.fixture()
def model_dict(raw_model_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Deep copy so each test can mutate freely."""
    return copy.deepcopy(raw_model_dict)


@pytest.fixture()
def model_yaml_path(model_dict: Dict[str, Any], tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "model.yaml"
    with open(path, "w", encoding="utf-8") as fh:
        yaml.dump(model_dict, fh, default_flow_style=False, allow_unicode=True)
    return path


@pytest.fixture()
def example_entities(model_dict: Dict[str, Any]) -> List[EntityDescriptor]:
    """Entities of the reference model (including the skip-server one)."""
    _, entities = parse_raw_model(model_dict)
    return entities


# ---------------------------------------------------------------------------
# Entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def product_entity() -> EntityDescriptor:
    """The Product entity: a required String and an optional BigDecimal."""
    return EntityDescriptor.model_validate(
        {
            "name": "Product",
            "changelogDate": "20240102000000",
            "fields": [
                {"fieldName": "name", "fieldType": "String", "fieldValidateRules": ["required"]},
                {"fieldName": "price", "fieldType": "BigDecimal"},
            ],
        }
    )


@pytest.fixture()
def order_entities() -> List[EntityDescriptor]:
    """OrderItem listed before Order: the migration substring pair."""
    return [
        EntityDescriptor(
            name="OrderItem",
            changelog_date="20240201000000",
            fields=[{"name": "quantity", "field_type": "Integer", "required": True}],
        ),
        EntityDescriptor(
            name="Order",
            changelog_date="20240202000000",
            fields=[{"name": "placedAt", "field_type": "Instant"}],
        ),
    ]


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sqlite_config() -> GenerationConfig:
    return GenerationConfig(base_name="shop", dialect="sqlite")


@pytest.fixture()
def postgres_config() -> GenerationConfig:
    return GenerationConfig(base_name="shop", dialect="postgresql")


@pytest.fixture()
def mongo_config() -> GenerationConfig:
    return GenerationConfig(base_name="shop", dialect="mongodb")


# ---------------------------------------------------------------------------
# Orchestrator fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def orchestrator() -> GenerationOrchestrator:
    """Strict orchestrator that never runs the schema-sync tool."""
    return GenerationOrchestrator(run_schema_sync=False)


@pytest.fixture()
def output_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "out"
    path.mkdir()
    return path
