"""
tests/test_rendering.py
Unit tests for axumgen.rendering.

Tests cover:
- Rendering of user-supplied template directories
- Naming filters registered on the Jinja2 environment
- Missing templates and undefined variables surfacing as TemplateRenderError
- Every planned source template being shipped with the package
"""

from __future__ import annotations

import pathlib

import pytest

from axumgen.errors import TemplateRenderError
from axumgen.generator import annotate_entities, plan_run
from axumgen.manifests import ENTITY_MIGRATION_TEMPLATES
from axumgen.models import EntityDescriptor, GenerationConfig
from axumgen.rendering import JinjaRenderer


@pytest.fixture()
def templates_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    root = tmp_path / "templates"
    (root / "src").mkdir(parents=True)
    (root / "src" / "lib.rs.j2").write_text(
        "pub mod {{ entity_name | snake_case }};\n"
        "// {{ entity_name | kebab_case | plural }}\n"
        "const {{ entity_name | upper_snake }}: &str = \"{{ entity_name | camel_case }}\";\n",
        encoding="utf-8",
    )
    return root


class TestJinjaRenderer:

    def test_renders_with_filters(self, templates_dir: pathlib.Path) -> None:
        out = JinjaRenderer(templates_dir).render("src/lib.rs", {"entity_name": "StockMovement"})
        assert out == (
            "pub mod stock_movement;\n"
            "// stock-movements\n"
            "const STOCK_MOVEMENT: &str = \"stockMovement\";\n"
        )

    def test_missing_template(self, templates_dir: pathlib.Path) -> None:
        with pytest.raises(TemplateRenderError) as exc_info:
            JinjaRenderer(templates_dir).render("src/main.rs", {})
        assert exc_info.value.template == "src/main.rs"

    def test_undefined_variable(self, templates_dir: pathlib.Path) -> None:
        with pytest.raises(TemplateRenderError):
            JinjaRenderer(templates_dir).render("src/lib.rs", {})

    def test_has_template(self, templates_dir: pathlib.Path) -> None:
        renderer = JinjaRenderer(templates_dir)
        assert renderer.has_template("src/lib.rs")
        assert not renderer.has_template("src/main.rs")


@pytest.mark.parametrize(
    "config",
    [
        GenerationConfig(),
        GenerationConfig(dialect="postgresql", ci_cd=["github", "gitlab"], email_enabled=True),
        GenerationConfig(dialect="mysql", auth_mode="oauth2", topology="gateway"),
        GenerationConfig(
            dialect="mongodb",
            topology="microservice",
            service_discovery="consul",
            messaging_enabled=True,
        ),
    ],
    ids=["sqlite", "postgresql", "mysql", "mongodb"],
)
def test_every_planned_template_is_bundled(
    config: GenerationConfig, product_entity: EntityDescriptor
) -> None:
    renderer = JinjaRenderer()
    run_plan = plan_run(config, annotate_entities([product_entity], config))
    sources = [rf.source_template for rf in run_plan.global_files + run_plan.override_files]
    sources += [rf.source_template for rf in run_plan.entity_files["Product"]]
    if config.is_relational:
        sources += ENTITY_MIGRATION_TEMPLATES

    missing = [s for s in sources if not renderer.has_template(s)]
    assert missing == []
