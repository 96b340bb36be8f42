"""
tests/test_naming.py
Unit tests for axumgen.naming.

Tests cover:
- Convergence of PascalCase, camelCase, kebab-case and spaced input
- Idempotence of the normaliser
- Derived case styles and pluralisation
"""

from __future__ import annotations

import pytest

from axumgen.naming import (
    normalize,
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_plural,
)


class TestNormalize:
    """The single canonical snake_case form."""

    @pytest.mark.parametrize(
        "raw", ["OrderItem", "orderItem", "order-item", "Order Item", "order_item"]
    )
    def test_four_forms_converge(self, raw: str) -> None:
        assert normalize(raw) == "order_item"

    @pytest.mark.parametrize(
        "raw", ["HTTPRequestLog", "StockMovement", "rel_store__product", "  spaced  name "]
    )
    def test_idempotent(self, raw: str) -> None:
        once = normalize(raw)
        assert normalize(once) == once

    def test_acronyms_split(self) -> None:
        assert normalize("HTTPRequestLog") == "http_request_log"

    def test_digits_kept(self) -> None:
        assert normalize("Address2Line") == "address2_line"

    def test_collapses_underscores(self) -> None:
        assert normalize("rel_store__product") == "rel_store_product"

    def test_empty(self) -> None:
        assert normalize("") == ""


class TestCaseStyles:

    def test_pascal(self) -> None:
        assert to_pascal_case("order_item") == "OrderItem"
        assert to_pascal_case("stock-movement") == "StockMovement"

    def test_camel(self) -> None:
        assert to_camel_case("OrderItem") == "orderItem"
        assert to_camel_case("in_stock") == "inStock"

    def test_kebab(self) -> None:
        assert to_kebab_case("OrderItem") == "order-item"

    def test_styles_round_trip_through_normalize(self) -> None:
        for style in (to_pascal_case, to_camel_case, to_kebab_case):
            assert normalize(style("StockMovement")) == "stock_movement"


class TestPlural:

    @pytest.mark.parametrize(
        "word, expected",
        [
            ("Product", "Products"),
            ("Category", "Categories"),
            ("Box", "Boxes"),
            ("Key", "Keys"),
            ("Person", "People"),
            ("Class", "Classes"),
            ("OrderItem", "OrderItems"),
        ],
    )
    def test_plural(self, word: str, expected: str) -> None:
        assert to_plural(word) == expected

    def test_already_plural_unchanged(self) -> None:
        assert to_plural("Items") == "Items"

    def test_empty(self) -> None:
        assert to_plural("") == ""
