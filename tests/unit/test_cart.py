from __future__ import annotations

from decimal import Decimal

import pytest

from sheet_invoice.models import InvoiceTotals, LineItem, Product
from sheet_invoice.services.cart import (
    add_to_cart,
    compute_line_total,
    compute_subtotal,
    compute_tax,
    compute_total,
    compute_totals,
    normalize_quantity,
    remove_from_cart,
    update_quantity,
)

CATALOG = [
    Product(id="prod-sheet-1", name="Course A", description="Course A (online)", price=Decimal("1000")),
    Product(id="prod-sheet-3", name="Course B", description="Course B", price=Decimal("500")),
]


def test_add_to_cart_appends_copied_line():
    cart = add_to_cart((), CATALOG, "prod-sheet-1")
    assert cart == (LineItem(id="prod-sheet-1", description="Course A (online)", quantity=1, unit_price=Decimal("1000")),)


def test_add_to_cart_twice_increments_quantity():
    cart = add_to_cart((), CATALOG, "prod-sheet-1")
    cart = add_to_cart(cart, CATALOG, "prod-sheet-1")
    assert len(cart) == 1
    assert cart[0].quantity == 2


def test_add_to_cart_preserves_order_of_other_lines():
    cart = add_to_cart((), CATALOG, "prod-sheet-1")
    cart = add_to_cart(cart, CATALOG, "prod-sheet-3")
    cart = add_to_cart(cart, CATALOG, "prod-sheet-1")
    assert [(i.id, i.quantity) for i in cart] == [("prod-sheet-1", 2), ("prod-sheet-3", 1)]


def test_add_to_cart_unknown_id_is_noop():
    cart = add_to_cart((), CATALOG, "prod-sheet-1")
    assert add_to_cart(cart, CATALOG, "prod-sheet-99") is cart


def test_add_to_cart_with_empty_catalog_is_noop():
    assert add_to_cart((), [], "prod-sheet-1") == ()


def test_add_to_cart_does_not_mutate_input():
    original = add_to_cart((), CATALOG, "prod-sheet-1")
    snapshot = tuple(original)
    add_to_cart(original, CATALOG, "prod-sheet-1")
    assert original == snapshot


def test_cart_line_is_decoupled_from_catalog():
    cart = add_to_cart((), CATALOG, "prod-sheet-1")
    repriced = [Product(id="prod-sheet-1", name="Course A", description="Renamed", price=Decimal("9999"))]
    # 既存行は新しいカタログの影響を受けない
    cart = add_to_cart(cart, repriced, "prod-sheet-1")
    assert cart[0].description == "Course A (online)"
    assert cart[0].unit_price == Decimal("1000")
    assert cart[0].quantity == 2


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (3, 3),
        ("4", 4),
        (2.9, 2),
        (0, 1),
        (-5, 1),
        ("-2", 1),
        ("abc", 1),
        ("", 1),
        (None, 1),
        (float("nan"), 1),
        (float("inf"), 1),
        (0.5, 1),
        (True, 1),
        (Decimal("7"), 7),
    ],
)
def test_normalize_quantity(value, expected):
    assert normalize_quantity(value) == expected


def test_update_quantity_sets_value():
    cart = add_to_cart((), CATALOG, "prod-sheet-1")
    cart = update_quantity(cart, "prod-sheet-1", 5)
    assert cart[0].quantity == 5


@pytest.mark.parametrize("bad", [0, -1, "x", None])
def test_update_quantity_non_positive_becomes_one(bad):
    cart = add_to_cart((), CATALOG, "prod-sheet-1")
    cart = update_quantity(cart, "prod-sheet-1", 7)
    cart = update_quantity(cart, "prod-sheet-1", bad)
    assert cart[0].quantity == 1


def test_update_quantity_unknown_id_is_noop():
    cart = add_to_cart((), CATALOG, "prod-sheet-1")
    assert update_quantity(cart, "nope", 3) == cart


def test_remove_from_cart():
    cart = add_to_cart((), CATALOG, "prod-sheet-1")
    cart = add_to_cart(cart, CATALOG, "prod-sheet-3")
    assert [i.id for i in remove_from_cart(cart, "prod-sheet-1")] == ["prod-sheet-3"]


def test_remove_from_cart_unknown_id_returns_equal_cart():
    cart = add_to_cart((), CATALOG, "prod-sheet-1")
    assert remove_from_cart(cart, "missing") == cart


def test_compute_line_total():
    item = LineItem(id="x", description="x", quantity=3, unit_price=Decimal("0.1"))
    assert compute_line_total(item) == Decimal("0.3")


def test_subtotal_tax_total_example():
    cart = (
        LineItem(id="a", description="a", quantity=2, unit_price=Decimal("1000")),
        LineItem(id="b", description="b", quantity=1, unit_price=Decimal("500")),
    )
    subtotal = compute_subtotal(cart)
    tax = compute_tax(subtotal, 10)
    assert subtotal == 2500
    assert tax == 250
    assert compute_total(subtotal, tax) == 2750


def test_compute_totals_matches_parts():
    cart = (LineItem(id="a", description="a", quantity=3, unit_price=Decimal("333.33")),)
    assert compute_totals(cart, Decimal("8")) == InvoiceTotals(
        subtotal=Decimal("999.99"),
        tax=Decimal("79.9992"),
        total=Decimal("1079.9892"),
    )


def test_subtotal_of_empty_cart_is_zero():
    assert compute_subtotal(()) == 0
    assert compute_totals((), 10).total == 0


def test_decimal_accumulation_is_exact():
    cart = tuple(LineItem(id=str(i), description="", quantity=1, unit_price=Decimal("0.1")) for i in range(10))
    assert compute_subtotal(cart) == Decimal("1.0")
