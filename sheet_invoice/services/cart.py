from __future__ import annotations

import math
from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from ..models.invoice import InvoiceTotals
from ..models.line_item import Cart, LineItem
from ..models.product import Product

"""Cart and totals calculator.

Pure functions over immutable values: every mutation returns a new cart and the
input is never changed. Money uses Decimal end to end and is rounded only by
the display formatter.
"""

__all__ = [
    "add_to_cart",
    "update_quantity",
    "remove_from_cart",
    "normalize_quantity",
    "compute_line_total",
    "compute_subtotal",
    "compute_tax",
    "compute_total",
    "compute_totals",
]

MIN_QUANTITY = 1
_HUNDRED = Decimal(100)


def _find_product(catalog: Iterable[Product], product_id: str) -> Product | None:
    for product in catalog:
        if product.id == product_id:
            return product
    return None


def add_to_cart(cart: Cart, catalog: Iterable[Product], product_id: str) -> Cart:
    """Add one unit of a catalog product.

    Unknown ids (including any id while the catalog is empty) leave the cart
    unchanged. A product already in the cart gets its quantity incremented
    instead of a second line.
    """
    product = _find_product(catalog, product_id)
    if product is None:
        return cart
    if any(item.id == product.id for item in cart):
        return tuple(
            LineItem(item.id, item.description, item.quantity + 1, item.unit_price)
            if item.id == product.id
            else item
            for item in cart
        )
    return (
        *cart,
        LineItem(
            id=product.id,
            description=product.description,
            quantity=1,
            unit_price=product.price,
        ),
    )


def normalize_quantity(value: Any) -> int:
    """Coerce user input to a quantity >= 1.

    Non-numeric, non-finite, zero and negative values become 1. Fractional
    values are truncated and fall back to 1 when that leaves nothing.
    """
    if isinstance(value, bool):
        return MIN_QUANTITY
    try:
        number = float(value)
    except (TypeError, ValueError):
        return MIN_QUANTITY
    if not math.isfinite(number):
        return MIN_QUANTITY
    quantity = int(number)
    return quantity if quantity >= MIN_QUANTITY else MIN_QUANTITY


def update_quantity(cart: Cart, item_id: str, new_quantity: Any) -> Cart:
    if not any(item.id == item_id for item in cart):
        return cart
    quantity = normalize_quantity(new_quantity)
    return tuple(
        LineItem(item.id, item.description, quantity, item.unit_price)
        if item.id == item_id
        else item
        for item in cart
    )


def remove_from_cart(cart: Cart, item_id: str) -> Cart:
    return tuple(item for item in cart if item.id != item_id)


def compute_line_total(item: LineItem) -> Decimal:
    return item.unit_price * item.quantity


def compute_subtotal(cart: Cart) -> Decimal:
    """Sum of quantity x unit price, accumulated in cart order."""
    subtotal = Decimal(0)
    for item in cart:
        subtotal += compute_line_total(item)
    return subtotal


def compute_tax(subtotal: Decimal, tax_rate_percent: Decimal | int | str) -> Decimal:
    return subtotal * Decimal(tax_rate_percent) / _HUNDRED


def compute_total(subtotal: Decimal, tax: Decimal) -> Decimal:
    return subtotal + tax


def compute_totals(cart: Cart, tax_rate_percent: Decimal | int | str) -> InvoiceTotals:
    subtotal = compute_subtotal(cart)
    tax = compute_tax(subtotal, tax_rate_percent)
    return InvoiceTotals(subtotal=subtotal, tax=tax, total=compute_total(subtotal, tax))
