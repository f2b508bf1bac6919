from __future__ import annotations

from datetime import date
from typing import Any

from ..models.catalog_state import CatalogState
from ..models.config_models import AppConfig
from ..models.customer import Customer
from ..models.invoice import Invoice, InvoiceTotals
from ..models.line_item import Cart
from . import cart as cart_ops
from .invoice import build_invoice

"""Invoice session: the single-threaded event model.

Each handler runs to completion and replaces the cart or customer value with a
fresh one. Totals and the invoice view are recomputed from current state on
every access and are never stored.
"""

__all__ = [
    "InvoiceSession",
]


class InvoiceSession:
    def __init__(self, config: AppConfig, today: date | None = None) -> None:
        self.config = config
        self.today = today
        self.catalog = CatalogState()
        self.cart: Cart = ()
        self.customer = Customer()

    # -- events -----------------------------------------------------------

    def on_catalog_loaded(self, state: CatalogState) -> None:
        """Replace the catalog wholesale. Existing cart lines keep their copied values."""
        self.catalog = state

    def add_product(self, product_id: str) -> bool:
        """Add one unit; returns False when the product is not in the loaded catalog."""
        before = self.cart
        self.cart = cart_ops.add_to_cart(self.cart, self.catalog.products, product_id)
        return self.cart is not before

    def change_quantity(self, item_id: str, quantity: Any) -> None:
        self.cart = cart_ops.update_quantity(self.cart, item_id, quantity)

    def remove_item(self, item_id: str) -> None:
        self.cart = cart_ops.remove_from_cart(self.cart, item_id)

    def update_customer(self, key: str, value: str) -> None:
        self.customer = self.customer.with_field(key, value)

    # -- derived values -----------------------------------------------------

    @property
    def totals(self) -> InvoiceTotals:
        return cart_ops.compute_totals(self.cart, self.config.company.tax_rate)

    @property
    def invoice(self) -> Invoice:
        return build_invoice(self.customer, self.cart, self.config, today=self.today)
