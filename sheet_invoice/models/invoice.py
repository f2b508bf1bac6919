from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from .customer import Customer
from .line_item import Cart

"""Invoice view models.

Invoice is a read-only projection of customer + cart + static metadata. It is
rebuilt whenever either input changes and is never edited in place.
"""

__all__ = [
    "InvoiceTotals",
    "Invoice",
]


@dataclass(frozen=True)
class InvoiceTotals:
    """Unrounded money amounts. Rounding happens only when formatting for display."""
    subtotal: Decimal
    tax: Decimal
    total: Decimal


@dataclass(frozen=True)
class Invoice:
    invoice_number: str
    issue_date: date
    due_date: date
    customer: Customer
    items: Cart
    notes: str
    tax_rate: Decimal  # percent, e.g. 10
    subject: str
    totals: InvoiceTotals

    @property
    def is_empty(self) -> bool:
        return not self.items
