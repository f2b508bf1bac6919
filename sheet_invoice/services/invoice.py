from __future__ import annotations

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal, localcontext

from ..models.config_models import AppConfig
from ..models.customer import Customer
from ..models.invoice import Invoice
from ..models.line_item import Cart
from .cart import compute_totals

"""Invoice projection and display formatting.

build_invoice() combines the current customer and cart with the static company
and invoice settings. It is cheap and pure, so callers rebuild it on every
change instead of keeping a copy around.
"""

__all__ = [
    "build_invoice",
    "format_currency",
    "invoice_filename",
    "CURRENCY_SYMBOL",
]

CURRENCY_SYMBOL = "￥"  # ja-JP / JPY のみ対応
_YEN = Decimal("1")


def build_invoice(customer: Customer, cart: Cart, config: AppConfig, today: date | None = None) -> Invoice:
    """Project the current state into a read-only Invoice.

    Args:
        customer: Billing details as entered
        cart: Current cart lines
        config: Application configuration (company + invoice settings)
        today: Issue date, defaults to the local current date

    Returns:
        Invoice with due date = issue date + configured due days
    """
    issue_date = today or date.today()
    tax_rate = config.company.tax_rate
    return Invoice(
        invoice_number=config.invoice.number,
        issue_date=issue_date,
        due_date=issue_date + timedelta(days=config.invoice.due_days),
        customer=customer,
        items=cart,
        notes=config.company.notes,
        tax_rate=tax_rate,
        subject=config.invoice.subject,
        totals=compute_totals(cart, tax_rate),
    )


def format_currency(amount: Decimal | int) -> str:
    """Format an amount as yen, rounding half-up to whole units.

    >>> format_currency(Decimal("1200.5"))
    '￥1,201'
    >>> format_currency(0)
    '￥0'
    """
    value = Decimal(amount)
    with localcontext() as ctx:
        # quantize は結果の桁数が prec を超えると InvalidOperation になる
        ctx.prec = max(ctx.prec, value.adjusted() + 2)
        rounded = value.quantize(_YEN, rounding=ROUND_HALF_UP)
        sign = "-" if rounded < 0 else ""
        return f"{sign}{CURRENCY_SYMBOL}{abs(rounded):,f}"


def invoice_filename(invoice: Invoice, prefix: str) -> str:
    return f"{prefix}-{invoice.invoice_number}.pdf"
