from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from decimal import Decimal

import pandas as pd

from ..models.product import (
    PRODUCT_ID_PREFIX,
    CatalogBuildResult,
    Product,
    RawRow,
    SkippedRow,
)

"""Catalog builder: raw CSV rows -> validated Product entries.

Each row is validated on its own. An invalid row is dropped and never aborts
the batch; the builder does not raise on row data. Skip reasons are kept for
diagnostics only and are not shown to the user row by row.
"""

__all__ = [
    "build_catalog",
    "build_catalog_report",
    "parse_price",
    "catalog_frame",
    "MIN_COLUMNS",
]

logger = logging.getLogger(__name__)

MIN_COLUMNS = 2  # name, price

# 数字と "." 以外 (通貨記号・桁区切り・単位) は除去
_NON_NUMERIC = re.compile(r"[^0-9.]")
# 先頭から読める最長の小数 ("1.2.3" -> "1.2")
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")

# Skip reason codes
TOO_FEW_COLUMNS = "TOO_FEW_COLUMNS"
MISSING_NAME = "MISSING_NAME"
MISSING_PRICE = "MISSING_PRICE"
INVALID_PRICE = "INVALID_PRICE"


def parse_price(price_str: str) -> Decimal | None:
    """Coerce a free-form price cell to a Decimal.

    Every character other than a digit or '.' is removed first, then the
    longest leading decimal number is read. Returns None when nothing numeric
    remains.

    >>> parse_price("¥1,200")
    Decimal('1200')
    >>> parse_price("1,200.50")
    Decimal('1200.50')
    >>> parse_price("N/A") is None
    True
    """
    cleaned = _NON_NUMERIC.sub("", price_str)
    match = _LEADING_NUMBER.match(cleaned)
    if match is None:
        return None
    value = Decimal(match.group(0))
    if not value.is_finite():  # pragma: no cover (regex only yields finite digits)
        return None
    return value


def _coerce_row(fields: RawRow, product_id: str) -> Product | str:
    """Return a Product, or the reason code when the row must be skipped."""
    if len(fields) < MIN_COLUMNS:
        return TOO_FEW_COLUMNS
    name = fields[0].strip()
    if not name:
        return MISSING_NAME
    price_str = fields[1].strip()
    if not price_str:
        return MISSING_PRICE
    description = fields[2].strip() if len(fields) > 2 else ""
    price = parse_price(price_str)
    if price is None:
        return INVALID_PRICE
    return Product(
        id=product_id,
        name=name,
        description=description or name,
        price=price,
    )


def build_catalog_report(rows: Iterable[RawRow], start_index: int = 1) -> CatalogBuildResult:
    """Validate rows into Products and collect skip diagnostics.

    Ids use the row's position in the *input* sequence, so ids stay stable across
    reprocessing and gaps appear where earlier rows were dropped. Blank rows
    (empty tuples) keep their position but are neither products nor defects.
    """
    products: list[Product] = []
    skipped: list[SkippedRow] = []
    for index, fields in enumerate(rows):
        if not fields:
            continue
        row_number = index + start_index
        outcome = _coerce_row(fields, f"{PRODUCT_ID_PREFIX}{row_number}")
        if isinstance(outcome, Product):
            products.append(outcome)
        else:
            logger.debug(f"skip row={row_number} reason={outcome}")
            skipped.append(SkippedRow(row_number=row_number, reason=outcome))
    return CatalogBuildResult(products=products, skipped=skipped)


def build_catalog(rows: Sequence[RawRow], start_index: int = 1) -> list[Product]:
    """Build the product catalog from data rows (header already removed)."""
    return build_catalog_report(rows, start_index).products


def catalog_frame(products: Iterable[Product]) -> pd.DataFrame:
    """Tabular view of a catalog for inspection output."""
    records = [
        {"id": p.id, "name": p.name, "description": p.description, "price": p.price}
        for p in products
    ]
    return pd.DataFrame.from_records(records, columns=["id", "name", "description", "price"])
