from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

"""Catalog product models for the spreadsheet invoice generator.

RawRow is the untyped field tuple produced by the CSV parser; Product is the
validated entry emitted by the catalog builder. No Product ever carries a
partially parsed value.
"""

__all__ = [
    "RawRow",
    "Product",
    "SkippedRow",
    "CatalogBuildResult",
    "PRODUCT_ID_PREFIX",
]

# 1 行分の生フィールド。空行は () として位置だけ保持する
RawRow = tuple[str, ...]

PRODUCT_ID_PREFIX = "prod-sheet-"


@dataclass(frozen=True)
class Product:
    """A purchasable catalog entry.

    The id is derived from the row position in the source sheet, so it stays
    stable when the same sheet is processed again.
    """
    id: str
    name: str
    description: str  # falls back to name when column C is empty
    price: Decimal


@dataclass(frozen=True)
class SkippedRow:
    """Diagnostic record for a source row that did not produce a Product."""
    row_number: int  # 1-based position among data rows (header excluded)
    reason: str  # UPPER_SNAKE reason code


@dataclass(frozen=True)
class CatalogBuildResult:
    products: list[Product]
    skipped: list[SkippedRow]

    @property
    def total_rows(self) -> int:
        return len(self.products) + len(self.skipped)
