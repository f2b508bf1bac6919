from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

"""Cart line model.

A LineItem copies description and unit price from the Product at the moment it
is added; later catalog refreshes never change existing cart lines.
"""

__all__ = [
    "LineItem",
    "Cart",
]


@dataclass(frozen=True)
class LineItem:
    id: str  # Product.id
    description: str
    quantity: int  # >= 1
    unit_price: Decimal


# カートは不変タプル。更新操作は常に新しいタプルを返す
Cart = tuple[LineItem, ...]
