from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .product import Product

"""Catalog lifecycle model.

The catalog moves through the following states for each fetch:

    loading -> (ready | empty | error)

A newer fetch replaces the whole state; nothing is patched in place.
"""

__all__ = [
    "CatalogStatus",
    "CatalogState",
]


class CatalogStatus(Enum):
    """User-visible catalog status.

    - IDLE: no fetch has been started yet
    - LOADING: a fetch is in flight, cart additions are no-ops
    - READY: at least one valid product
    - EMPTY: source reachable but no usable rows (distinct from ERROR)
    - ERROR: transport failure or missing source location
    """
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class CatalogState:
    status: CatalogStatus = CatalogStatus.IDLE
    products: tuple[Product, ...] = field(default_factory=tuple)
    error: str | None = None  # ERROR 時のみ設定
    sequence: int = 0  # fetch sequence number that produced this state
