from __future__ import annotations

from dataclasses import dataclass, fields, replace

__all__ = [
    "Customer",
    "CUSTOMER_FIELDS",
]


@dataclass(frozen=True)
class Customer:
    """Free-text billing details entered by the user. Render data only."""
    name: str = ""
    order_number: str = ""
    email: str = ""
    attendee_name: str = ""  # 複数名の場合はまとめて入力

    def with_field(self, key: str, value: str) -> Customer:
        """Return a copy with one field replaced. Unknown keys leave it unchanged."""
        if key not in CUSTOMER_FIELDS:
            return self
        return replace(self, **{key: value})


CUSTOMER_FIELDS = frozenset(f.name for f in fields(Customer))
