from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

"""Config dataclasses for the spreadsheet invoice generator.

These are the immutable values handed to services at startup. The YAML loader in
sheet_invoice/config/loader.py is the only place that builds them from raw data.
"""

__all__ = [
    "CompanyConfig",
    "SourceConfig",
    "InvoiceSettings",
    "AppConfig",
]

DEFAULT_TAX_RATE = Decimal("10")
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_INVOICE_NUMBER = "INV-001"
DEFAULT_DUE_DAYS = 30
DEFAULT_SUBJECT = "eラーニングサービス"
DEFAULT_FILE_PREFIX = "請求書"


@dataclass(frozen=True)
class CompanyConfig:
    """Issuer details printed on every invoice."""
    name: str
    address: str = ""
    email: str = ""
    phone: str = ""
    logo_url: str = ""  # 空ならロゴ非表示
    notes: str = ""
    tax_rate: Decimal = DEFAULT_TAX_RATE  # percent


@dataclass(frozen=True)
class SourceConfig:
    """Published spreadsheet location (CSV output)."""
    url: str | None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS


@dataclass(frozen=True)
class InvoiceSettings:
    number: str = DEFAULT_INVOICE_NUMBER
    due_days: int = DEFAULT_DUE_DAYS
    subject: str = DEFAULT_SUBJECT
    file_prefix: str = DEFAULT_FILE_PREFIX


@dataclass(frozen=True)
class AppConfig:
    """Root configuration object."""
    company: CompanyConfig
    source: SourceConfig
    invoice: InvoiceSettings
    output_directory: str = "./out"
