"""Domain models for the spreadsheet invoice generator.

This package contains the value types passed between the catalog pipeline,
the cart calculator and the PDF export collaborator.
"""

from .catalog_state import CatalogState, CatalogStatus
from .config_models import AppConfig, CompanyConfig, InvoiceSettings, SourceConfig
from .customer import Customer
from .error_record import ErrorRecord
from .invoice import Invoice, InvoiceTotals
from .line_item import Cart, LineItem
from .load_result import CatalogLoadResult
from .product import CatalogBuildResult, Product, RawRow, SkippedRow

__all__ = [
    # Configuration models
    "AppConfig",
    "CompanyConfig",
    "InvoiceSettings",
    "SourceConfig",
    # Catalog models
    "CatalogBuildResult",
    "CatalogLoadResult",
    "CatalogState",
    "CatalogStatus",
    "Product",
    "RawRow",
    "SkippedRow",
    # Cart / invoice models
    "Cart",
    "Customer",
    "Invoice",
    "InvoiceTotals",
    "LineItem",
    # Diagnostics
    "ErrorRecord",
]
