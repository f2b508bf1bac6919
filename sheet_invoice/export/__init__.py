from .exporter import ExportError, ExportInProgressError, InvoiceExporter
from .renderer import InvoiceRenderer, ReportLabRenderer

__all__ = [
    "ExportError",
    "ExportInProgressError",
    "InvoiceExporter",
    "InvoiceRenderer",
    "ReportLabRenderer",
]
