from __future__ import annotations

import logging
from pathlib import Path

from ..models.invoice import Invoice
from ..services.invoice import invoice_filename
from .renderer import InvoiceRenderer

"""PDF export service.

Exports are serialised against themselves: starting an export while another one
is running raises ExportInProgressError. The in-progress flag is always reset,
so a failed export can be retried.
"""

__all__ = [
    "ExportError",
    "ExportInProgressError",
    "InvoiceExporter",
]

logger = logging.getLogger(__name__)


class ExportError(Exception):
    """Raised when rendering or saving the PDF fails."""


class ExportInProgressError(ExportError):
    """Raised when an export is requested while another one is running."""


class InvoiceExporter:
    def __init__(self, renderer: InvoiceRenderer, file_prefix: str) -> None:
        self.renderer = renderer
        self.file_prefix = file_prefix
        self._in_progress = False

    @property
    def in_progress(self) -> bool:
        return self._in_progress

    def export(self, invoice: Invoice, output_dir: Path) -> Path:
        """Render the invoice snapshot and save it as `<prefix>-<invoice number>.pdf`.

        Raises:
            ExportInProgressError: another export has not finished yet
            ExportError: the renderer failed
        """
        if self._in_progress:
            raise ExportInProgressError("an export is already in progress")
        self._in_progress = True
        path = output_dir / invoice_filename(invoice, self.file_prefix)
        try:
            document = self.renderer.rasterize(invoice)
            saved = self.renderer.paginate_and_save(document, path)
        except ExportError:
            raise
        except Exception as e:
            raise ExportError(f"failed to generate PDF: {e}") from e
        finally:
            self._in_progress = False
        logger.info(f"invoice exported: {saved}")
        return saved
