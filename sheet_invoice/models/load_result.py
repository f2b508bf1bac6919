from __future__ import annotations

from dataclasses import dataclass

from .catalog_state import CatalogState
from .product import CatalogBuildResult

"""Result model for one catalog load (fetch -> parse -> build)."""

__all__ = [
    "CatalogLoadResult",
]


@dataclass(frozen=True)
class CatalogLoadResult:
    """Outcome of a catalog load, used for the SUMMARY line and exit codes."""
    source: str  # URL or local path
    state: CatalogState
    report: CatalogBuildResult | None = None  # None when the source failed
    elapsed_seconds: float = 0.0

    @property
    def total_rows(self) -> int:
        return self.report.total_rows if self.report else 0

    @property
    def skipped_rows(self) -> int:
        return len(self.report.skipped) if self.report else 0
