from __future__ import annotations

import logging
from pathlib import Path

import requests

from ..models.catalog_state import CatalogState, CatalogStatus
from ..models.product import Product

"""Catalog source access and fetch sequencing.

fetch_csv_text() is the transport collaborator: it returns the raw CSV body or
raises TransportError. CatalogStore holds the current CatalogState and discards
results from any fetch that has been superseded by a newer one.
"""

__all__ = [
    "TransportError",
    "fetch_csv_text",
    "read_csv_file",
    "CatalogStore",
]

logger = logging.getLogger(__name__)

CSV_ENCODING = "utf-8"


class TransportError(Exception):
    """Raised when the sheet cannot be reached or answers with a non-success status."""


def fetch_csv_text(url: str, timeout: float = 10.0, session: requests.Session | None = None) -> str:
    """Download a published CSV sheet.

    No retry is attempted; the caller surfaces the failure as a single error state.
    """
    http = session or requests
    try:
        response = http.get(url, timeout=timeout)
    except requests.RequestException as e:
        raise TransportError(f"failed to reach spreadsheet: {e}") from e
    if not response.ok:
        raise TransportError(
            f"failed to fetch spreadsheet data (status={response.status_code}); "
            "check that the sheet is published as CSV"
        )
    # 公開 CSV は charset を返さないことがあるため明示
    response.encoding = CSV_ENCODING
    return response.text


def read_csv_file(path: Path) -> str:
    """Read a local CSV export. Missing / unreadable files are transport failures."""
    try:
        return path.read_text(encoding=CSV_ENCODING)
    except (OSError, UnicodeDecodeError) as e:
        raise TransportError(f"failed to read csv file {path}: {e}") from e


class CatalogStore:
    """Current catalog state with a sequence-number guard.

    Every fetch takes a token from begin_fetch(). Completing or failing with a
    token older than the latest one is ignored, so a slow stale fetch can never
    overwrite a newer catalog. シリアル実行前提 (ロック不要)
    """

    def __init__(self) -> None:
        self._sequence = 0
        self._state = CatalogState()

    @property
    def state(self) -> CatalogState:
        return self._state

    def begin_fetch(self) -> int:
        self._sequence += 1
        self._state = CatalogState(status=CatalogStatus.LOADING, sequence=self._sequence)
        return self._sequence

    def _is_current(self, token: int) -> bool:
        if token != self._sequence:
            logger.debug(f"discarding stale fetch result token={token} latest={self._sequence}")
            return False
        return True

    def complete(self, token: int, products: list[Product]) -> bool:
        """Publish a built catalog. Returns False when the result was stale."""
        if not self._is_current(token):
            return False
        status = CatalogStatus.READY if products else CatalogStatus.EMPTY
        self._state = CatalogState(status=status, products=tuple(products), sequence=token)
        return True

    def fail(self, token: int, message: str) -> bool:
        if not self._is_current(token):
            return False
        self._state = CatalogState(status=CatalogStatus.ERROR, error=message, sequence=token)
        return True
