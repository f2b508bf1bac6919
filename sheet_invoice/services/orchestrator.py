from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from ..catalog.builder import build_catalog_report
from ..catalog.csv_parser import parse_table
from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import AppConfig
from ..models.error_record import SOURCE_LEVEL_ROW, ErrorRecord
from ..models.load_result import CatalogLoadResult
from .catalog_source import CatalogStore, TransportError, fetch_csv_text, read_csv_file

"""Catalog load orchestration.

Runs one fetch -> parse -> build cycle against a CatalogStore:

1. Take a fetch token (state becomes LOADING)
2. Fetch the raw CSV text (URL via requests, or a local file)
3. Parse rows, build the catalog, record skipped rows in the error log
4. Publish READY / EMPTY, or ERROR on transport failure

Row-level defects never abort the load. Transport failures never reach the builder.
"""

__all__ = [
    "load_catalog",
    "MISSING_SOURCE_MESSAGE",
    "TRANSPORT_ERROR",
]

logger = logging.getLogger(__name__)

MISSING_SOURCE_MESSAGE = (
    "spreadsheet URL is not configured; set source.url in the config or SPREADSHEET_URL"
)
TRANSPORT_ERROR = "TRANSPORT_ERROR"
SOURCE_NOT_CONFIGURED = "SOURCE_NOT_CONFIGURED"

Fetcher = Callable[[str, float], str]


def load_catalog(
    config: AppConfig,
    store: CatalogStore,
    csv_file: Path | None = None,
    fetcher: Fetcher | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> CatalogLoadResult:
    """Load the catalog into the store and return the load outcome.

    Args:
        config: Application configuration (source URL and timeout)
        store: Catalog store that receives the new state
        csv_file: Local CSV path used instead of the configured URL
        fetcher: Replacement for fetch_csv_text (url, timeout) -> text
        error_log: Optional buffer receiving per-row and source-level records

    Returns:
        CatalogLoadResult with the published state and build report
    """
    started = time.perf_counter()
    token = store.begin_fetch()
    source = str(csv_file) if csv_file is not None else (config.source.url or "")

    def _elapsed() -> float:
        return time.perf_counter() - started

    if csv_file is None and not config.source.url:
        store.fail(token, MISSING_SOURCE_MESSAGE)
        if error_log is not None:
            error_log.append(
                ErrorRecord.create(source, SOURCE_LEVEL_ROW, SOURCE_NOT_CONFIGURED, MISSING_SOURCE_MESSAGE)
            )
        return CatalogLoadResult(source=source, state=store.state, elapsed_seconds=_elapsed())

    try:
        if csv_file is not None:
            text = read_csv_file(csv_file)
        else:
            fetch = fetcher or fetch_csv_text
            text = fetch(config.source.url, config.source.timeout_seconds)
    except TransportError as e:
        logger.debug(f"transport failure source={source}: {e}")
        store.fail(token, str(e))
        if error_log is not None:
            error_log.append(ErrorRecord.create(source, SOURCE_LEVEL_ROW, TRANSPORT_ERROR, str(e)))
        return CatalogLoadResult(source=source, state=store.state, elapsed_seconds=_elapsed())

    rows = parse_table(text)
    report = build_catalog_report(rows)
    if error_log is not None:
        for skipped in report.skipped:
            error_log.append(
                ErrorRecord.create(source, skipped.row_number, skipped.reason, "row skipped")
            )
    store.complete(token, report.products)
    logger.debug(
        f"catalog built source={source} rows={report.total_rows} "
        f"products={len(report.products)} skipped={len(report.skipped)}"
    )
    return CatalogLoadResult(source=source, state=store.state, report=report, elapsed_seconds=_elapsed())
