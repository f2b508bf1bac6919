from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from unittest.mock import MagicMock

from sheet_invoice.logging.error_log import ErrorLogBuffer
from sheet_invoice.models import CatalogStatus
from sheet_invoice.services.catalog_source import CatalogStore, TransportError
from sheet_invoice.services.orchestrator import MISSING_SOURCE_MESSAGE, TRANSPORT_ERROR, load_catalog


def test_load_catalog_from_fetcher(app_config, sample_csv_text: str):
    fetcher = MagicMock(return_value=sample_csv_text)
    store = CatalogStore()

    result = load_catalog(app_config, store, fetcher=fetcher)

    fetcher.assert_called_once_with("https://sheets.example.com/pub?output=csv", 5.0)
    assert result.state is store.state
    assert result.state.status is CatalogStatus.READY
    assert len(result.state.products) == 8
    assert result.total_rows == 10
    assert result.skipped_rows == 2
    assert result.source == "https://sheets.example.com/pub?output=csv"
    assert result.elapsed_seconds >= 0


def test_load_catalog_empty_sheet(app_config):
    store = CatalogStore()
    result = load_catalog(app_config, store, fetcher=lambda url, timeout: "name,price\nonly-name\n")
    assert result.state.status is CatalogStatus.EMPTY
    assert result.skipped_rows == 1


def test_load_catalog_transport_failure_never_builds(app_config):
    def failing(url, timeout):
        raise TransportError("status=500")

    buf = ErrorLogBuffer()
    store = CatalogStore()
    result = load_catalog(app_config, store, fetcher=failing, error_log=buf)

    assert result.state.status is CatalogStatus.ERROR
    assert result.state.error == "status=500"
    assert result.report is None
    assert result.total_rows == 0
    assert len(buf) == 1


def test_load_catalog_missing_url(app_config):
    cfg = replace(app_config, source=replace(app_config.source, url=None))
    fetcher = MagicMock()
    result = load_catalog(cfg, CatalogStore(), fetcher=fetcher)
    fetcher.assert_not_called()
    assert result.state.status is CatalogStatus.ERROR
    assert result.state.error == MISSING_SOURCE_MESSAGE


def test_load_catalog_from_local_file(app_config, write_csv: Path):
    fetcher = MagicMock()
    result = load_catalog(app_config, CatalogStore(), csv_file=write_csv, fetcher=fetcher)
    fetcher.assert_not_called()
    assert result.source == str(write_csv)
    assert len(result.state.products) == 8


def test_load_catalog_local_file_missing(app_config, tmp_path: Path):
    result = load_catalog(app_config, CatalogStore(), csv_file=tmp_path / "nope.csv")
    assert result.state.status is CatalogStatus.ERROR


def test_load_catalog_records_skipped_rows(app_config, sample_csv_text: str, tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    load_catalog(app_config, CatalogStore(), fetcher=lambda url, timeout: sample_csv_text, error_log=buf)
    path = buf.flush()
    records = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [(r["row"], r["error_type"]) for r in records] == [(3, "TOO_FEW_COLUMNS"), (7, "INVALID_PRICE")]


def test_load_catalog_transport_record_uses_source_level_row(app_config, tmp_path: Path):
    def failing(url, timeout):
        raise TransportError("unreachable")

    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    load_catalog(app_config, CatalogStore(), fetcher=failing, error_log=buf)
    [record] = [json.loads(line) for line in buf.flush().read_text(encoding="utf-8").splitlines()]
    assert record["row"] == -1
    assert record["error_type"] == TRANSPORT_ERROR


def test_reload_replaces_catalog_wholesale(app_config, sample_csv_text: str):
    store = CatalogStore()
    load_catalog(app_config, store, fetcher=lambda url, timeout: sample_csv_text)
    load_catalog(app_config, store, fetcher=lambda url, timeout: "name,price\nNew,1\n")
    assert [p.name for p in store.state.products] == ["New"]
    assert store.state.sequence == 2
