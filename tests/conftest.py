# Shared pytest fixtures
from __future__ import annotations
import tempfile
from decimal import Decimal
from pathlib import Path

import pytest

from sheet_invoice.logging.init import reset_logging
from sheet_invoice.models import AppConfig, CompanyConfig, InvoiceSettings, SourceConfig


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("SPREADSHEET_URL", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """company:
  name: Example Co.
  address: 1-2-3 Nihonbashi, Tokyo
  email: billing@example.com
  phone: 03-0000-0000
  notes: Bank transfer fees are borne by the customer.
  tax_rate: 10
source:
  url: https://sheets.example.com/pub?output=csv
  timeout_seconds: 5
invoice:
  number: INV-042
  due_days: 30
output_directory: ./out
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "invoice.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def sample_csv_text() -> str:
    # header + 10 data rows, rows 3 and 7 are defective
    return "\r\n".join([
        "name,price,description",
        '"Widget, Deluxe",1200,"A fine widget"',
        'Basic course,"¥5,000",Intro',
        "only-one-column",
        "Advanced course,1200円,",
        '"Say ""hi""",500',
        "Workshop,\"1,200.50\",Half day",
        "Seminar,N/A,Broken price",
        "Book,980",
        "Video,3000,Recorded session",
        "Support,10000,Annual support",
    ]) + "\r\n"


@pytest.fixture()
def write_csv(temp_workdir: Path, sample_csv_text: str) -> Path:
    path = temp_workdir / "data" / "products.csv"
    path.write_text(sample_csv_text, encoding="utf-8")
    return path


@pytest.fixture()
def app_config() -> AppConfig:
    return AppConfig(
        company=CompanyConfig(name="Example Co.", notes="Thank you.", tax_rate=Decimal("10")),
        source=SourceConfig(url="https://sheets.example.com/pub?output=csv", timeout_seconds=5.0),
        invoice=InvoiceSettings(number="INV-042"),
        output_directory="./out",
    )
