from __future__ import annotations

import re
from dataclasses import replace
from datetime import date
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock

import requests

from sheet_invoice.export import InvoiceExporter, ReportLabRenderer
from sheet_invoice.models import Customer, LineItem
from sheet_invoice.services.invoice import build_invoice

"""End-to-end PDF rendering with ReportLab into a temporary directory."""


def _cart(lines: int) -> tuple[LineItem, ...]:
    return tuple(
        LineItem(id=f"prod-sheet-{i}", description=f"講座 <{i}> & 教材", quantity=i, unit_price=Decimal("1200.5"))
        for i in range(1, lines + 1)
    )


def _page_count(pdf: bytes) -> int:
    return len(re.findall(rb"/Type\s*/Page(?!s)", pdf))


def test_render_single_page_invoice(app_config, tmp_path: Path):
    customer = Customer(name="山田 太郎", order_number="AB-12345", attendee_name="鈴木 一郎\n佐藤 花子")
    invoice = build_invoice(customer, _cart(3), app_config, today=date(2026, 1, 1))
    exporter = InvoiceExporter(ReportLabRenderer(app_config.company), "請求書")

    path = exporter.export(invoice, tmp_path / "out")

    assert path == tmp_path / "out" / "請求書-INV-042.pdf"
    data = path.read_bytes()
    assert data.startswith(b"%PDF")


def test_render_empty_cart(app_config, tmp_path: Path):
    invoice = build_invoice(Customer(), (), app_config, today=date(2026, 1, 1))
    renderer = ReportLabRenderer(app_config.company)
    path = renderer.paginate_and_save(renderer.rasterize(invoice), tmp_path / "empty.pdf")
    assert path.read_bytes().startswith(b"%PDF")


def test_long_cart_paginates(app_config, tmp_path: Path):
    invoice = build_invoice(Customer(name="X"), _cart(120), app_config, today=date(2026, 1, 1))
    renderer = ReportLabRenderer(app_config.company)
    path = renderer.paginate_and_save(renderer.rasterize(invoice), tmp_path / "long.pdf")
    assert _page_count(path.read_bytes()) >= 2


def test_logo_failure_does_not_block_export(app_config, tmp_path: Path):
    company = replace(app_config.company, logo_url="https://img.example.com/logo.png")
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("offline")
    renderer = ReportLabRenderer(company, session=session)
    invoice = build_invoice(Customer(), _cart(1), app_config, today=date(2026, 1, 1))

    path = renderer.paginate_and_save(renderer.rasterize(invoice), tmp_path / "nologo.pdf")

    session.get.assert_called_once()
    assert path.exists()
