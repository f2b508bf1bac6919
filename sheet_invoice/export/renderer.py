from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, Protocol
from xml.sax.saxutils import escape

import requests
from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..models.config_models import CompanyConfig
from ..models.invoice import Invoice
from ..services.cart import compute_line_total
from ..services.invoice import format_currency

"""Invoice rendering service.

The exporter only talks to the InvoiceRenderer protocol:

- rasterize(invoice) -> document (opaque to the caller)
- paginate_and_save(document, path) -> path of the written file

ReportLabRenderer builds platypus flowables and lets SimpleDocTemplate split
the item table across A4 pages.
"""

__all__ = [
    "InvoiceRenderer",
    "ReportLabRenderer",
    "FONT_NAME",
]

logger = logging.getLogger(__name__)

FONT_NAME = "HeiseiKakuGo-W5"  # reportlab 同梱の日本語 CID フォント
LOGO_WIDTH = 24 * mm
LOGO_TIMEOUT_SECONDS = 5.0
EMPTY_CART_TEXT = "カートに商品がありません"
CUSTOMER_PLACEHOLDER = "(請求先名称)"


class InvoiceRenderer(Protocol):
    def rasterize(self, invoice: Invoice) -> Any: ...

    def paginate_and_save(self, document: Any, path: Path) -> Path: ...


def _ensure_font() -> None:
    if FONT_NAME not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(UnicodeCIDFont(FONT_NAME))


def _text(value: str) -> str:
    # Paragraph は簡易 XML マークアップを解釈するためエスケープ必須
    return escape(value).replace("\n", "<br/>")


class ReportLabRenderer:
    """Draws an Invoice with the issuer block from CompanyConfig."""

    def __init__(self, company: CompanyConfig, session: requests.Session | None = None) -> None:
        self.company = company
        self._http = session or requests
        base = getSampleStyleSheet()
        self.styles = {
            "title": ParagraphStyle("InvTitle", parent=base["Title"], fontName=FONT_NAME, fontSize=24, alignment=0),
            "heading": ParagraphStyle("InvHeading", parent=base["Heading2"], fontName=FONT_NAME, fontSize=14),
            "normal": ParagraphStyle("InvNormal", parent=base["Normal"], fontName=FONT_NAME, fontSize=9, leading=13),
            "right": ParagraphStyle(
                "InvRight", parent=base["Normal"], fontName=FONT_NAME, fontSize=9, leading=13, alignment=TA_RIGHT
            ),
            "muted": ParagraphStyle(
                "InvMuted", parent=base["Normal"], fontName=FONT_NAME, fontSize=8, textColor=colors.grey
            ),
        }

    # -- protocol ---------------------------------------------------------

    def rasterize(self, invoice: Invoice) -> list[Any]:
        """Build the flowable story for one invoice."""
        # フォント登録は初回 rasterize 時
        _ensure_font()
        story: list[Any] = []
        story.append(self._header(invoice))
        story.append(Spacer(1, 8 * mm))
        story.extend(self._bill_to(invoice))
        story.append(Spacer(1, 6 * mm))
        story.append(self._items_table(invoice))
        story.append(Spacer(1, 6 * mm))
        story.append(self._totals_table(invoice))
        story.append(Spacer(1, 8 * mm))
        story.append(Paragraph("備考", self.styles["heading"]))
        story.append(Paragraph(_text(invoice.notes), self.styles["normal"]))
        return story

    def paginate_and_save(self, document: list[Any], path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        doc = SimpleDocTemplate(
            str(path),
            pagesize=A4,
            leftMargin=15 * mm,
            rightMargin=15 * mm,
            topMargin=15 * mm,
            bottomMargin=15 * mm,
            title=path.stem,
        )
        doc.build(document)
        return path

    # -- sections ---------------------------------------------------------

    def _header(self, invoice: Invoice) -> Table:
        s = self.styles
        left = [
            Paragraph("請求書", s["title"]),
            Paragraph("Invoice", s["muted"]),
            Spacer(1, 4 * mm),
            Paragraph(f"請求書番号: {_text(invoice.invoice_number)}", s["normal"]),
            Paragraph(f"発行日: {invoice.issue_date.isoformat()}", s["normal"]),
            Paragraph(f"支払期限: {invoice.due_date.isoformat()}", s["normal"]),
        ]
        right: list[Any] = []
        logo = self._logo()
        if logo is not None:
            right.append(logo)
        for line in (self.company.name, self.company.address, self.company.email, self.company.phone):
            if line:
                right.append(Paragraph(_text(line), s["right"]))
        table = Table([[left, right]], colWidths=[100 * mm, 80 * mm])
        table.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LINEBELOW", (0, 0), (-1, 0), 1, colors.HexColor("#E5E7EB")),
            ("BOTTOMPADDING", (0, 0), (-1, 0), 12),
        ]))
        return table

    def _bill_to(self, invoice: Invoice) -> list[Any]:
        s = self.styles
        customer = invoice.customer
        parts: list[Any] = [
            Paragraph("請求先:", s["normal"]),
            Paragraph(f"{_text(customer.name or CUSTOMER_PLACEHOLDER)} 御中", s["heading"]),
        ]
        if customer.order_number:
            parts.append(Paragraph(f"注文番号: {_text(customer.order_number)}", s["normal"]))
        if customer.attendee_name:
            parts.append(Paragraph(f"受講者氏名: {_text(customer.attendee_name)}", s["normal"]))
        parts.append(Spacer(1, 4 * mm))
        parts.append(Paragraph("御請求件名:", s["normal"]))
        parts.append(Paragraph(_text(invoice.subject), s["heading"]))
        return parts

    def _items_table(self, invoice: Invoice) -> Table:
        s = self.styles
        data: list[list[Any]] = [["内容", "数量", "単価", "金額"]]
        for item in invoice.items:
            data.append([
                Paragraph(_text(item.description), s["normal"]),
                str(item.quantity),
                format_currency(item.unit_price),
                format_currency(compute_line_total(item)),
            ])
        style = [
            ("FONTNAME", (0, 0), (-1, -1), FONT_NAME),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F3F4F6")),
            ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("LINEBELOW", (0, 1), (-1, -1), 0.5, colors.HexColor("#F3F4F6")),
        ]
        if invoice.is_empty:
            data.append([EMPTY_CART_TEXT, "", "", ""])
            style += [
                ("SPAN", (0, 1), (-1, 1)),
                ("ALIGN", (0, 1), (-1, 1), "CENTER"),
                ("TEXTCOLOR", (0, 1), (-1, 1), colors.grey),
            ]
        # repeatRows=1: 改ページ時にヘッダ行を再表示
        table = Table(data, colWidths=[95 * mm, 20 * mm, 30 * mm, 35 * mm], repeatRows=1)
        table.setStyle(TableStyle(style))
        return table

    def _totals_table(self, invoice: Invoice) -> Table:
        totals = invoice.totals
        data = [
            ["小計", format_currency(totals.subtotal)],
            [f"消費税 ({invoice.tax_rate}%)", format_currency(totals.tax)],
            ["合計金額", format_currency(totals.total)],
        ]
        table = Table(data, colWidths=[40 * mm, 40 * mm], hAlign="RIGHT")
        table.setStyle(TableStyle([
            ("FONTNAME", (0, 0), (-1, -1), FONT_NAME),
            ("FONTSIZE", (0, 0), (-1, 1), 9),
            ("FONTSIZE", (0, 2), (-1, 2), 13),
            ("ALIGN", (1, 0), (1, -1), "RIGHT"),
            ("LINEBELOW", (0, 0), (-1, 1), 0.5, colors.HexColor("#E5E7EB")),
            ("BACKGROUND", (0, 2), (-1, 2), colors.HexColor("#F9FAFB")),
            ("TOPPADDING", (0, 2), (-1, 2), 6),
            ("BOTTOMPADDING", (0, 2), (-1, 2), 6),
        ]))
        return table

    def _logo(self) -> Image | None:
        """Download the configured logo. A missing logo never blocks the export."""
        url = self.company.logo_url
        if not url:
            return None
        try:
            response = self._http.get(url, timeout=LOGO_TIMEOUT_SECONDS)
            response.raise_for_status()
            data = io.BytesIO(response.content)
            width, height = ImageReader(data).getSize()
            data.seek(0)
        except Exception as e:
            logger.warning(f"logo unavailable, rendering without it: {e}")
            return None
        image = Image(data, width=LOGO_WIDTH, height=LOGO_WIDTH * height / width)
        image.hAlign = "RIGHT"
        return image
