from __future__ import annotations

from decimal import Decimal, localcontext

from ..models.invoice import InvoiceTotals
from ..models.load_result import CatalogLoadResult

"""Summary line rendering service.

The SUMMARY line is the single machine-readable line emitted per run. This
module renders its body; the `SUMMARY` label comes from the log level
(logging.init.log_summary).
"""


def _format_amount(value: Decimal) -> str:
    # 指数表記を避け、整数値は小数点なしで出力 (桁数の上限なし)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits))
        return format(value.normalize(), "f")


def render_summary(result: CatalogLoadResult, item_count: int, totals: InvoiceTotals) -> str:
    """Render the summary body for a catalog load and the resulting cart.

    Format:
    rows={rows} products={products} skipped={skipped} items={items}
    subtotal={subtotal} tax={tax} total={total}

    Amounts are unrounded; integral values are written without a decimal point.

    Examples:
        >>> from sheet_invoice.models import CatalogState, CatalogLoadResult
        >>> result = CatalogLoadResult(source="s.csv", state=CatalogState())
        >>> zero = InvoiceTotals(Decimal(0), Decimal(0), Decimal(0))
        >>> render_summary(result, 0, zero)
        'rows=0 products=0 skipped=0 items=0 subtotal=0 tax=0 total=0'
    """
    return (
        f"rows={result.total_rows} "
        f"products={len(result.state.products)} "
        f"skipped={result.skipped_rows} "
        f"items={item_count} "
        f"subtotal={_format_amount(totals.subtotal)} "
        f"tax={_format_amount(totals.tax)} "
        f"total={_format_amount(totals.total)}"
    )
