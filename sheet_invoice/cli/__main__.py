from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from sheet_invoice.catalog.builder import catalog_frame
from sheet_invoice.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from sheet_invoice.export import ExportError, InvoiceExporter, ReportLabRenderer
from sheet_invoice.logging.error_log import ErrorLogBuffer
from sheet_invoice.logging.init import log_summary, set_debug, setup_logging
from sheet_invoice.models.catalog_state import CatalogStatus
from sheet_invoice.services.catalog_source import CatalogStore
from sheet_invoice.services.cart import compute_line_total
from sheet_invoice.services.invoice import format_currency
from sheet_invoice.services.orchestrator import load_catalog
from sheet_invoice.services.session import InvoiceSession
from sheet_invoice.services.summary import render_summary

"""CLI entrypoint.

Flow:
- Load .env and the YAML config
- Fetch the published sheet (or read --csv-file) and build the catalog
- Apply cart / customer events given on the command line
- Export the invoice PDF and print one SUMMARY line
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_NO_PRODUCTS = 2

NO_PRODUCTS_MESSAGE = "no products found; check the spreadsheet contents"


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv.

    override=True: .env の値で既存環境変数を上書き (SPREADSHEET_URL を最優先化)
    """
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _quantity_arg(value: str) -> tuple[str, str]:
    item_id, sep, quantity = value.rpartition("=")
    if not sep or not item_id:
        raise argparse.ArgumentTypeError(f"expected ID=QUANTITY, got {value!r}")
    return item_id, quantity


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Spreadsheet-driven invoice generator")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--csv-file", type=Path, help="Read products from a local CSV instead of the sheet URL")
    p.add_argument("--add", action="append", default=[], metavar="PRODUCT_ID", help="Add one unit (repeatable)")
    p.add_argument(
        "--qty", action="append", default=[], type=_quantity_arg, metavar="ID=QUANTITY",
        help="Set a cart line quantity (applied after --add)",
    )
    p.add_argument("--remove", action="append", default=[], metavar="ID", help="Remove a cart line (applied last)")
    p.add_argument("--customer-name", default="", help="Billing name")
    p.add_argument("--order-number", default="", help="Order reference")
    p.add_argument("--email", default="", help="Orderer e-mail address")
    p.add_argument("--attendee", default="", help="Attendee names")
    p.add_argument("--output-dir", type=Path, help="Directory for the PDF (overrides config)")
    p.add_argument("--no-pdf", action="store_true", help="Skip PDF export")
    p.add_argument("--inspect-data", action="store_true", help="Print the parsed catalog then exit")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _inspect_data(session: InvoiceSession) -> int:
    products = session.catalog.products
    if not products:
        print("inspect: no products")
        return EXIT_NO_PRODUCTS
    frame = catalog_frame(products)
    print(frame.to_string(index=False))
    return EXIT_SUCCESS


def _apply_events(session: InvoiceSession, args: argparse.Namespace, logger) -> None:
    for product_id in args.add:
        if not session.add_product(product_id):
            logger.warning(f"unknown product id ignored: {product_id}")
    for item_id, quantity in args.qty:
        session.change_quantity(item_id, quantity)
    for item_id in args.remove:
        session.remove_item(item_id)
    session.update_customer("name", args.customer_name)
    session.update_customer("order_number", args.order_number)
    session.update_customer("email", args.email)
    session.update_customer("attendee_name", args.attendee)


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # NOTE: 空リスト [] が渡された場合に sys.argv[1:] が混入しないよう None のときのみ参照
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    session = InvoiceSession(cfg)
    store = CatalogStore()
    error_log = ErrorLogBuffer()

    logger.info(f"Loading products from: {args.csv_file or cfg.source.url or '(not configured)'}")
    result = load_catalog(cfg, store, csv_file=args.csv_file, error_log=error_log)
    session.on_catalog_loaded(result.state)
    error_log.flush()

    if result.state.status is CatalogStatus.ERROR:
        logger.error(f"source: {result.state.error}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(session)

    if result.state.status is CatalogStatus.EMPTY:
        logger.warning(NO_PRODUCTS_MESSAGE)
        log_summary(render_summary(result, 0, session.totals))
        return EXIT_NO_PRODUCTS

    logger.info(f"catalog ready: {len(result.state.products)} products")
    _apply_events(session, args, logger)

    for item in session.cart:
        logger.info(
            f"{item.id} {item.description} x{item.quantity} "
            f"@ {format_currency(item.unit_price)} = {format_currency(compute_line_total(item))}"
        )

    exit_code = EXIT_SUCCESS
    if not args.no_pdf:
        output_dir = args.output_dir or Path(cfg.output_directory)
        try:
            exporter = InvoiceExporter(ReportLabRenderer(cfg.company), cfg.invoice.file_prefix)
            exporter.export(session.invoice, output_dir)
        except ExportError as e:
            logger.error(f"export: {e}")
            exit_code = EXIT_FATAL

    log_summary(render_summary(result, len(session.cart), session.totals))
    return exit_code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
