from .builder import build_catalog, build_catalog_report, catalog_frame, parse_price
from .csv_parser import parse_row, parse_table, split_lines

__all__ = [
    "build_catalog",
    "build_catalog_report",
    "catalog_frame",
    "parse_price",
    "parse_row",
    "parse_table",
    "split_lines",
]
