"""Spreadsheet-driven invoice generator.

Published CSV sheet -> validated product catalog -> cart and totals -> PDF invoice.
"""

__version__ = "0.1.0"
