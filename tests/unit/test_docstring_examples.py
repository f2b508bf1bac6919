from __future__ import annotations

import doctest

import pytest

from sheet_invoice.catalog import builder, csv_parser
from sheet_invoice.services import invoice, summary


@pytest.mark.parametrize("module", [csv_parser, builder, invoice, summary], ids=lambda m: m.__name__)
def test_docstring_examples(module):
    result = doctest.testmod(module)
    assert result.attempted > 0
    assert result.failed == 0
