from __future__ import annotations

import re

from ..models.product import RawRow

"""CSV row parser for the published product sheet.

Row 0 is the header and is discarded. Columns: A=name, B=price, C=description.

The input is pre-split by line, so raw newlines inside a quoted field are not
supported. Malformed quoting never raises: an unbalanced quote simply keeps the
rest of the line inside the current field.
"""

__all__ = [
    "parse_row",
    "split_lines",
    "parse_table",
]

_LINE_BREAK = re.compile(r"\r?\n")

QUOTE = '"'
DELIMITER = ","


def parse_row(line: str) -> RawRow:
    '''Split one CSV line into raw fields.

    Handles quoted fields, delimiters inside quotes and doubled-quote escaping:

    >>> parse_row('"Widget, Deluxe",1200,"A fine widget"')
    ('Widget, Deluxe', '1200', 'A fine widget')
    >>> parse_row('"Say ""hi""",500')
    ('Say "hi"', '500')
    '''
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    length = len(line)
    while i < length:
        char = line[i]
        if char == QUOTE:
            # "" はエスケープされた " として 1 文字に変換
            if in_quotes and i + 1 < length and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == DELIMITER and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1
    # 最後のフィールド (空文字でも必ず追加)
    fields.append("".join(current))
    return tuple(fields)


def split_lines(text: str) -> list[str]:
    """Split a CSV payload on LF or CRLF line breaks."""
    return _LINE_BREAK.split(text)


def parse_table(text: str, has_header: bool = True) -> list[RawRow]:
    """Parse a whole CSV payload into data rows.

    Blank and whitespace-only lines are not parsed; they are kept as an empty
    tuple so later rows retain their original position (product ids depend on it).
    """
    lines = split_lines(text)
    if has_header:
        lines = lines[1:]
    rows: list[RawRow] = []
    for line in lines:
        if not line.strip():
            rows.append(())
            continue
        rows.append(parse_row(line))
    return rows
