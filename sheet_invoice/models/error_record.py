from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""One line of the JSON Lines error log.

Keys are fixed: timestamp, source, row, error_type, message. Source-level
failures (sheet unreachable, no URL configured) use SOURCE_LEVEL_ROW.
"""

__all__ = [
    "ErrorRecord",
    "SOURCE_LEVEL_ROW",
]

SOURCE_LEVEL_ROW = -1


def _utc_now() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ErrorRecord:
    timestamp: str
    source: str  # sheet URL or local CSV path
    row: int  # 1 始まりのデータ行番号
    error_type: str  # TOO_FEW_COLUMNS, INVALID_PRICE, TRANSPORT_ERROR ...
    message: str

    @classmethod
    def create(cls, source: str, row: int, error_type: str, message: str) -> ErrorRecord:
        return cls(_utc_now(), source, row, error_type, message)

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
