from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from sheet_invoice.models.error_record import ErrorRecord

"""Per-run error log.

Catalog defects and source failures are collected while a run is in progress
and written once as JSON Lines to `logs/errors-YYYYMMDD-HHMMSS.log` (UTC).
No file is created for a clean run.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
    "LOGS_DIR",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """Collects ErrorRecords and appends them to one log file per run."""

    def __init__(self, logs_dir: Path | None = None) -> None:
        self._logs_dir = logs_dir or LOGS_DIR
        self._pending: list[ErrorRecord] = []
        self._path: Path | None = None

    @property
    def file_path(self) -> Path:
        # 初回参照時にファイル名を確定 (以降の flush は同じファイルへ追記)
        if self._path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._path = self._logs_dir / f"errors-{stamp}.log"
        return self._path

    def append(self, record: ErrorRecord) -> None:
        self._pending.append(record)

    def __len__(self) -> int:
        return len(self._pending)

    def flush(self) -> Path | None:
        """Append pending records to the log file; None when nothing was pending."""
        if not self._pending:
            return None
        path = self.file_path
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            f.writelines(f"{r.to_json_line()}\n" for r in self._pending)
        self._pending.clear()
        return path
