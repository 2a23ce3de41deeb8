from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import Any

from .build_error import BuildError

"""ErrorRecord model for the JSON Lines error log.

One ErrorRecord is written per fatal build error. ``row`` is the 0-based row index in
``sheet``; -1 marks errors that are not tied to a single row (missing file, missing
sheet, ...). The schema is fixed by datamine/contracts/error_log_schema.json.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        source: Export file the sheet came from (``all.json``, ``lang/fr.json``, ...)
        sheet: Sheet filename, empty when unknown
        row: 0-based row index. -1 when not row-level
        error_type: ErrorKind value (UPPER_SNAKE)
        message: Description of the failure
        raw: Offending raw record, or None
    """
    timestamp: str  # ISO8601 UTC
    source: str
    sheet: str
    row: int  # 不明な場合 -1
    error_type: str  # UPPER_SNAKE
    message: str
    raw: dict[str, Any] | None

    @staticmethod
    def create(
        source: str,
        sheet: str,
        row: int,
        error_type: str,
        message: str,
        raw: dict[str, Any] | None = None,
    ) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            source=source,
            sheet=sheet,
            row=row,
            error_type=error_type,
            message=message,
            raw=raw,
        )

    @staticmethod
    def from_build_error(error: BuildError) -> ErrorRecord:
        return ErrorRecord.create(
            source=error.source or "",
            sheet=error.sheet or "",
            row=error.row,
            error_type=error.kind.value,
            message=error.message,
            raw=error.raw,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON line (no extra keys)."""
        # raw はエクスポート JSON 由来の値のみ
        return json.dumps(asdict(self), ensure_ascii=False)
