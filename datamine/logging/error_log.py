from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.build_error import BuildError
from ..models.error_record import ErrorRecord

"""Error log generation & buffering.

- JSON Lines, fixed schema (datamine/contracts/error_log_schema.json)
- One file per run: ``<error_log_directory>/errors-YYYYMMDD-HHMMSS.log`` (UTC),
  created only when there is something to write
- Records are buffered and appended in one go on ``flush()``
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer for error records. Flush writes JSON Lines.

    - ファイルパスは初回アクセスで決定
    - スレッド安全性不要 (シリアル実行)
    """
    def __init__(self, directory: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._directory = directory if directory is not None else LOGS_DIR
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            self._directory.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._directory / f"errors-{stamp}.log"
        return self._file_path

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def append_error(self, error: BuildError) -> None:
        self.append(ErrorRecord.from_build_error(error))

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> Path | None:
        """Append buffered records to the log file; None when nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
