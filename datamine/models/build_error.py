from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Generic, TypeVar

"""Build error taxonomy and stage result type.

Every stage of the build returns a ``StageResult``: either a value or a ``BuildError``.
Stages never raise for data problems; the orchestrator inspects each result and stops
at the first error so that no partial document is produced.
"""

__all__ = [
    "ErrorKind",
    "BuildError",
    "StageResult",
]

T = TypeVar("T")


class ErrorKind(Enum):
    """Classification of fatal build errors.

    Values are UPPER_SNAKE strings and end up verbatim in the error log
    (``error_type`` field).
    """
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    MALFORMED_ROW = "MALFORMED_ROW"
    INPUT_NOT_FOUND = "INPUT_NOT_FOUND"
    MISSING_SHEET = "MISSING_SHEET"
    MISSING_COLUMNS = "MISSING_COLUMNS"
    DANGLING_REFERENCE = "DANGLING_REFERENCE"
    DUPLICATE_SHEET = "DUPLICATE_SHEET"


@dataclass(frozen=True)
class BuildError:
    """A fatal problem found while building the document.

    Attributes:
        kind: Error classification
        message: Human readable description
        sheet: Sheet filename involved, if known
        row: 0-based row index within ``sheet``; -1 when the error is not row-level
        raw: The offending raw record (column -> value) for diagnosis
        source: Export file the sheet was read from (``all.json``, ``lang/fr.json``)
    """
    kind: ErrorKind
    message: str
    sheet: str | None = None
    row: int = -1
    raw: dict[str, Any] | None = None
    source: str | None = None

    def describe(self) -> str:
        location = f" source={self.source}" if self.source else ""
        if self.sheet is not None:
            location += f" sheet={self.sheet}"
            if self.row >= 0:
                location += f" row={self.row}"
        return f"{self.kind.value}{location}: {self.message}"

    def with_source(self, source: str) -> BuildError:
        """Copy of this error tagged with the export file it came from (if not already set)."""
        if self.source:
            return self
        return replace(self, source=source)


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """Outcome of one build stage. Exactly one of ``value`` / ``error`` is meaningful."""
    value: T | None = None
    error: BuildError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> StageResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: BuildError) -> StageResult[T]:
        return cls(error=error)
