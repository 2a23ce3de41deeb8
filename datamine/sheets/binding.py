from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from ..models.build_error import BuildError, ErrorKind, StageResult
from ..models.reference import RowRef, coerce_index
from ..models.sheet import NormalizedSheet

"""Typed row binding and row reference resolution.

``bind_sheet`` checks that a consumed sheet exists and carries the columns its row type
declares, then converts each record into that row type. ``TypedSheet.resolve`` is the
single place where a positional foreign key is turned into a row.
"""

__all__ = [
    "TypedSheet",
    "bind_rows",
    "bind_sheet",
]


R = TypeVar("R")


@dataclass(frozen=True)
class TypedSheet(Generic[R]):
    """Rows of one sheet bound to their record type, in export order."""
    sheet: str
    rows: list[R]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    def ref(self, key: Any) -> RowRef | None:
        """RowRef for a raw key value, or None if the value is not a row index."""
        index = coerce_index(key)
        if index is None:
            return None
        return RowRef(self.sheet, index)

    def resolve(self, ref: RowRef) -> R | None:
        """Row named by ``ref``; None when ``ref`` points outside this sheet."""
        if ref.sheet != self.sheet or not 0 <= ref.index < len(self.rows):
            return None
        return self.rows[ref.index]


def bind_rows(sheet: NormalizedSheet, row_type: type[R]) -> StageResult[TypedSheet[R]]:
    """Bind every record of ``sheet`` to ``row_type`` after a one-off column check."""
    columns: tuple[str, ...] = row_type.COLUMNS  # type: ignore[attr-defined]
    missing = [c for c in columns if c not in sheet.header]
    if missing:
        return StageResult.failure(BuildError(
            kind=ErrorKind.MISSING_COLUMNS,
            message=f"missing columns: {sorted(missing)}",
            sheet=sheet.filename,
        ))
    rows = [row_type.from_record(i, record) for i, record in enumerate(sheet.data)]  # type: ignore[attr-defined]
    return StageResult.success(TypedSheet(sheet=sheet.filename, rows=rows))


def bind_sheet(
    sheets: Mapping[str, NormalizedSheet],
    row_type: type[R],
    source: str = "export",
) -> StageResult[TypedSheet[R]]:
    """Look up ``row_type.SHEET`` in ``sheets`` and bind it."""
    name: str = row_type.SHEET  # type: ignore[attr-defined]
    sheet = sheets.get(name)
    if sheet is None:
        return StageResult.failure(BuildError(
            kind=ErrorKind.MISSING_SHEET,
            message=f"sheet not found in {source}",
            sheet=name,
        ))
    return bind_rows(sheet, row_type)
