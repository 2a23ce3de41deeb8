from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

"""Sheet models for the export -> datamine build.

RawSheet mirrors one entry of the extractor's aggregate file (header + positional rows).
NormalizedSheet is the same table with each row turned into a column -> value record.
A SheetSet maps sheet filename (e.g. ``"WorldAreas.dat"``) to its NormalizedSheet.
"""

__all__ = [
    "RawSheet",
    "NormalizedSheet",
    "SheetSet",
]


@dataclass(frozen=True)
class RawSheet:
    """One exported table in header + rows form.

    Invariant (checked by the normalizer, not here): every row has ``len(header)`` values.
    """
    filename: str
    header: list[str]
    data: list[list[Any]] = field(default_factory=list)

    @staticmethod
    def from_export(entry: Mapping[str, Any]) -> RawSheet:
        """Build from an extractor entry ``{filename, header: [{name, ...}], data}``.

        ヘッダ要素は dict (``name`` キー) の場合と素の文字列の場合の両方を許容する。
        """
        header = [h["name"] if isinstance(h, Mapping) else str(h) for h in entry.get("header", [])]
        return RawSheet(
            filename=str(entry["filename"]),
            header=header,
            data=[list(r) for r in entry.get("data", [])],
        )


@dataclass(frozen=True)
class NormalizedSheet:
    """Header plus one record (column -> value) per row, row order preserved."""
    filename: str
    header: list[str]
    data: list[dict[str, Any]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.data)


# シート名 -> 正規化済シート。構築後は読み取り専用として扱う。
SheetSet = Mapping[str, NormalizedSheet]
