from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""RowRef: explicit positional foreign key.

The export links sheets by raw row index (``ItemVisualIdentityKey = 12`` means "row 12
of ItemVisualIdentity.dat"). Every such key is wrapped in a RowRef so the lookup goes
through a single function that can report a dangling index instead of failing later.
"""

__all__ = [
    "RowRef",
    "coerce_index",
]


@dataclass(frozen=True, order=True)
class RowRef:
    """Reference to one row of one sheet (sheet filename + 0-based row index)."""
    sheet: str
    index: int

    def __str__(self) -> str:
        return f"{self.sheet}[{self.index}]"


def coerce_index(value: Any) -> int | None:
    """Return ``value`` as a row index, or None if it cannot be one.

    bool は int のサブクラスなので明示的に除外する。
    JSON では 3.0 のような整数値 float もあり得るため許容。
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float) and value.is_integer() and value >= 0:
        return int(value)
    return None
