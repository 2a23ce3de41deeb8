from __future__ import annotations

import pytest

from datamine.models.build_error import ErrorKind
from datamine.models.reference import RowRef, coerce_index
from datamine.models.rows import AtlasNodeRow, ItemVisualIdentityRow, WorldAreaRow
from datamine.models.sheet import NormalizedSheet
from datamine.sheets.binding import TypedSheet, bind_rows, bind_sheet

"""Unit tests for typed row binding and RowRef resolution."""


def _world_areas() -> NormalizedSheet:
    header = ["Id", "IsTown", "IsHideout", "IsMapArea", "IsUniqueMapArea", "Extra"]
    return NormalizedSheet(
        "WorldAreas.dat",
        header,
        [
            dict(zip(header, ["G1_town", True, False, False, False, 1])),
            dict(zip(header, ["MapA", False, False, True, False, 2])),
        ],
    )


@pytest.mark.parametrize(
    "value, expected",
    [
        (0, 0),
        (7, 7),
        (3.0, 3),
        (-1, None),
        (2.5, None),
        (True, None),
        ("3", None),
        (None, None),
    ],
)
def test_coerce_index(value, expected):
    assert coerce_index(value) == expected


def test_row_ref_str():
    assert str(RowRef("WorldAreas.dat", 3)) == "WorldAreas.dat[3]"


def test_bind_rows_builds_typed_rows_with_index():
    res = bind_rows(_world_areas(), WorldAreaRow)
    assert res.ok
    typed = res.value
    assert typed.sheet == "WorldAreas.dat"
    assert [r.index for r in typed] == [0, 1]
    town, map_area = typed.rows
    assert town.id == "G1_town" and town.is_town and not town.is_map_area
    assert map_area.is_map_area
    assert map_area.raw["Extra"] == 2


def test_bind_rows_missing_column():
    sheet = NormalizedSheet("ItemVisualIdentity.dat", ["Id"], [{"Id": "x"}])
    res = bind_rows(sheet, ItemVisualIdentityRow)
    assert not res.ok
    assert res.error.kind is ErrorKind.MISSING_COLUMNS
    assert "DDSFile" in res.error.message


def test_bind_sheet_missing_sheet():
    res = bind_sheet({}, AtlasNodeRow, source="all.json")
    assert res.error.kind is ErrorKind.MISSING_SHEET
    assert res.error.sheet == "AtlasNode.dat"
    assert "all.json" in res.error.message


def test_typed_sheet_resolve_in_range_and_dangling():
    typed = bind_rows(_world_areas(), WorldAreaRow).value
    assert typed.resolve(RowRef("WorldAreas.dat", 1)).id == "MapA"
    assert typed.resolve(RowRef("WorldAreas.dat", 2)) is None
    # 別シートへの参照は解決しない
    assert typed.resolve(RowRef("AtlasNode.dat", 0)) is None


def test_typed_sheet_ref():
    typed = TypedSheet("ItemVisualIdentity.dat", [])
    assert typed.ref(4) == RowRef("ItemVisualIdentity.dat", 4)
    assert typed.ref("4") is None
