from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .reference import RowRef

"""Output-side records of the build.

VisualIdentity / AtlasNodeIdentity are transient resolver outputs that only feed the
area join. AreaRecord and LocalizationBundle make up the final document.
"""

__all__ = [
    "VisualIdentity",
    "AtlasNodeIdentity",
    "AreaRecord",
    "LocalizationBundle",
    "BuildDocument",
    "AREA_HEADER",
]

# 出力 worldAreas テーブルの列順 (消費側アプリがこの順序を前提にしている)
AREA_HEADER: list[str] = [
    "Id",
    "IsTown",
    "IsHideout",
    "IsMapArea",
    "IsUniqueMapArea",
    "ItemVisualIdentity",
    "RowID",
]


@dataclass(frozen=True)
class VisualIdentity:
    """Resolved UniqueMaps.dat row.

    Attributes:
        source: The row this identity was resolved from
        world_area: Target of the row's WorldAreasKey
        item_visual_identity: DDS file path, one hop through ItemVisualIdentity.dat
    """
    source: RowRef
    world_area: RowRef
    item_visual_identity: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "WorldAreasKey": self.world_area.index,
            "ItemVisualIdentity": self.item_visual_identity,
        }


@dataclass(frozen=True)
class AtlasNodeIdentity(VisualIdentity):
    """Resolved AtlasNode.dat row; additionally carries the node's own DDS file and region name."""
    dds_file: str = ""
    atlas_region: str = ""

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["DDSFile"] = self.dds_file
        d["AtlasRegion"] = self.atlas_region
        return d


@dataclass(frozen=True)
class AreaRecord:
    """One kept world area. ``row_id`` is the area's index in WorldAreas.dat."""
    id: str
    is_town: bool
    is_hideout: bool
    is_map_area: bool
    is_unique_map_area: bool
    item_visual_identity: str | None
    row_id: int

    @property
    def is_relevant(self) -> bool:
        return self.is_map_area or self.is_unique_map_area or self.is_town or self.is_hideout

    def to_row(self) -> list[Any]:
        """Values in AREA_HEADER order."""
        return [
            self.id,
            self.is_town,
            self.is_hideout,
            self.is_map_area,
            self.is_unique_map_area,
            self.item_visual_identity,
            self.row_id,
        ]


@dataclass(frozen=True)
class LocalizationBundle:
    """Per-language lookups: error code -> text, area Id -> name."""
    backend_errors: dict[str, Any] = field(default_factory=dict)
    world_areas: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "backendErrors": dict(self.backend_errors),
            "worldAreas": dict(self.world_areas),
        }


@dataclass(frozen=True)
class BuildDocument:
    """The complete build output, ready for serialization."""
    world_areas: list[AreaRecord]
    lang: dict[str, LocalizationBundle]

    def to_dict(self) -> dict[str, Any]:
        return {
            "worldAreas": {
                "header": list(AREA_HEADER),
                "data": [a.to_row() for a in self.world_areas],
            },
            "lang": {code: bundle.to_dict() for code, bundle in self.lang.items()},
        }
