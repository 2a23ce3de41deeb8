from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

"""Typed row records for the sheets the build consumes.

Each class names the sheet it is read from (``SHEET``) and the columns it needs
(``COLUMNS``). ``datamine.sheets.binding.bind_rows`` checks the columns once per sheet
and then builds one instance per normalized record, so later stages read attributes
instead of string keys. ``raw`` keeps the original record for error reporting.
"""

__all__ = [
    "WorldAreaRow",
    "UniqueMapRow",
    "AtlasNodeRow",
    "ItemVisualIdentityRow",
    "AtlasRegionRow",
    "LangWorldAreaRow",
    "BackendErrorRow",
    "WORLD_AREAS",
    "UNIQUE_MAPS",
    "ATLAS_NODE",
    "ITEM_VISUAL_IDENTITY",
    "ATLAS_REGIONS",
    "BACKEND_ERRORS",
]

WORLD_AREAS = "WorldAreas.dat"
UNIQUE_MAPS = "UniqueMaps.dat"
ATLAS_NODE = "AtlasNode.dat"
ITEM_VISUAL_IDENTITY = "ItemVisualIdentity.dat"
ATLAS_REGIONS = "AtlasRegions.dat"
BACKEND_ERRORS = "BackendErrors.dat"


@dataclass(frozen=True)
class WorldAreaRow:
    """One playable zone (WorldAreas.dat)."""
    SHEET: ClassVar[str] = WORLD_AREAS
    COLUMNS: ClassVar[tuple[str, ...]] = ("Id", "IsTown", "IsHideout", "IsMapArea", "IsUniqueMapArea")

    index: int
    id: str
    is_town: bool
    is_hideout: bool
    is_map_area: bool
    is_unique_map_area: bool
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_record(cls, index: int, record: dict[str, Any]) -> WorldAreaRow:
        return cls(
            index=index,
            id=record["Id"],
            is_town=bool(record["IsTown"]),
            is_hideout=bool(record["IsHideout"]),
            is_map_area=bool(record["IsMapArea"]),
            is_unique_map_area=bool(record["IsUniqueMapArea"]),
            raw=record,
        )


@dataclass(frozen=True)
class UniqueMapRow:
    """Unique map item -> world area (UniqueMaps.dat). Keys are raw row indices."""
    SHEET: ClassVar[str] = UNIQUE_MAPS
    COLUMNS: ClassVar[tuple[str, ...]] = ("WorldAreasKey", "ItemVisualIdentityKey")

    index: int
    world_areas_key: Any
    item_visual_identity_key: Any
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_record(cls, index: int, record: dict[str, Any]) -> UniqueMapRow:
        return cls(
            index=index,
            world_areas_key=record["WorldAreasKey"],
            item_visual_identity_key=record["ItemVisualIdentityKey"],
            raw=record,
        )


@dataclass(frozen=True)
class AtlasNodeRow:
    """Atlas map node (AtlasNode.dat)."""
    SHEET: ClassVar[str] = ATLAS_NODE
    COLUMNS: ClassVar[tuple[str, ...]] = ("WorldAreasKey", "ItemVisualIdentityKey", "AtlasRegionsKey", "DDSFile")

    index: int
    world_areas_key: Any
    item_visual_identity_key: Any
    atlas_regions_key: Any
    dds_file: Any
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_record(cls, index: int, record: dict[str, Any]) -> AtlasNodeRow:
        return cls(
            index=index,
            world_areas_key=record["WorldAreasKey"],
            item_visual_identity_key=record["ItemVisualIdentityKey"],
            atlas_regions_key=record["AtlasRegionsKey"],
            dds_file=record["DDSFile"],
            raw=record,
        )


@dataclass(frozen=True)
class ItemVisualIdentityRow:
    SHEET: ClassVar[str] = ITEM_VISUAL_IDENTITY
    COLUMNS: ClassVar[tuple[str, ...]] = ("DDSFile",)

    index: int
    dds_file: str | None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_record(cls, index: int, record: dict[str, Any]) -> ItemVisualIdentityRow:
        return cls(index=index, dds_file=record["DDSFile"], raw=record)


@dataclass(frozen=True)
class AtlasRegionRow:
    SHEET: ClassVar[str] = ATLAS_REGIONS
    COLUMNS: ClassVar[tuple[str, ...]] = ("Name",)

    index: int
    name: str | None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_record(cls, index: int, record: dict[str, Any]) -> AtlasRegionRow:
        return cls(index=index, name=record["Name"], raw=record)


@dataclass(frozen=True)
class LangWorldAreaRow:
    """Localized area name (lang/<code>.json -> WorldAreas.dat)."""
    SHEET: ClassVar[str] = WORLD_AREAS
    COLUMNS: ClassVar[tuple[str, ...]] = ("Id", "Name")

    index: int
    id: str
    name: str | None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_record(cls, index: int, record: dict[str, Any]) -> LangWorldAreaRow:
        return cls(index=index, id=record["Id"], name=record["Name"], raw=record)


@dataclass(frozen=True)
class BackendErrorRow:
    """Localized client message (lang/<code>.json -> BackendErrors.dat)."""
    SHEET: ClassVar[str] = BACKEND_ERRORS
    COLUMNS: ClassVar[tuple[str, ...]] = ("Id", "Text")

    index: int
    id: str
    text: str | None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_record(cls, index: int, record: dict[str, Any]) -> BackendErrorRow:
        return cls(index=index, id=record["Id"], text=record["Text"], raw=record)
