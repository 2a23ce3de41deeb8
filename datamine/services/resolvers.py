from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, TypeVar

from ..models.build_error import BuildError, ErrorKind, StageResult
from ..models.records import AtlasNodeIdentity, VisualIdentity
from ..models.reference import RowRef, coerce_index
from ..models.rows import (
    WORLD_AREAS,
    AtlasNodeRow,
    AtlasRegionRow,
    ItemVisualIdentityRow,
    UniqueMapRow,
)
from ..sheets.binding import TypedSheet

"""Entity resolvers for UniqueMaps.dat and AtlasNode.dat.

Both sheets point at WorldAreas.dat and at ItemVisualIdentity.dat by raw row index.
Each resolver follows those keys for one row and returns a flat record:

    UniqueMaps[i].ItemVisualIdentityKey -> ItemVisualIdentity[k].DDSFile
    AtlasNode[i].ItemVisualIdentityKey  -> ItemVisualIdentity[k].DDSFile
    AtlasNode[i].AtlasRegionsKey        -> AtlasRegions[r].Name

An AtlasNode row must also carry its own non-empty DDSFile.

A null/empty required value is MISSING_REQUIRED_FIELD, a key outside its target sheet is
DANGLING_REFERENCE. Both carry the offending raw row. The list resolvers stop at the
first failing row, since the area join assumes every row resolved.
"""

__all__ = [
    "resolve_unique_map",
    "resolve_atlas_node",
    "resolve_unique_maps",
    "resolve_atlas_nodes",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _missing(field: str, sheet: str, row: int, raw: dict[str, Any]) -> BuildError:
    return BuildError(
        kind=ErrorKind.MISSING_REQUIRED_FIELD,
        message=f"required field '{field}' is null or empty",
        sheet=sheet,
        row=row,
        raw=raw,
    )


def _follow(
    key: Any,
    target: TypedSheet[T],
    field: str,
    sheet: str,
    row: int,
    raw: dict[str, Any],
) -> StageResult[T]:
    """Resolve the foreign key ``key`` (column ``field`` of ``sheet[row]``) into ``target``."""
    if key is None:
        return StageResult.failure(_missing(field, sheet, row, raw))
    ref = target.ref(key)
    found = target.resolve(ref) if ref is not None else None
    if found is None:
        return StageResult.failure(BuildError(
            kind=ErrorKind.DANGLING_REFERENCE,
            message=f"'{field}'={key!r} does not name a row of {target.sheet} ({len(target)} rows)",
            sheet=sheet,
            row=row,
            raw=raw,
        ))
    return StageResult.success(found)


def _world_area_ref(key: Any, sheet: str, row: int, raw: dict[str, Any]) -> StageResult[RowRef]:
    # 0 は有効な行番号 (null のみ欠落扱い)
    if key is None:
        return StageResult.failure(_missing("WorldAreasKey", sheet, row, raw))
    index = coerce_index(key)
    if index is None:
        return StageResult.failure(BuildError(
            kind=ErrorKind.DANGLING_REFERENCE,
            message=f"'WorldAreasKey'={key!r} is not a row index",
            sheet=sheet,
            row=row,
            raw=raw,
        ))
    return StageResult.success(RowRef(WORLD_AREAS, index))


def _dds_file(
    key: Any,
    visuals: TypedSheet[ItemVisualIdentityRow],
    sheet: str,
    row: int,
    raw: dict[str, Any],
) -> StageResult[str]:
    found = _follow(key, visuals, "ItemVisualIdentityKey", sheet, row, raw)
    if not found.ok:
        return StageResult.failure(found.error)  # type: ignore[arg-type]
    dds = found.value.dds_file  # type: ignore[union-attr]
    if not dds:
        return StageResult.failure(_missing(f"{visuals.sheet}.DDSFile", sheet, row, raw))
    return StageResult.success(dds)


def resolve_unique_map(
    row: UniqueMapRow,
    visuals: TypedSheet[ItemVisualIdentityRow],
) -> StageResult[VisualIdentity]:
    """Resolve one UniqueMaps.dat row into a VisualIdentity."""
    area = _world_area_ref(row.world_areas_key, row.SHEET, row.index, row.raw)
    if not area.ok:
        return StageResult.failure(area.error)  # type: ignore[arg-type]
    dds = _dds_file(row.item_visual_identity_key, visuals, row.SHEET, row.index, row.raw)
    if not dds.ok:
        return StageResult.failure(dds.error)  # type: ignore[arg-type]
    return StageResult.success(VisualIdentity(
        source=RowRef(row.SHEET, row.index),
        world_area=area.value,  # type: ignore[arg-type]
        item_visual_identity=dds.value,  # type: ignore[arg-type]
    ))


def resolve_atlas_node(
    row: AtlasNodeRow,
    visuals: TypedSheet[ItemVisualIdentityRow],
    regions: TypedSheet[AtlasRegionRow],
) -> StageResult[AtlasNodeIdentity]:
    """Resolve one AtlasNode.dat row into an AtlasNodeIdentity (visual, own DDSFile, region name)."""
    area = _world_area_ref(row.world_areas_key, row.SHEET, row.index, row.raw)
    if not area.ok:
        return StageResult.failure(area.error)  # type: ignore[arg-type]
    dds = _dds_file(row.item_visual_identity_key, visuals, row.SHEET, row.index, row.raw)
    if not dds.ok:
        return StageResult.failure(dds.error)  # type: ignore[arg-type]
    if not row.dds_file:
        return StageResult.failure(_missing(f"{row.SHEET}.DDSFile", row.SHEET, row.index, row.raw))
    region = _follow(row.atlas_regions_key, regions, "AtlasRegionsKey", row.SHEET, row.index, row.raw)
    if not region.ok:
        return StageResult.failure(region.error)  # type: ignore[arg-type]
    name = region.value.name  # type: ignore[union-attr]
    if not name:
        return StageResult.failure(_missing(f"{regions.sheet}.Name", row.SHEET, row.index, row.raw))
    return StageResult.success(AtlasNodeIdentity(
        source=RowRef(row.SHEET, row.index),
        world_area=area.value,  # type: ignore[arg-type]
        item_visual_identity=dds.value,  # type: ignore[arg-type]
        dds_file=row.dds_file,
        atlas_region=name,
    ))


def resolve_unique_maps(
    rows: Iterable[UniqueMapRow],
    visuals: TypedSheet[ItemVisualIdentityRow],
) -> StageResult[list[VisualIdentity]]:
    """Resolve every UniqueMaps.dat row, in order; first failure aborts."""
    out: list[VisualIdentity] = []
    for row in rows:
        res = resolve_unique_map(row, visuals)
        if not res.ok:
            return StageResult.failure(res.error)  # type: ignore[arg-type]
        out.append(res.value)  # type: ignore[arg-type]
    logger.debug(f"resolved {len(out)} unique maps")
    return StageResult.success(out)


def resolve_atlas_nodes(
    rows: Iterable[AtlasNodeRow],
    visuals: TypedSheet[ItemVisualIdentityRow],
    regions: TypedSheet[AtlasRegionRow],
) -> StageResult[list[AtlasNodeIdentity]]:
    """Resolve every AtlasNode.dat row, in order; first failure aborts."""
    out: list[AtlasNodeIdentity] = []
    for row in rows:
        res = resolve_atlas_node(row, visuals, regions)
        if not res.ok:
            return StageResult.failure(res.error)  # type: ignore[arg-type]
        out.append(res.value)  # type: ignore[arg-type]
    logger.debug(f"resolved {len(out)} atlas nodes")
    return StageResult.success(out)
