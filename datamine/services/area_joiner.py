from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from ..models.build_result import JoinStats
from ..models.records import AreaRecord, VisualIdentity
from ..models.reference import RowRef
from ..models.rows import WORLD_AREAS, WorldAreaRow
from ..sheets.binding import TypedSheet

"""Area join: WorldAreas.dat + resolved visual identities -> filtered AreaRecord list.

For every WorldAreas row an AreaRecord is built (Id, the four classification flags,
RowID = row index). Its ItemVisualIdentity comes from a resolved UniqueMaps row, else a
resolved AtlasNode row, whose join key names the same WorldAreas row; otherwise null.
The join key defaults to JoinKey.WORLD_AREAS_KEY (the identity's WorldAreasKey value);
JoinKey.SOURCE_POSITION matches by the identity's own row index instead.

Two filters follow:
1. relevance: keep maps, unique maps, towns and hideouts (campaign zones are dropped)
2. map areas without a visual identity are dropped (duplicate rows or boss arenas)
"""

__all__ = [
    "JoinKey",
    "AreaJoin",
    "join_ref",
    "index_identities",
    "build_area_record",
    "is_relevant",
    "has_required_visual",
    "join_world_areas",
]

logger = logging.getLogger(__name__)


class JoinKey(Enum):
    """Which value of a resolved identity names its WorldAreas row.

    - SOURCE_POSITION: the identity's own row index in UniqueMaps.dat / AtlasNode.dat
    - WORLD_AREAS_KEY: the identity's WorldAreasKey value
    """
    SOURCE_POSITION = "source_position"
    WORLD_AREAS_KEY = "world_areas_key"


@dataclass(frozen=True)
class AreaJoin:
    areas: list[AreaRecord]
    stats: JoinStats


def join_ref(identity: VisualIdentity, join_key: JoinKey) -> RowRef:
    """WorldAreas.dat row that ``identity`` attaches to under ``join_key``."""
    if join_key is JoinKey.SOURCE_POSITION:
        return RowRef(WORLD_AREAS, identity.source.index)
    return identity.world_area


def index_identities(
    identities: Iterable[VisualIdentity],
    join_key: JoinKey,
    world_areas: TypedSheet[WorldAreaRow],
) -> dict[int, VisualIdentity]:
    """Build WorldAreas row index -> identity lookup.

    If several identities name the same row the later one wins (warned). References
    outside WorldAreas.dat can never match an area and are skipped.
    """
    lookup: dict[int, VisualIdentity] = {}
    for identity in identities:
        ref = join_ref(identity, join_key)
        if world_areas.resolve(ref) is None:
            logger.debug(f"{identity.source} -> {ref}: outside {world_areas.sheet}, never joined")
            continue
        previous = lookup.get(ref.index)
        if previous is not None:
            logger.warning(f"{identity.source} and {previous.source} both join {ref}; using {identity.source}")
        lookup[ref.index] = identity
    return lookup


def build_area_record(
    area: WorldAreaRow,
    unique_maps: dict[int, VisualIdentity],
    atlas_nodes: dict[int, VisualIdentity],
) -> AreaRecord:
    """AreaRecord for one WorldAreas row. Unique map visuals take precedence over atlas nodes."""
    identity = unique_maps.get(area.index) or atlas_nodes.get(area.index)
    return AreaRecord(
        id=area.id,
        is_town=area.is_town,
        is_hideout=area.is_hideout,
        is_map_area=area.is_map_area,
        is_unique_map_area=area.is_unique_map_area,
        item_visual_identity=identity.item_visual_identity if identity is not None else None,
        row_id=area.index,
    )


def is_relevant(record: AreaRecord) -> bool:
    """Maps, unique maps, towns and hideouts; everything else is campaign content."""
    return record.is_relevant


def has_required_visual(record: AreaRecord) -> bool:
    """Non-map rows always pass; map rows need a resolved visual identity."""
    return not record.is_map_area or bool(record.item_visual_identity)


def join_world_areas(
    world_areas: TypedSheet[WorldAreaRow],
    unique_maps: Sequence[VisualIdentity],
    atlas_nodes: Sequence[VisualIdentity],
    join_key: JoinKey = JoinKey.WORLD_AREAS_KEY,
) -> AreaJoin:
    """Join and filter WorldAreas.dat. Output order follows WorldAreas row order."""
    unique_lookup = index_identities(unique_maps, join_key, world_areas)
    atlas_lookup = index_identities(atlas_nodes, join_key, world_areas)

    records = [build_area_record(area, unique_lookup, atlas_lookup) for area in world_areas]
    matched = sum(1 for r in records if r.item_visual_identity is not None)

    relevant = [r for r in records if is_relevant(r)]
    kept = [r for r in relevant if has_required_visual(r)]

    stats = JoinStats(
        total_areas=len(records),
        kept_areas=len(kept),
        dropped_irrelevant=len(records) - len(relevant),
        dropped_without_visual=len(relevant) - len(kept),
        matched_visuals=matched,
    )
    logger.debug(
        f"area join: total={stats.total_areas} kept={stats.kept_areas} "
        f"irrelevant={stats.dropped_irrelevant} no_visual={stats.dropped_without_visual}"
    )
    return AreaJoin(areas=kept, stats=stats)
