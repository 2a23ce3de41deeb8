from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import BuildConfig
from ..models.build_error import StageResult
from ..models.build_result import BuildStats
from ..models.records import BuildDocument
from ..models.rows import AtlasNodeRow, AtlasRegionRow, ItemVisualIdentityRow, UniqueMapRow, WorldAreaRow
from ..sheets.binding import bind_sheet
from ..sheets.reader import ExportBundle, normalize_sheets, read_export
from .area_joiner import JoinKey, join_world_areas
from .localization import ENTERED_AREA_IDS, extract_localizations
from .resolvers import resolve_atlas_nodes, resolve_unique_maps

"""Build orchestration.

Runs the four stages in dependency order and threads their results:

1. normalize every sheet of the aggregate export
2. resolve UniqueMaps.dat / AtlasNode.dat rows (two-hop FK joins)
3. join + filter WorldAreas.dat
4. extract per-language lookups for the kept areas

The first failing stage ends the build; its BuildError (tagged with the export file it
came from) is returned and no document is produced.
"""

__all__ = [
    "BuildOutcome",
    "build_document",
    "run_build",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildOutcome:
    document: BuildDocument
    stats: BuildStats


def build_document(
    export: ExportBundle,
    *,
    join_key: JoinKey = JoinKey.WORLD_AREAS_KEY,
    backend_error_ids: Collection[str] = ENTERED_AREA_IDS,
    export_file: str = "all.json",
    lang_directory: str = "lang",
) -> StageResult[BuildOutcome]:
    """Build the output document from an already loaded export."""
    start_time = datetime.now(UTC)

    def _fail(res: StageResult) -> StageResult[BuildOutcome]:
        return StageResult.failure(res.error.with_source(export_file))  # type: ignore[union-attr]

    # 1. Sheet Normalizer
    normalized = normalize_sheets(export.sheets)
    if not normalized.ok:
        return _fail(normalized)
    sheets = normalized.value or {}
    logger.info(f"normalized {len(sheets)} sheets from {export_file}")

    world_areas = bind_sheet(sheets, WorldAreaRow, source=export_file)
    if not world_areas.ok:
        return _fail(world_areas)
    unique_rows = bind_sheet(sheets, UniqueMapRow, source=export_file)
    if not unique_rows.ok:
        return _fail(unique_rows)
    atlas_rows = bind_sheet(sheets, AtlasNodeRow, source=export_file)
    if not atlas_rows.ok:
        return _fail(atlas_rows)
    visuals = bind_sheet(sheets, ItemVisualIdentityRow, source=export_file)
    if not visuals.ok:
        return _fail(visuals)
    regions = bind_sheet(sheets, AtlasRegionRow, source=export_file)
    if not regions.ok:
        return _fail(regions)

    # 2. Entity Resolvers
    unique_maps = resolve_unique_maps(unique_rows.value, visuals.value)  # type: ignore[arg-type]
    if not unique_maps.ok:
        return _fail(unique_maps)
    atlas_nodes = resolve_atlas_nodes(atlas_rows.value, visuals.value, regions.value)  # type: ignore[arg-type]
    if not atlas_nodes.ok:
        return _fail(atlas_nodes)

    # 3. Area Joiner (失敗条件なし)
    joined = join_world_areas(
        world_areas.value,  # type: ignore[arg-type]
        unique_maps.value or [],
        atlas_nodes.value or [],
        join_key=join_key,
    )
    logger.info(f"kept {joined.stats.kept_areas}/{joined.stats.total_areas} world areas (join_key={join_key.value})")

    # 4. Localization Extractor (言語別エラーは lang/<code>.json で source 付与済)
    localized = extract_localizations(
        export.langs,
        joined.areas,
        backend_error_ids=backend_error_ids,
        lang_directory=lang_directory,
    )
    if not localized.ok:
        return StageResult.failure(localized.error)  # type: ignore[arg-type]
    lang = localized.value or {}
    logger.info(f"extracted {len(lang)} languages")

    end_time = datetime.now(UTC)
    stats = BuildStats(
        sheets=len(sheets),
        unique_maps=len(unique_maps.value or []),
        atlas_nodes=len(atlas_nodes.value or []),
        languages=len(lang),
        join=joined.stats,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
    )
    return StageResult.success(BuildOutcome(
        document=BuildDocument(world_areas=joined.areas, lang=lang),
        stats=stats,
    ))


def run_build(cfg: BuildConfig) -> StageResult[BuildOutcome]:
    """Read the export configured in ``cfg`` and build the document."""
    directory = Path(cfg.input_directory)
    logger.info(f"Reading export from: {directory}")
    export = read_export(directory, export_file=cfg.export_file, lang_directory=cfg.lang_directory)
    if not export.ok:
        return StageResult.failure(export.error)  # type: ignore[arg-type]
    return build_document(
        export.value,  # type: ignore[arg-type]
        join_key=cfg.area_join_key,
        backend_error_ids=cfg.backend_error_ids,
        export_file=cfg.export_file,
        lang_directory=cfg.lang_directory,
    )
