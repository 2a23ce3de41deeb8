from __future__ import annotations

import logging
from collections.abc import Collection, Iterable, Mapping

from ..models.build_error import BuildError, ErrorKind, StageResult
from ..models.records import AreaRecord, LocalizationBundle
from ..models.rows import BackendErrorRow, LangWorldAreaRow
from ..models.sheet import NormalizedSheet, RawSheet
from ..sheets.binding import bind_sheet
from ..sheets.reader import normalize_sheet
from .progress import ProgressTracker

"""Localization extractor.

Area names differ per language, and so does the "You have entered <area>." client
message the log watcher matches on. For every language file this builds:

    worldAreas:    area Id -> localized name   (only areas kept by the area join)
    backendErrors: error Id -> localized text  (only ENTERED_AREA_IDS)

Languages are independent of each other; they are processed in sorted code order so the
output is deterministic.
"""

__all__ = [
    "ENTERED_AREA_IDS",
    "extract_language",
    "extract_localizations",
]

logger = logging.getLogger(__name__)

ENTERED_AREA_IDS: tuple[str, ...] = ("EnteredArea",)

_LANG_SHEETS = (LangWorldAreaRow.SHEET, BackendErrorRow.SHEET)


def _normalize_lang_sheets(raws: Iterable[RawSheet]) -> StageResult[dict[str, NormalizedSheet]]:
    """Normalize only the sheets the lookups read; the rest of the file is ignored."""
    by_name: dict[str, RawSheet] = {}
    for raw in raws:
        if raw.filename not in _LANG_SHEETS:
            continue
        if raw.filename in by_name:
            return StageResult.failure(BuildError(
                kind=ErrorKind.DUPLICATE_SHEET,
                message="sheet appears more than once in the language file",
                sheet=raw.filename,
            ))
        by_name[raw.filename] = raw

    sheets: dict[str, NormalizedSheet] = {}
    for name, raw in by_name.items():
        res = normalize_sheet(raw)
        if not res.ok:
            return StageResult.failure(res.error)  # type: ignore[arg-type]
        sheets[name] = res.value  # type: ignore[assignment]
    return StageResult.success(sheets)


def extract_language(
    raws: Iterable[RawSheet],
    area_ids: Collection[str],
    backend_error_ids: Collection[str] = ENTERED_AREA_IDS,
) -> StageResult[LocalizationBundle]:
    """Build the LocalizationBundle of one language file."""
    normalized = _normalize_lang_sheets(raws)
    if not normalized.ok:
        return StageResult.failure(normalized.error)  # type: ignore[arg-type]
    sheets = normalized.value or {}

    areas = bind_sheet(sheets, LangWorldAreaRow, source="language file")
    if not areas.ok:
        return StageResult.failure(areas.error)  # type: ignore[arg-type]
    errors = bind_sheet(sheets, BackendErrorRow, source="language file")
    if not errors.ok:
        return StageResult.failure(errors.error)  # type: ignore[arg-type]

    # 同一 Id が複数行ある場合は後勝ち
    world_areas = {a.id: a.name for a in areas.value if a.id in area_ids}  # type: ignore[union-attr]
    backend_errors = {e.id: e.text for e in errors.value if e.id in backend_error_ids}  # type: ignore[union-attr]
    return StageResult.success(LocalizationBundle(backend_errors=backend_errors, world_areas=world_areas))


def extract_localizations(
    langs: Mapping[str, Iterable[RawSheet]],
    areas: Iterable[AreaRecord],
    backend_error_ids: Collection[str] = ENTERED_AREA_IDS,
    lang_directory: str = "lang",
) -> StageResult[dict[str, LocalizationBundle]]:
    """Extract every language. The first failing language aborts the whole stage."""
    area_ids = {a.id for a in areas}
    bundles: dict[str, LocalizationBundle] = {}
    with ProgressTracker(len(langs), description="Languages", unit="lang") as progress:
        for code in sorted(langs):
            res = extract_language(langs[code], area_ids, backend_error_ids)
            if not res.ok:
                return StageResult.failure(res.error.with_source(f"{lang_directory}/{code}.json"))  # type: ignore[union-attr]
            bundle: LocalizationBundle = res.value  # type: ignore[assignment]
            logger.debug(f"lang={code} areas={len(bundle.world_areas)} backend_errors={len(bundle.backend_errors)}")
            bundles[code] = bundle
            progress.advance(code)
    return StageResult.success(bundles)
