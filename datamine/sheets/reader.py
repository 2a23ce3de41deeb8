from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.build_error import BuildError, ErrorKind, StageResult
from ..models.sheet import NormalizedSheet, RawSheet

"""Export reader and sheet normalizer.

Input layout (produced by the external extractor):

    <input_directory>/all.json        [{filename, header: [{name, ...}], data: [[...]]}, ...]
    <input_directory>/lang/<code>.json   same shape, one file per language

``read_export`` loads the files; ``normalize_sheet`` / ``normalize_sheets`` turn raw
header + rows tables into column -> value records. A row whose length differs from its
header is reported as MALFORMED_ROW, never padded or truncated.
"""

__all__ = [
    "ExportBundle",
    "read_export",
    "read_sheet_file",
    "normalize_sheet",
    "normalize_sheets",
    "sheet_to_rows",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportBundle:
    """Raw sheets of one export: the aggregate file plus one sheet list per language."""
    directory: Path
    sheets: list[RawSheet]
    langs: dict[str, list[RawSheet]] = field(default_factory=dict)


def _input_error(message: str, path: Path) -> BuildError:
    return BuildError(kind=ErrorKind.INPUT_NOT_FOUND, message=f"{message}: {path}")


def _entry_error(entry: Any, index: int, path: Path) -> BuildError | None:
    """Shape check of one extractor entry; None when RawSheet.from_export can take it."""
    if not isinstance(entry, Mapping) or "filename" not in entry:
        return _input_error(f"sheet entry {index} without filename", path)
    filename = str(entry["filename"])
    header = entry.get("header", [])
    if not isinstance(header, list):
        return _input_error(f"header of {filename} is not an array", path)
    for col, h in enumerate(header):
        name = h.get("name") if isinstance(h, Mapping) else h
        if not isinstance(name, str):
            return _input_error(f"header column {col} of {filename} has no name", path)
    data = entry.get("data", [])
    if not isinstance(data, list):
        return _input_error(f"data of {filename} is not an array", path)
    for i, row in enumerate(data):
        if not isinstance(row, list):
            return BuildError(
                kind=ErrorKind.MALFORMED_ROW,
                message=f"row is {type(row).__name__}, expected an array of values",
                sheet=filename,
                row=i,
                raw={"values": row},
            )
    return None


def read_sheet_file(path: Path) -> StageResult[list[RawSheet]]:
    """Read one extractor JSON file (array of sheet entries)."""
    if not path.is_file():
        return StageResult.failure(_input_error("export file not found", path))
    try:
        entries = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        return StageResult.failure(_input_error(f"export file is not utf-8 ({e})", path))
    except json.JSONDecodeError as e:
        return StageResult.failure(_input_error(f"invalid json ({e})", path))
    except OSError as e:
        return StageResult.failure(_input_error(f"unreadable export file ({e})", path))
    if not isinstance(entries, list):
        return StageResult.failure(_input_error("export file is not a JSON array", path))
    sheets: list[RawSheet] = []
    for i, entry in enumerate(entries):
        error = _entry_error(entry, i, path)
        if error is not None:
            return StageResult.failure(error)
        sheets.append(RawSheet.from_export(entry))
    return StageResult.success(sheets)


def read_export(
    directory: Path,
    export_file: str = "all.json",
    lang_directory: str = "lang",
) -> StageResult[ExportBundle]:
    """Load the aggregate export file and every language file under ``lang_directory``.

    Language codes are the file stems (``lang/fr.json`` -> ``"fr"``), read in sorted order.
    """
    if not directory.is_dir():
        return StageResult.failure(_input_error("input directory not found", directory))

    lang_dir = directory / lang_directory
    if not lang_dir.is_dir():
        return StageResult.failure(_input_error("language directory not found", lang_dir))

    main = read_sheet_file(directory / export_file)
    if not main.ok:
        return StageResult.failure(main.error.with_source(export_file))  # type: ignore[union-attr]

    langs: dict[str, list[RawSheet]] = {}
    for lang_file in sorted(p for p in lang_dir.iterdir() if p.is_file() and p.suffix == ".json"):
        res = read_sheet_file(lang_file)
        if not res.ok:
            return StageResult.failure(res.error.with_source(f"{lang_directory}/{lang_file.name}"))  # type: ignore[union-attr]
        langs[lang_file.stem] = res.value or []

    return StageResult.success(ExportBundle(directory=directory, sheets=main.value or [], langs=langs))


def normalize_sheet(raw: RawSheet) -> StageResult[NormalizedSheet]:
    """Pair every row of ``raw`` positionally with its header.

    Steps:
    1. Validate each row length == header length (MALFORMED_ROW otherwise)
    2. Build an object-dtype DataFrame so values keep their JSON types (None stays None)
    3. Emit one record per row, row order preserved

    A column name that appears twice keeps its last value. A header without columns still
    yields one (empty) record per row.
    """
    width = len(raw.header)
    for i, row in enumerate(raw.data):
        if len(row) != width:
            return StageResult.failure(BuildError(
                kind=ErrorKind.MALFORMED_ROW,
                message=f"row has {len(row)} values, header has {width} columns",
                sheet=raw.filename,
                row=i,
                raw={"header": list(raw.header), "values": list(row)},
            ))

    # 同名列は後勝ち (キー順は初出順)
    columns = list(dict.fromkeys(raw.header))
    if len(columns) != len(raw.header):
        dupes = sorted({c for c in raw.header if raw.header.count(c) > 1})
        logger.warning(f"{raw.filename}: duplicate columns {dupes}, using the last of each")
    if not raw.data:
        return StageResult.success(NormalizedSheet(filename=raw.filename, header=columns, data=[]))
    if not columns:
        # 列なしでも行数は保持 (位置参照をずらさない)
        return StageResult.success(NormalizedSheet(filename=raw.filename, header=columns, data=[{} for _ in raw.data]))

    # dtype=object: 数値列に None が混ざっても NaN/float に変換させない
    df = pd.DataFrame(raw.data, dtype=object)
    last = {name: i for i, name in enumerate(raw.header)}
    df = df[[last[name] for name in columns]]
    df.columns = columns
    records: list[dict[str, Any]] = df.to_dict(orient="records")
    return StageResult.success(NormalizedSheet(filename=raw.filename, header=columns, data=records))


def normalize_sheets(raws: Iterable[RawSheet]) -> StageResult[dict[str, NormalizedSheet]]:
    """Normalize a whole export into a SheetSet keyed by filename."""
    sheets: dict[str, NormalizedSheet] = {}
    for raw in raws:
        if raw.filename in sheets:
            return StageResult.failure(BuildError(
                kind=ErrorKind.DUPLICATE_SHEET,
                message="sheet appears more than once in the export",
                sheet=raw.filename,
            ))
        res = normalize_sheet(raw)
        if not res.ok:
            return StageResult.failure(res.error)  # type: ignore[arg-type]
        sheets[raw.filename] = res.value  # type: ignore[assignment]
    return StageResult.success(sheets)


def sheet_to_rows(sheet: NormalizedSheet) -> RawSheet:
    """Inverse of ``normalize_sheet``: records back to header + positional rows."""
    return RawSheet(
        filename=sheet.filename,
        header=list(sheet.header),
        data=[[record.get(col) for col in sheet.header] for record in sheet.data],
    )
