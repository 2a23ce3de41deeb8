# Shared pytest fixtures
from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import pytest

from datamine.logging.init import reset_logging


def sheet(filename: str, header: list[str], data: list[list[Any]]) -> dict[str, Any]:
    """One extractor entry in the all.json shape (header as list of {name, ...})."""
    return {
        "filename": filename,
        "header": [{"name": h, "rowid": i} for i, h in enumerate(header)],
        "data": data,
    }


# WorldAreas rows:
#   0 town, 1 atlas map, 2 campaign, 3 map without visual (boss arena), 4 hideout, 5 unique map
WORLD_AREAS_ROWS = [
    ["G1_town", "Lioneye's Watch", True, False, False, False],
    ["MapWorldsExample", "Example Map", False, False, True, False],
    ["1_1_1", "The Twilight Strand", False, False, False, False],
    ["MapWorldsExampleBoss", "Example Arena", False, False, True, False],
    ["HideoutLuxurious", "Luxurious Hideout", False, True, False, False],
    ["MapWorldsUnique", "Unique Map", False, False, False, True],
]


@pytest.fixture()
def export_sheets() -> list[dict[str, Any]]:
    return [
        sheet(
            "WorldAreas.dat",
            ["Id", "Name", "IsTown", "IsHideout", "IsMapArea", "IsUniqueMapArea"],
            copy.deepcopy(WORLD_AREAS_ROWS),
        ),
        sheet(
            "ItemVisualIdentity.dat",
            ["Id", "DDSFile"],
            [
                ["MapExample", "Art/2DItems/Maps/Example.dds"],
                ["MapUnique", "Art/2DItems/Maps/Unique.dds"],
                ["Blank", ""],
            ],
        ),
        sheet("AtlasRegions.dat", ["Id", "Name"], [["Region1", "Haewark Hamlet"]]),
        sheet(
            "UniqueMaps.dat",
            ["ItemVisualIdentityKey", "WorldAreasKey", "FlavourTextKey"],
            [[1, 5, None]],
        ),
        sheet(
            "AtlasNode.dat",
            ["WorldAreasKey", "ItemVisualIdentityKey", "AtlasRegionsKey", "DDSFile", "Tier"],
            [[1, 0, 0, "Art/2DArt/Atlas/Example.dds", [1, 2, 3, 4, 5]]],
        ),
        # 対象外シート (正規化のみ)
        sheet("Mods.dat", ["Id", "Level"], [["Str1", 1], ["Dex1", 1]]),
    ]


@pytest.fixture()
def lang_sheets() -> dict[str, list[dict[str, Any]]]:
    def _lang(names: list[str], entered: str) -> list[dict[str, Any]]:
        return [
            sheet(
                "WorldAreas.dat",
                ["Id", "Name", "IsTown", "IsHideout", "IsMapArea", "IsUniqueMapArea"],
                [[r[0], n, *r[2:]] for r, n in zip(WORLD_AREAS_ROWS, names, strict=True)],
            ),
            sheet(
                "BackendErrors.dat",
                ["Id", "Text"],
                [
                    ["EnteredArea", entered],
                    ["JoinedArea", "join"],
                ],
            ),
        ]

    return {
        "English": _lang([r[1] for r in WORLD_AREAS_ROWS], "You have entered {0}."),
        "French": _lang(
            ["Guet d'Oeil de Lion", "Carte exemple", "La Grève du crépuscule",
             "Arène exemple", "Repaire luxueux", "Carte unique"],
            "Vous êtes à présent dans : {0}.",
        ),
    }


def write_export_dir(
    directory: Path,
    sheets: list[dict[str, Any]],
    langs: dict[str, list[dict[str, Any]]],
) -> Path:
    (directory / "lang").mkdir(parents=True, exist_ok=True)
    (directory / "all.json").write_text(json.dumps(sheets, ensure_ascii=False), encoding="utf-8")
    for code, entries in langs.items():
        (directory / "lang" / f"{code}.json").write_text(json.dumps(entries, ensure_ascii=False), encoding="utf-8")
    return directory


@pytest.fixture()
def temp_workdir(tmp_path: Path, monkeypatch) -> Path:
    (tmp_path / "config").mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DATAMINE_INPUT_DIRECTORY", raising=False)
    monkeypatch.delenv("DATAMINE_OUTPUT_PATH", raising=False)
    return tmp_path


@pytest.fixture()
def export_dir(temp_workdir: Path, export_sheets, lang_sheets) -> Path:
    """./dist populated with all.json + lang/*.json (the default input location)."""
    return write_export_dir(temp_workdir / "dist", export_sheets, lang_sheets)


@pytest.fixture()
def sample_config_yaml() -> str:
    return """input_directory: ./dist
export_file: all.json
lang_directory: lang
output_path: null
indent: 2
area_join_key: world_areas_key
backend_error_ids: [EnteredArea]
error_log_directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "datamine.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def make_sheet():
    return sheet


@pytest.fixture()
def write_export():
    return write_export_dir
