from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

from datamine.cli import main as cli_main

"""End-to-end build over an export directory on disk."""

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def test_run_success_full_document(write_config, export_dir: Path, capsys):
    code = cli_main([])
    captured = capsys.readouterr()
    assert code == 0
    doc = json.loads(captured.out)
    assert doc == {
        "worldAreas": {
            "header": ["Id", "IsTown", "IsHideout", "IsMapArea", "IsUniqueMapArea", "ItemVisualIdentity", "RowID"],
            "data": [
                ["G1_town", True, False, False, False, None, 0],
                ["MapWorldsExample", False, False, True, False, "Art/2DItems/Maps/Example.dds", 1],
                ["HideoutLuxurious", False, True, False, False, None, 4],
                ["MapWorldsUnique", False, False, False, True, "Art/2DItems/Maps/Unique.dds", 5],
            ],
        },
        "lang": {
            "English": {
                "backendErrors": {"EnteredArea": "You have entered {0}."},
                "worldAreas": {
                    "G1_town": "Lioneye's Watch",
                    "MapWorldsExample": "Example Map",
                    "HideoutLuxurious": "Luxurious Hideout",
                    "MapWorldsUnique": "Unique Map",
                },
            },
            "French": {
                "backendErrors": {"EnteredArea": "Vous êtes à présent dans : {0}."},
                "worldAreas": {
                    "G1_town": "Guet d'Oeil de Lion",
                    "MapWorldsExample": "Carte exemple",
                    "HideoutLuxurious": "Repaire luxueux",
                    "MapWorldsUnique": "Carte unique",
                },
            },
        },
    }
    # 非 ASCII はエスケープされない
    assert "Vous êtes à présent dans" in captured.out


def test_run_is_deterministic(export_dir: Path, capsys):
    assert cli_main([]) == 0
    first = capsys.readouterr().out
    assert cli_main([]) == 0
    assert capsys.readouterr().out == first


def test_module_entrypoint(export_dir: Path, temp_workdir: Path):
    proc = subprocess.run(
        [sys.executable, "-m", "datamine.cli"],
        cwd=temp_workdir,
        env={**os.environ, "PYTHONPATH": str(PROJECT_ROOT)},
        capture_output=True,
        text=True,
        encoding="utf-8",
        check=False,
    )
    assert proc.returncode == 0, proc.stderr
    assert len(json.loads(proc.stdout)["worldAreas"]["data"]) == 4
    assert "SUMMARY sheets=6" in proc.stderr
