from __future__ import annotations

import re
from pathlib import Path

from datamine.cli import main as cli_main

"""SUMMARY line format contract."""

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+sheets=([0-9]+)\s+areas=([0-9]+)/([0-9]+)\s+unique_maps=([0-9]+)\s+"
    r"atlas_nodes=([0-9]+)\s+visuals=([0-9]+)\s+languages=([0-9]+)\s+elapsed_sec=([0-9]+\.?[0-9]*)$"
)


def test_summary_pattern_example_line():
    line = "SUMMARY sheets=912 areas=140/1200 unique_maps=29 atlas_nodes=413 visuals=440 languages=8 elapsed_sec=2.41"
    m = SUMMARY_PATTERN.match(line)
    assert m, "SUMMARY line should match contract regex"
    assert int(m.group(2)) <= int(m.group(3))


def test_cli_emits_exactly_one_summary_line(export_dir: Path, capsys):
    assert cli_main([]) == 0
    lines = [line for line in capsys.readouterr().err.splitlines() if line.startswith("SUMMARY")]
    assert len(lines) == 1
    assert SUMMARY_PATTERN.match(lines[0])
