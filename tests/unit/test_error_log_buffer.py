from __future__ import annotations

import json
from pathlib import Path

from datamine.logging.error_log import ErrorLogBuffer, ErrorRecord
from datamine.models.build_error import BuildError, ErrorKind

KEYS = {"timestamp", "source", "sheet", "row", "error_type", "message", "raw"}


def test_error_log_buffer_flush(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    buf.append(ErrorRecord.create("all.json", "UniqueMaps.dat", 1, "MISSING_REQUIRED_FIELD", "DDSFile empty"))
    buf.append(ErrorRecord.create("lang/French.json", "", -1, "MISSING_SHEET", "sheet not found"))
    path = buf.flush()
    assert path.exists()
    assert path.parent == tmp_path / "logs"
    assert path.name.startswith("errors-") and path.suffix == ".log"
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        assert set(json.loads(raw)) == KEYS
    # flush 後バッファクリア
    assert len(buf) == 0


def test_error_log_buffer_empty_flush_writes_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_error_log_buffer_multiple_flushes(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path)
    buf.append(ErrorRecord.create("all.json", "S", 1, "MALFORMED_ROW", "short row"))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append(ErrorRecord.create("all.json", "S", 2, "MALFORMED_ROW", "short row"))
    path2 = buf.flush()
    assert path == path2
    assert path2.stat().st_size > size1


def test_append_error_converts_build_error(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path)
    buf.append_error(BuildError(
        kind=ErrorKind.DANGLING_REFERENCE,
        message="ItemVisualIdentityKey 99 outside ItemVisualIdentity.dat",
        sheet="AtlasNode.dat",
        row=4,
        raw={"ItemVisualIdentityKey": 99},
        source="all.json",
    ))
    obj = json.loads(buf.flush().read_text(encoding="utf-8"))
    assert obj["error_type"] == "DANGLING_REFERENCE"
    assert obj["source"] == "all.json"
    assert obj["row"] == 4
    assert obj["raw"] == {"ItemVisualIdentityKey": 99}
