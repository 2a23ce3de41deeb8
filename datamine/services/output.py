from __future__ import annotations

import json
import os
import sys
import tempfile
from pathlib import Path
from typing import TextIO

from ..models.records import BuildDocument

"""Output document encoding and writing.

The document is encoded to a string in full before anything is written, so a failure
never leaves half a document on stdout. File output goes through a temporary file in
the target directory and ``os.replace``.
"""

__all__ = [
    "encode_document",
    "write_document",
]


def encode_document(document: BuildDocument, indent: int | None = 2) -> str:
    # 非 ASCII (各言語のエリア名) はエスケープせずそのまま出力
    return json.dumps(document.to_dict(), indent=indent, ensure_ascii=False) + "\n"


def write_document(text: str, output_path: str | None = None, stream: TextIO | None = None) -> Path | None:
    """Write ``text`` to ``output_path``, or to ``stream`` (default stdout) when no path is set.

    Returns the written file path, or None for stream output.
    """
    if output_path is None:
        out = stream if stream is not None else sys.stdout
        out.write(text)
        out.flush()
        return None

    target = Path(output_path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return target
