"""Domain models for the export -> datamine build.

Sheets (raw and normalized), typed rows for the consumed sheets, resolver and output
records, the build error taxonomy and the build statistics.
"""

from .build_error import BuildError, ErrorKind, StageResult
from .build_result import BuildStats, JoinStats
from .records import AREA_HEADER, AreaRecord, AtlasNodeIdentity, BuildDocument, LocalizationBundle, VisualIdentity
from .reference import RowRef
from .sheet import NormalizedSheet, RawSheet, SheetSet

__all__ = [
    # Sheets
    "RawSheet",
    "NormalizedSheet",
    "SheetSet",
    "RowRef",
    # Records
    "VisualIdentity",
    "AtlasNodeIdentity",
    "AreaRecord",
    "LocalizationBundle",
    "BuildDocument",
    "AREA_HEADER",
    # Errors / results
    "ErrorKind",
    "BuildError",
    "StageResult",
    "BuildStats",
    "JoinStats",
]
