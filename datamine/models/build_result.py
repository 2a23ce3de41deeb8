from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Build statistics reported on the SUMMARY line."""


@dataclass(frozen=True)
class JoinStats:
    """Counters from the area join pass."""
    total_areas: int  # WorldAreas.dat 全行数
    kept_areas: int  # 両フィルタ通過後
    dropped_irrelevant: int  # map/town/hideout いずれでもない行
    dropped_without_visual: int  # IsMapArea だが visual 無し (重複 / ボス部屋)
    matched_visuals: int  # ItemVisualIdentity が解決された行 (フィルタ前)


@dataclass(frozen=True)
class BuildStats:
    """Aggregated metrics for one successful build."""
    sheets: int  # all.json 内シート数
    unique_maps: int
    atlas_nodes: int
    languages: int
    join: JoinStats
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
