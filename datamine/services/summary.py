from __future__ import annotations

from ..models.build_result import BuildStats

"""SUMMARY line rendering."""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # 指数表記を避ける
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(stats: BuildStats) -> str:
    """Render the SUMMARY line for one successful build.

    Format:
    SUMMARY sheets={n} areas={kept}/{total} unique_maps={n} atlas_nodes={n}
    visuals={matched} languages={n} elapsed_sec={elapsed}

    Examples:
        >>> from datetime import datetime, timezone
        >>> from datamine.models.build_result import JoinStats
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> join = JoinStats(total_areas=10, kept_areas=4, dropped_irrelevant=5,
        ...                  dropped_without_visual=1, matched_visuals=3)
        >>> stats = BuildStats(sheets=5, unique_maps=1, atlas_nodes=2, languages=2,
        ...                    join=join, start_time=t, end_time=t, elapsed_seconds=0.0)
        >>> render_summary_line(stats)
        'SUMMARY sheets=5 areas=4/10 unique_maps=1 atlas_nodes=2 visuals=3 languages=2 elapsed_sec=0'
    """
    return (
        f"SUMMARY sheets={stats.sheets} "
        f"areas={stats.join.kept_areas}/{stats.join.total_areas} "
        f"unique_maps={stats.unique_maps} "
        f"atlas_nodes={stats.atlas_nodes} "
        f"visuals={stats.join.matched_visuals} "
        f"languages={stats.languages} "
        f"elapsed_sec={_format_seconds(stats.elapsed_seconds)}"
    )
