"""Contributor analytics: aggregation, merging, temporal and ownership views."""

from .aggregator import Aggregation, aggregate_commits, normalize_key
from .analyzer import DEFAULT_SIMILARITY, analyze
from .basic import aggregate_basic, compute_meta
from .bus_factor import find_single_owner_files
from .merger import build_key_map, merge_similar_contributors
from .ranking import build_top_contributors, build_top_stats, pick_sort_key, sort_contributors
from .temporal import TemporalActivity, iso_week_key

__all__ = [
    "Aggregation",
    "DEFAULT_SIMILARITY",
    "TemporalActivity",
    "aggregate_basic",
    "aggregate_commits",
    "analyze",
    "build_key_map",
    "build_top_contributors",
    "build_top_stats",
    "compute_meta",
    "find_single_owner_files",
    "iso_week_key",
    "merge_similar_contributors",
    "normalize_key",
    "pick_sort_key",
    "sort_contributors",
]
