"""Analytics pipeline: commits in, contributor statistics out.

Stages run strictly in this order:
    1. Aggregate commits per canonical identity (normalizer + aliases)
    2. Merge near-duplicate identities (similarity threshold)
    3. Derive views from the merged identities: ranking, top stats,
       single-owner files, heatmap breakdown

Every call builds its own maps, so concurrent or repeated runs never share
state.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Iterable, Mapping, Optional

from ..identity.aliases import AliasResolver, CanonicalDetails
from ..identity.similarity import SEQUENCE
from ..logging_config import get_logger
from ..models import AnalysisResult, BusFactorInfo, ContributorAccumulator
from .aggregator import Aggregation, GroupBy, aggregate_commits
from .bus_factor import find_single_owner_files
from .merger import build_key_map, merge_similar_contributors
from .ranking import build_top_contributors, build_top_stats
from .temporal import slot_label

logger = get_logger(__name__)

DEFAULT_SIMILARITY = 0.85


def analyze(
    commits: Iterable[Any],
    similarity_threshold: Optional[float] = DEFAULT_SIMILARITY,
    alias_resolver: Optional[AliasResolver] = None,
    canonical_details: Optional[Mapping[str, CanonicalDetails]] = None,
    group_by: GroupBy = "email",
    similarity_algorithm: str = SEQUENCE,
) -> AnalysisResult:
    """Run the full analytics pipeline over already-parsed commits.

    Args:
        commits: ``Commit`` objects or log-reader mappings
        similarity_threshold: Merge identities scoring at or above this;
            None or 0 disables similarity merging
        alias_resolver: Resolver from ``build_alias_resolver`` (or None)
        canonical_details: Display overrides from the same build
        group_by: Identity field to group on ("email" or "name")
        similarity_algorithm: "sequence" (default) or "levenshtein"

    Returns:
        AnalysisResult; empty input yields empty collections and None
        top stats. Malformed commits never raise.
    """
    aggregation = aggregate_commits(commits, group_by, alias_resolver, canonical_details)

    merged = merge_similar_contributors(
        aggregation.contributors, similarity_threshold, similarity_algorithm
    )
    key_map = build_key_map(merged)

    top_contributors = build_top_contributors(merged)
    files_single_owner = find_single_owner_files(aggregation.file_contributors, merged, key_map)

    logger.debug(
        f"Analysis complete: {len(merged)} contributors, "
        f"{len(files_single_owner)} single-owner files"
    )

    return AnalysisResult(
        contributors=merged,
        top_contributors=top_contributors,
        total_commits=aggregation.total_commits,
        commit_frequency=aggregation.temporal.frequency(),
        heatmap=aggregation.temporal.heatmap_grid(),
        heatmap_contributors=_heatmap_contributors(aggregation, merged, key_map),
        bus_factor=BusFactorInfo(files_single_owner=files_single_owner),
        top_stats=build_top_stats(top_contributors),
    )


def _heatmap_contributors(
    aggregation: Aggregation,
    merged: Mapping[str, ContributorAccumulator],
    key_map: Mapping[str, str],
) -> dict[str, dict[str, int]]:
    """Per-slot commit counts keyed by merged display name."""
    breakdown: dict[str, dict[str, int]] = {}
    for (weekday, hour), counts in sorted(aggregation.slot_contributors.items()):
        slot: Counter[str] = Counter()
        for key, count in counts.items():
            owner = merged.get(key_map.get(key, key))
            label = (owner.name if owner is not None else "") or key
            slot[label] += count
        breakdown[slot_label(weekday, hour)] = dict(slot)
    return breakdown
