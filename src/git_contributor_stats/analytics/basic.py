"""Totals-only aggregation used for summary tables and the run metadata.

Unlike the full pipeline this keeps no per-file detail, but it tracks every
email seen for an identity. Similarity merging follows the same
first-match-wins rule as ``merger.merge_similar_contributors``.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

from ..identity.aliases import AliasResolver, CanonicalDetails
from ..identity.similarity import SEQUENCE
from ..models import (
    ContributorAccumulator,
    ContributorsMeta,
    ContributorSummary,
    is_before,
)
from .aggregator import GroupBy, aggregate_commits
from .merger import merge_similar_contributors


def aggregate_basic(
    commits: Iterable[Any],
    group_by: GroupBy = "email",
    alias_resolver: Optional[AliasResolver] = None,
    canonical_details: Optional[Mapping[str, CanonicalDetails]] = None,
    similarity: Optional[float] = None,
    similarity_algorithm: str = SEQUENCE,
) -> list[ContributorSummary]:
    aggregation = aggregate_commits(commits, group_by, alias_resolver, canonical_details)
    merged = merge_similar_contributors(aggregation.contributors, similarity, similarity_algorithm)
    return [_summarize(acc, group_by) for acc in merged.values()]


def _summarize(acc: ContributorAccumulator, group_by: GroupBy) -> ContributorSummary:
    return ContributorSummary(
        key=acc.key,
        name=acc.name or (acc.key if group_by == "name" else ""),
        emails=sorted(acc.emails),
        commits=acc.commits,
        additions=acc.added,
        deletions=acc.deleted,
        changes=acc.added + acc.deleted,
        first_commit_date=acc.first_commit_date,
        last_commit_date=acc.last_commit_date,
    )


def compute_meta(contributors: Sequence[ContributorSummary]) -> ContributorsMeta:
    """Totals and overall date range across summary rows."""
    meta = ContributorsMeta(contributors=len(contributors))
    for c in contributors:
        meta.commits += c.commits
        meta.additions += c.additions
        meta.deletions += c.deletions
        if c.first_commit_date is not None and (
            meta.first_commit_date is None or is_before(c.first_commit_date, meta.first_commit_date)
        ):
            meta.first_commit_date = c.first_commit_date
        if c.last_commit_date is not None and (
            meta.last_commit_date is None or is_before(meta.last_commit_date, c.last_commit_date)
        ):
            meta.last_commit_date = c.last_commit_date
    return meta
