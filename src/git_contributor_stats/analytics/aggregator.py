"""Fold a commit sequence into per-identity accumulators.

The grouping key for each commit is its normalized author email (or name,
depending on ``group_by``), passed through the alias resolver when one is
configured. Alongside the accumulators, the fold records which keys touched
each file (for single-owner detection) and which keys committed in each
weekday/hour slot (for the heatmap breakdown).
"""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Mapping, Optional

from ..identity.aliases import AliasResolver, CanonicalDetails
from ..identity.normalizer import normalize_name
from ..logging_config import get_logger
from ..models import Commit, ContributorAccumulator, coerce_commit
from .temporal import TemporalActivity, heatmap_slot

logger = get_logger(__name__)

GroupBy = Literal["name", "email"]


@dataclass
class Aggregation:
    """State produced by one aggregation pass. Never shared between runs."""

    contributors: dict[str, ContributorAccumulator] = field(default_factory=dict)
    file_contributors: dict[str, set[str]] = field(default_factory=lambda: defaultdict(set))
    slot_contributors: dict[tuple[int, int], Counter[str]] = field(
        default_factory=lambda: defaultdict(Counter)
    )
    temporal: TemporalActivity = field(default_factory=TemporalActivity)
    total_commits: int = 0
    undated_commits: int = 0


def normalize_key(
    commit: Commit,
    group_by: GroupBy = "email",
    alias_resolver: Optional[AliasResolver] = None,
) -> str:
    """Grouping key for a commit: preferred field, falling back to the other."""
    name = commit.author_name or ""
    email = commit.author_email or ""
    value = (email or name) if group_by == "email" else (name or email)
    key = normalize_name(value)
    if alias_resolver is not None:
        return alias_resolver(key, name, email)
    return key


def display_details(
    key: str,
    default_name: str,
    default_email: str,
    canonical_details: Optional[Mapping[str, CanonicalDetails]] = None,
) -> tuple[str, str]:
    """Display name/email for a new identity, honouring canonical overrides."""
    info = canonical_details.get(key) if canonical_details else None
    if info is None:
        return default_name, default_email
    return info.name or default_name, info.email or default_email


def aggregate_commits(
    commits: Iterable[Any],
    group_by: GroupBy = "email",
    alias_resolver: Optional[AliasResolver] = None,
    canonical_details: Optional[Mapping[str, CanonicalDetails]] = None,
) -> Aggregation:
    """Aggregate commits into accumulators keyed by canonical identity.

    Accepts ``Commit`` objects or log-reader mappings. Malformed commits are
    counted under whatever key their (possibly empty) author fields produce.
    """
    result = Aggregation()

    for raw in commits:
        commit = coerce_commit(raw)
        result.total_commits += 1
        key = normalize_key(commit, group_by, alias_resolver)

        acc = result.contributors.get(key)
        if acc is None:
            name, email = display_details(
                key, commit.author_name, commit.author_email, canonical_details
            )
            acc = ContributorAccumulator(key=key, name=name, email=email)
            if email:
                acc.emails.add(email.lower())
            result.contributors[key] = acc

        acc.commits += 1
        if commit.author_email:
            acc.emails.add(commit.author_email.lower())
        acc.record_date(commit.date)

        for change in commit.files:
            acc.record_file(change)
            result.file_contributors[change.filename].add(key)

        if commit.date is None:
            result.undated_commits += 1
            continue
        result.temporal.record(commit.date)
        result.slot_contributors[heatmap_slot(commit.date)][key] += 1

    if result.undated_commits:
        logger.debug(f"{result.undated_commits} commits without a date skipped in time buckets")
    logger.debug(
        f"Aggregated {result.total_commits} commits into {len(result.contributors)} identities"
    )
    return result
