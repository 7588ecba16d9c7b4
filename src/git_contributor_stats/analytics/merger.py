"""Merge accumulators whose identity keys are near-duplicates.

Ordering matters. Keys are visited in insertion order (first-seen order from
aggregation), and each one is compared against the keys already in the
output, also in insertion order. The FIRST output key scoring at or above
the threshold absorbs it; there is no search for the best candidate. So
with keys ``["jon", "jonny", "john"]`` the result can differ from
``["john", "jonny", "jon"]``.
"""

from __future__ import annotations

from typing import Mapping, Optional

from ..identity.similarity import SEQUENCE, similarity_score
from ..logging_config import get_logger
from ..models import ContributorAccumulator, FileStats

logger = get_logger(__name__)


def find_similar_key(
    key: str, existing_keys: list[str], threshold: float, algorithm: str = SEQUENCE
) -> Optional[str]:
    """First key in ``existing_keys`` scoring >= threshold against ``key``."""
    for candidate in existing_keys:
        if similarity_score(key, candidate, algorithm) >= threshold:
            return candidate
    return None


def merge_into(target: ContributorAccumulator, source: ContributorAccumulator) -> None:
    """Fold ``source`` totals, file stats, emails and date range into ``target``."""
    target.commits += source.commits
    target.added += source.added
    target.deleted += source.deleted
    for filename, stats in source.files.items():
        entry = target.files.get(filename)
        if entry is None:
            entry = target.files[filename] = FileStats()
        entry.absorb(stats)
    target.emails.update(source.emails)
    target.record_date(source.first_commit_date)
    target.record_date(source.last_commit_date)
    target.merged_keys.append(source.key)
    target.merged_keys.extend(source.merged_keys)


def merge_similar_contributors(
    accumulators: Mapping[str, ContributorAccumulator],
    threshold: Optional[float],
    algorithm: str = SEQUENCE,
) -> dict[str, ContributorAccumulator]:
    """Collapse near-duplicate identities; inputs are left untouched.

    A threshold of None or <= 0 turns merging off and returns copies.
    """
    if not threshold or threshold <= 0:
        return {key: acc.copy() for key, acc in accumulators.items()}

    merged: dict[str, ContributorAccumulator] = {}
    for key, acc in accumulators.items():
        found = find_similar_key(key, list(merged), threshold, algorithm)
        if found is not None:
            merge_into(merged[found], acc)
        else:
            merged[key] = acc.copy()

    if len(merged) != len(accumulators):
        logger.debug(
            f"Similarity merge (threshold={threshold}): "
            f"{len(accumulators)} -> {len(merged)} identities"
        )
    return merged


def build_key_map(merged: Mapping[str, ContributorAccumulator]) -> dict[str, str]:
    """Map every pre-merge key to the merged key that now owns it."""
    key_map: dict[str, str] = {}
    for key, acc in merged.items():
        key_map[key] = key
        for absorbed in acc.merged_keys:
            key_map.setdefault(absorbed, key)
    return key_map
