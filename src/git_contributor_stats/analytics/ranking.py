"""Contributor ranking and per-metric top picks.

Sorting is always stable; contributors tied on every compared field keep
their input order.
"""

from __future__ import annotations

from typing import Callable, Iterable, Mapping, Optional, Sequence, TypeVar

from ..models import ContributorAccumulator, TopContributor, TopFileEntry, TopStats

T = TypeVar("T")

SortKey = Callable[[object], tuple]

_ADDITION_ALIASES = frozenset({"additions", "adds", "lines-added", "added"})
_DELETION_ALIASES = frozenset({"deletions", "dels", "lines-deleted", "deleted"})


def to_top_contributor(acc: ContributorAccumulator) -> TopContributor:
    top_files = [
        TopFileEntry(filename=name, changes=s.changes, added=s.added, deleted=s.deleted)
        for name, s in acc.files.items()
    ]
    top_files.sort(key=lambda entry: entry.changes, reverse=True)
    return TopContributor(
        key=acc.key,
        name=acc.name,
        email=acc.email,
        commits=acc.commits,
        added=acc.added,
        deleted=acc.deleted,
        net=acc.added - acc.deleted,
        changes=acc.added + acc.deleted,
        files=dict(acc.files),
        top_files=top_files,
        first_commit_date=acc.first_commit_date,
        last_commit_date=acc.last_commit_date,
    )


def build_top_contributors(
    contributors: Mapping[str, ContributorAccumulator],
) -> list[TopContributor]:
    """Flatten merged accumulators, most commits first."""
    top = [to_top_contributor(acc) for acc in contributors.values()]
    top.sort(key=lambda c: c.commits, reverse=True)
    return top


def _top_by(items: Sequence[TopContributor], metric: str) -> Optional[TopContributor]:
    if not items:
        return None
    return sorted(items, key=lambda c: getattr(c, metric) or 0, reverse=True)[0]


def build_top_stats(top_contributors: Sequence[TopContributor]) -> TopStats:
    """Best contributor per metric. Ties go to the earlier list entry."""
    return TopStats(
        by_commits=_top_by(top_contributors, "commits"),
        by_additions=_top_by(top_contributors, "added"),
        by_deletions=_top_by(top_contributors, "deleted"),
        by_net=_top_by(top_contributors, "net"),
        by_changes=_top_by(top_contributors, "changes"),
    )


def _field(item: object, *names: str) -> int:
    for name in names:
        value = getattr(item, name, None)
        if value is not None:
            return value
    return 0


def pick_sort_key(by: Optional[str] = None) -> SortKey:
    """Descending sort key for a metric name; unknown names mean "changes".

    Works on both ``TopContributor`` (added/deleted) and
    ``ContributorSummary`` (additions/deletions). The secondary key is
    commits, except when sorting by commits, where it is changes.
    """
    metric = (by or "").lower()
    if metric == "commits":
        return lambda c: (-_field(c, "commits"), -_field(c, "changes"))
    if metric in _ADDITION_ALIASES:
        return lambda c: (-_field(c, "added", "additions"), -_field(c, "commits"))
    if metric in _DELETION_ALIASES:
        return lambda c: (-_field(c, "deleted", "deletions"), -_field(c, "commits"))
    return lambda c: (-_field(c, "changes"), -_field(c, "commits"))


def sort_contributors(items: Iterable[T], by: Optional[str] = None) -> list[T]:
    return sorted(items, key=pick_sort_key(by))
