"""Tests for contributor ranking and top stats."""

import pytest

from git_contributor_stats.analytics.ranking import (
    build_top_contributors,
    build_top_stats,
    pick_sort_key,
    sort_contributors,
    to_top_contributor,
)
from git_contributor_stats.models import ContributorAccumulator, ContributorSummary, FileStats


def make_top(name, commits, added, deleted):
    return to_top_contributor(
        ContributorAccumulator(
            key=name.lower(), name=name, commits=commits, added=added, deleted=deleted
        )
    )


@pytest.fixture
def contributors():
    return [
        make_top("Alice", commits=10, added=100, deleted=90),
        make_top("Bob", commits=4, added=300, deleted=10),
        make_top("Carol", commits=7, added=20, deleted=200),
    ]


class TestToTopContributor:
    """Test accumulator flattening."""

    def test_derived_fields(self):
        """Net, changes and top files are derived from the accumulator."""
        acc = ContributorAccumulator(
            key="a",
            name="A",
            commits=3,
            added=10,
            deleted=4,
            files={"x.py": FileStats(3, 2, 1), "y.py": FileStats(11, 8, 3)},
        )
        top = to_top_contributor(acc)

        assert top.net == 6
        assert top.changes == 14
        assert [f.filename for f in top.top_files] == ["y.py", "x.py"]


class TestBuildTopContributors:
    """Test build_top_contributors function."""

    def test_sorted_by_commits(self):
        """Most commits first."""
        accs = {
            "a": ContributorAccumulator(key="a", name="A", commits=1),
            "b": ContributorAccumulator(key="b", name="B", commits=5),
            "c": ContributorAccumulator(key="c", name="C", commits=3),
        }
        assert [c.name for c in build_top_contributors(accs)] == ["B", "C", "A"]

    def test_ties_keep_insertion_order(self):
        """Equal commit counts keep insertion order."""
        accs = {
            "z": ContributorAccumulator(key="z", name="Z", commits=2),
            "a": ContributorAccumulator(key="a", name="A", commits=2),
        }
        assert [c.name for c in build_top_contributors(accs)] == ["Z", "A"]


class TestBuildTopStats:
    """Test build_top_stats function."""

    def test_each_metric(self, contributors):
        """Each slot holds the leader for its metric."""
        stats = build_top_stats(contributors)

        assert stats.by_commits.name == "Alice"
        assert stats.by_additions.name == "Bob"
        assert stats.by_deletions.name == "Carol"
        assert stats.by_net.name == "Bob"
        assert stats.by_changes.name == "Bob"

    def test_by_changes_is_maximum(self, contributors):
        """byChanges carries the largest added plus deleted."""
        stats = build_top_stats(contributors)
        assert stats.by_changes.changes == max(c.added + c.deleted for c in contributors)

    def test_empty_input(self):
        """Every slot is None when there are no contributors."""
        stats = build_top_stats([])
        assert stats.by_commits is None
        assert stats.by_additions is None
        assert stats.by_deletions is None
        assert stats.by_net is None
        assert stats.by_changes is None

    def test_ties_resolve_to_input_order(self):
        """A tie goes to the earlier entry."""
        tied = [make_top("First", 1, 5, 0), make_top("Second", 1, 5, 0)]
        assert build_top_stats(tied).by_additions.name == "First"

    def test_input_not_reordered(self, contributors):
        """The input list is left in its original order."""
        names = [c.name for c in contributors]
        build_top_stats(contributors)
        assert [c.name for c in contributors] == names


class TestPickSortKey:
    """Test pick_sort_key and sort_contributors."""

    @pytest.mark.parametrize("metric", ["additions", "adds", "lines-added", "ADDS"])
    def test_addition_aliases(self, contributors, metric):
        """All addition metric names sort by lines added."""
        assert [c.name for c in sort_contributors(contributors, metric)] == [
            "Bob",
            "Alice",
            "Carol",
        ]

    @pytest.mark.parametrize("metric", ["deletions", "dels", "lines-deleted"])
    def test_deletion_aliases(self, contributors, metric):
        """All deletion metric names sort by lines deleted."""
        assert [c.name for c in sort_contributors(contributors, metric)] == [
            "Carol",
            "Alice",
            "Bob",
        ]

    def test_commits(self, contributors):
        """Sorting by commits puts the most active first."""
        assert [c.name for c in sort_contributors(contributors, "commits")] == [
            "Alice",
            "Carol",
            "Bob",
        ]

    @pytest.mark.parametrize("metric", ["changes", None, "", "unknown"])
    def test_default_is_changes(self, contributors, metric):
        """Unknown or missing metrics sort by changes."""
        assert [c.name for c in sort_contributors(contributors, metric)] == [
            "Bob",
            "Carol",
            "Alice",
        ]

    def test_commits_break_ties(self):
        """Commits break ties on the primary metric."""
        items = [make_top("Few", 1, 10, 0), make_top("Many", 9, 10, 0)]
        assert [c.name for c in sort_contributors(items, "additions")] == ["Many", "Few"]

    def test_changes_break_commit_ties(self):
        """Changes break ties when sorting by commits."""
        items = [make_top("Small", 3, 1, 0), make_top("Big", 3, 50, 0)]
        assert [c.name for c in sort_contributors(items, "commits")] == ["Big", "Small"]

    def test_works_on_summaries(self):
        """The same keys sort ContributorSummary rows."""
        rows = [
            ContributorSummary("a", "A", [], commits=1, additions=1, deletions=9, changes=10),
            ContributorSummary("b", "B", [], commits=1, additions=8, deletions=0, changes=8),
        ]
        key = pick_sort_key("additions")
        assert [r.name for r in sorted(rows, key=key)] == ["B", "A"]
