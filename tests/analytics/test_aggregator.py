"""Tests for the commit aggregation engine."""

from git_contributor_stats.analytics.aggregator import (
    aggregate_commits,
    display_details,
    normalize_key,
)
from git_contributor_stats.identity.aliases import CanonicalDetails, build_alias_resolver
from git_contributor_stats.models import Commit


class TestNormalizeKey:
    """Test grouping-key selection."""

    def test_group_by_email_prefers_email(self):
        """Grouping by email keys on the email's local part."""
        commit = Commit(author_name="Alice Smith", author_email="asmith@corp.com")
        assert normalize_key(commit, "email") == "asmith"

    def test_group_by_name_prefers_name(self):
        """Grouping by name keys on the normalized name."""
        commit = Commit(author_name="Alice Smith", author_email="asmith@corp.com")
        assert normalize_key(commit, "name") == "alice smith"

    def test_falls_back_to_other_field(self):
        """A missing preferred field falls back to the other one."""
        assert normalize_key(Commit(author_name="Alice"), "email") == "alice"
        assert normalize_key(Commit(author_email="al@x.io"), "name") == "al"

    def test_missing_both_fields(self):
        """No name and no email give the empty key."""
        assert normalize_key(Commit(), "email") == ""

    def test_alias_resolver_applied(self):
        """The resolver rewrites the normalized key."""
        resolve = build_alias_resolver({"map": {"asmith": "alice"}}).resolve
        commit = Commit(author_name="Alice Smith", author_email="asmith@corp.com")
        assert normalize_key(commit, "email", resolve) == "alice"


class TestDisplayDetails:
    """Test display_details function."""

    def test_defaults_without_overrides(self):
        """Without overrides the commit's own name and email are used."""
        assert display_details("alice", "Alice", "a@x.com") == ("Alice", "a@x.com")

    def test_canonical_override(self):
        """Canonical name replaces the display name; missing email keeps the default."""
        details = {"alice": CanonicalDetails(name="Alice Smith", email=None)}
        assert display_details("alice", "alice", "a@x.com", details) == ("Alice Smith", "a@x.com")


class TestAggregateCommits:
    """Test aggregate_commits function."""

    def test_totals_per_identity(self, team_commits):
        """Commits, lines and per-file stats are summed per key."""
        result = aggregate_commits(team_commits, "email")

        assert result.total_commits == 4
        assert set(result.contributors) == {"alice", "bob"}
        alice = result.contributors["alice"]
        assert alice.commits == 2
        assert alice.added == 14
        assert alice.deleted == 3
        assert alice.files["file1.js"].changes == 16
        assert alice.files["README.md"].added == 1

    def test_first_seen_insertion_order(self, team_commits):
        """Contributors appear in first-seen order."""
        result = aggregate_commits(team_commits, "email")
        assert list(result.contributors) == ["alice", "bob"]

    def test_commit_dates_tracked(self, team_commits, at):
        """First and last commit dates are recorded."""
        alice = aggregate_commits(team_commits, "email").contributors["alice"]
        assert alice.first_commit_date == at(2023, 1, 1, 10)
        assert alice.last_commit_date == at(2023, 1, 3, 12)

    def test_out_of_order_dates(self, commit_factory, at):
        """Date range is correct regardless of input order and undated commits."""
        commits = [
            commit_factory("A", "a@x", at(2023, 5, 1)),
            commit_factory("A", "a@x", at(2023, 1, 1)),
            commit_factory("A", "a@x", None),
            commit_factory("A", "a@x", at(2023, 3, 1)),
        ]
        acc = aggregate_commits(commits).contributors["a"]
        assert acc.first_commit_date == at(2023, 1, 1)
        assert acc.last_commit_date == at(2023, 5, 1)

    def test_file_contributor_sets(self, team_commits):
        """Each file maps to the keys that touched it."""
        result = aggregate_commits(team_commits, "email")
        assert result.file_contributors["file1.js"] == {"alice", "bob"}
        assert result.file_contributors["file2.js"] == {"bob"}

    def test_slot_contributors(self, team_commits):
        """Each weekday/hour slot counts commits per key."""
        result = aggregate_commits(team_commits, "email")
        assert result.slot_contributors[(0, 10)] == {"alice": 1}
        assert result.slot_contributors[(1, 11)] == {"bob": 1}
        assert result.slot_contributors[(0, 10)]["bob"] == 0

    def test_commit_without_files_still_counts(self, commit_factory, at):
        """A commit with no files still counts as a commit."""
        result = aggregate_commits([commit_factory("Ann", "ann@x", at(2023, 1, 1))])
        ann = result.contributors["ann"]
        assert ann.commits == 1
        assert ann.added == 0
        assert ann.files == {}

    def test_malformed_commits_do_not_raise(self):
        """Garbage records are counted under the empty key."""
        commits = [{}, {"files": None}, {"authorName": None, "date": "garbage"}, None]
        result = aggregate_commits(commits)
        assert result.total_commits == 4
        assert result.contributors[""].commits == 4
        assert result.undated_commits == 4
        assert result.temporal.total == 0

    def test_accepts_mappings(self, raw_commit_dicts):
        """Log-reader mappings are accepted alongside Commit objects."""
        result = aggregate_commits(raw_commit_dicts, "email")
        assert set(result.contributors) == {"jon", "john"}
        assert result.contributors["jon"].added == 5

    def test_canonical_details_seed_display(self, commit_factory):
        """A new identity takes its display details from the canonical overrides."""
        aliases = build_alias_resolver(
            {
                "groups": [["asmith@corp.com", "alice"]],
                "canonical": {"asmith": {"name": "Alice Smith", "email": "asmith@corp.com"}},
            }
        )
        commits = [commit_factory("alice", "alice@home.net", None, [("x.py", 1, 0)])]
        result = aggregate_commits(commits, "email", aliases.resolve, aliases.canonical_details)

        acc = result.contributors["asmith"]
        assert acc.name == "Alice Smith"
        assert acc.email == "asmith@corp.com"
        assert acc.emails == {"asmith@corp.com", "alice@home.net"}

    def test_alias_merges_identities(self, commit_factory):
        """Aliased commits land on the same accumulator."""
        resolve = build_alias_resolver([["bob@x.com", "robert"]]).resolve
        commits = [
            commit_factory("Bob", "bob@x.com"),
            commit_factory("Robert", "robert@y.org"),
        ]
        result = aggregate_commits(commits, "email", resolve)
        assert list(result.contributors) == ["bob"]
        assert result.contributors["bob"].commits == 2

    def test_runs_are_independent(self, team_commits):
        """Separate runs never share accumulators."""
        first = aggregate_commits(team_commits)
        second = aggregate_commits(team_commits)
        assert first.contributors["alice"] is not second.contributors["alice"]
        assert second.contributors["alice"].commits == 2
