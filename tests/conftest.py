"""Shared test fixtures for git-contributor-stats."""

from datetime import datetime, timezone

import pytest

from git_contributor_stats.models import Commit, FileChange


def make_commit(name, email, date=None, files=()):
    """Create a Commit from (filename, added, deleted) tuples."""
    return Commit(
        author_name=name,
        author_email=email,
        date=date,
        files=[FileChange(filename=f, added=a, deleted=d) for f, a, d in files],
    )


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def team_commits():
    """Alice (2 commits) and Bob (1) overlapping on file1.js."""
    return [
        make_commit(
            "Alice", "alice@example.com", utc(2023, 1, 1, 10), [("file1.js", 10, 2)]
        ),
        make_commit("Bob", "bob@example.com", utc(2023, 1, 2, 11), [("file2.js", 5, 1)]),
        make_commit(
            "Alice",
            "alice@example.com",
            utc(2023, 1, 3, 12),
            [("file1.js", 3, 1), ("README.md", 1, 0)],
        ),
        make_commit("Bob", "bob@example.com", utc(2023, 2, 6, 9), [("file1.js", 4, 4)]),
    ]


@pytest.fixture
def raw_commit_dicts():
    """Commits in the log-reader mapping shape."""
    return [
        {
            "authorName": "Jon",
            "authorEmail": "jon@x.com",
            "date": "2023-03-01T08:30:00Z",
            "files": [{"filename": "a.py", "added": 5, "deleted": 1}],
        },
        {
            "authorName": "John",
            "authorEmail": "john@x.com",
            "date": "2023-03-02T09:00:00Z",
            "files": [{"filename": "b.py", "added": 3, "deleted": 0}],
        },
    ]


@pytest.fixture
def commit_factory():
    """Factory fixture: commit_factory(name, email, date=None, files=())."""
    return make_commit


@pytest.fixture
def at():
    """Factory fixture for UTC datetimes: at(2023, 1, 1, 10)."""
    return utc
