"""Data models for contributor analytics.

Pipeline levels:
  Level 1: Input records (commits, file hunks): supplied by a log reader
  Level 2: Accumulators (per-identity running totals): owned by one run
  Level 3: Derived views (top contributors, bus factor, top stats)
  Level 4: Result containers handed to reporting collaborators

Result containers expose ``to_dict()`` with the camelCase keys the report
renderers consume.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

# ── Level 1: Input records ─────────────────────────────────────────


@dataclass
class FileChange:
    """Line deltas for one file within one commit."""

    filename: str
    added: int = 0
    deleted: int = 0


@dataclass
class Commit:
    """An already-parsed commit. ``date`` is None for malformed entries."""

    author_name: str = ""
    author_email: str = ""
    date: Optional[datetime] = None
    files: list[FileChange] = field(default_factory=list)
    hash: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Commit":
        """Build a commit from a log-reader mapping without ever raising.

        Accepts both ``authorName`` and ``author_name`` spellings.
        """
        name = _first_present(data, "authorName", "author_name")
        email = _first_present(data, "authorEmail", "author_email")
        files: list[FileChange] = []
        raw_files = data.get("files")
        if not isinstance(raw_files, (list, tuple)):
            raw_files = []
        for entry in raw_files:
            if isinstance(entry, FileChange):
                files.append(entry)
                continue
            if not isinstance(entry, Mapping):
                continue
            filename = entry.get("filename")
            if not filename:
                continue
            files.append(
                FileChange(
                    filename=str(filename),
                    added=_non_negative_int(entry.get("added")),
                    deleted=_non_negative_int(entry.get("deleted")),
                )
            )
        return cls(
            author_name=str(name) if name else "",
            author_email=str(email) if email else "",
            date=parse_date(data.get("date")),
            files=files,
            hash=str(data.get("hash") or ""),
        )


def coerce_commit(commit: Any) -> Commit:
    """Accept either a Commit or a mapping in the log-reader shape."""
    if isinstance(commit, Commit):
        return commit
    if isinstance(commit, Mapping):
        return Commit.from_dict(commit)
    return Commit()


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a datetime, ISO-8601 string or unix timestamp; None if unusable."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return None


def _non_negative_int(value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(number, 0)


# ── Level 2: Accumulators ──────────────────────────────────────────


@dataclass
class FileStats:
    """Per-file change totals for one contributor."""

    changes: int = 0
    added: int = 0
    deleted: int = 0

    def absorb(self, other: "FileStats") -> None:
        self.changes += other.changes
        self.added += other.added
        self.deleted += other.deleted

    def to_dict(self) -> dict[str, int]:
        return {"changes": self.changes, "added": self.added, "deleted": self.deleted}


@dataclass
class ContributorAccumulator:
    """Running totals for one identity key during a single analysis run.

    ``merged_keys`` lists the other pre-merge keys folded into this one by
    similarity merging, in the order they were absorbed.
    """

    key: str
    name: str = ""
    email: str = ""
    commits: int = 0
    added: int = 0
    deleted: int = 0
    files: dict[str, FileStats] = field(default_factory=dict)
    first_commit_date: Optional[datetime] = None
    last_commit_date: Optional[datetime] = None
    emails: set[str] = field(default_factory=set)
    merged_keys: list[str] = field(default_factory=list)

    def record_file(self, change: FileChange) -> None:
        self.added += change.added
        self.deleted += change.deleted
        stats = self.files.get(change.filename)
        if stats is None:
            stats = self.files[change.filename] = FileStats()
        stats.changes += change.added + change.deleted
        stats.added += change.added
        stats.deleted += change.deleted

    def record_date(self, when: Optional[datetime]) -> None:
        if when is None:
            return
        if self.first_commit_date is None or is_before(when, self.first_commit_date):
            self.first_commit_date = when
        if self.last_commit_date is None or is_before(self.last_commit_date, when):
            self.last_commit_date = when

    def copy(self) -> "ContributorAccumulator":
        return ContributorAccumulator(
            key=self.key,
            name=self.name,
            email=self.email,
            commits=self.commits,
            added=self.added,
            deleted=self.deleted,
            files={
                name: FileStats(s.changes, s.added, s.deleted) for name, s in self.files.items()
            },
            first_commit_date=self.first_commit_date,
            last_commit_date=self.last_commit_date,
            emails=set(self.emails),
            merged_keys=list(self.merged_keys),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "commits": self.commits,
            "added": self.added,
            "deleted": self.deleted,
            "files": {name: stats.to_dict() for name, stats in self.files.items()},
            "firstCommitDate": _iso(self.first_commit_date),
            "lastCommitDate": _iso(self.last_commit_date),
        }


def _comparable(when: datetime) -> datetime:
    # Naive and aware datetimes cannot be compared; treat naive as UTC.
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when


def is_before(a: datetime, b: datetime) -> bool:
    return _comparable(a) < _comparable(b)


def _iso(when: Optional[datetime]) -> Optional[str]:
    return when.isoformat() if when is not None else None


# ── Level 3: Derived views ─────────────────────────────────────────


@dataclass
class TopFileEntry:
    filename: str
    changes: int
    added: int
    deleted: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "filename": self.filename,
            "changes": self.changes,
            "added": self.added,
            "deleted": self.deleted,
        }


@dataclass
class TopContributor:
    """Read-only flattened view of a merged accumulator."""

    key: str
    name: str
    email: str
    commits: int
    added: int
    deleted: int
    net: int
    changes: int
    files: dict[str, FileStats] = field(default_factory=dict)
    top_files: list[TopFileEntry] = field(default_factory=list)
    first_commit_date: Optional[datetime] = None
    last_commit_date: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "commits": self.commits,
            "added": self.added,
            "deleted": self.deleted,
            "net": self.net,
            "changes": self.changes,
            "files": {name: stats.to_dict() for name, stats in self.files.items()},
            "topFiles": [entry.to_dict() for entry in self.top_files],
            "firstCommitDate": _iso(self.first_commit_date),
            "lastCommitDate": _iso(self.last_commit_date),
        }


@dataclass
class BusFactorEntry:
    file: str
    owner: str
    changes: int

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "owner": self.owner, "changes": self.changes}


@dataclass
class BusFactorInfo:
    files_single_owner: list[BusFactorEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"filesSingleOwner": [entry.to_dict() for entry in self.files_single_owner]}


@dataclass
class TopStats:
    """Single best contributor per metric; every slot is None for empty input."""

    by_commits: Optional[TopContributor] = None
    by_additions: Optional[TopContributor] = None
    by_deletions: Optional[TopContributor] = None
    by_net: Optional[TopContributor] = None
    by_changes: Optional[TopContributor] = None

    def to_dict(self) -> dict[str, Any]:
        def dump(entry: Optional[TopContributor]) -> Optional[dict[str, Any]]:
            return entry.to_dict() if entry is not None else None

        return {
            "byCommits": dump(self.by_commits),
            "byAdditions": dump(self.by_additions),
            "byDeletions": dump(self.by_deletions),
            "byNet": dump(self.by_net),
            "byChanges": dump(self.by_changes),
        }


@dataclass
class CommitFrequency:
    monthly: dict[str, int] = field(default_factory=dict)
    weekly: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"monthly": dict(self.monthly), "weekly": dict(self.weekly)}


@dataclass
class ContributorSummary:
    """Row of the basic (per-identity totals only) aggregation."""

    key: str
    name: str
    emails: list[str]
    commits: int
    additions: int
    deletions: int
    changes: int
    first_commit_date: Optional[datetime] = None
    last_commit_date: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "emails": list(self.emails),
            "commits": self.commits,
            "additions": self.additions,
            "deletions": self.deletions,
            "changes": self.changes,
            "firstCommitDate": _iso(self.first_commit_date),
            "lastCommitDate": _iso(self.last_commit_date),
        }


@dataclass
class ContributorsMeta:
    contributors: int = 0
    commits: int = 0
    additions: int = 0
    deletions: int = 0
    first_commit_date: Optional[datetime] = None
    last_commit_date: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "contributors": self.contributors,
            "commits": self.commits,
            "additions": self.additions,
            "deletions": self.deletions,
            "firstCommitDate": _iso(self.first_commit_date),
            "lastCommitDate": _iso(self.last_commit_date),
        }


# ── Level 4: Result containers ─────────────────────────────────────


@dataclass
class AnalysisResult:
    """Everything the analytics pipeline produces for one run."""

    contributors: dict[str, ContributorAccumulator] = field(default_factory=dict)
    top_contributors: list[TopContributor] = field(default_factory=list)
    total_commits: int = 0
    commit_frequency: CommitFrequency = field(default_factory=CommitFrequency)
    heatmap: list[list[int]] = field(default_factory=lambda: [[0] * 24 for _ in range(7)])
    # "<weekday>-<hour>" -> display name -> commits in that slot
    heatmap_contributors: dict[str, dict[str, int]] = field(default_factory=dict)
    bus_factor: BusFactorInfo = field(default_factory=BusFactorInfo)
    top_stats: TopStats = field(default_factory=TopStats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "contributors": {key: acc.to_dict() for key, acc in self.contributors.items()},
            "topContributors": [c.to_dict() for c in self.top_contributors],
            "totalCommits": self.total_commits,
            "commitFrequency": self.commit_frequency.to_dict(),
            "heatmap": [list(row) for row in self.heatmap],
            "heatmapContributors": {
                slot: dict(counts) for slot, counts in self.heatmap_contributors.items()
            },
            "busFactor": self.bus_factor.to_dict(),
            "topStats": self.top_stats.to_dict(),
        }


@dataclass
class BasicSummary:
    meta: ContributorsMeta
    group_by: str
    label_by: str
    contributors: list[ContributorSummary] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "meta": self.meta.to_dict(),
            "groupBy": self.group_by,
            "labelBy": self.label_by,
            "contributors": [c.to_dict() for c in self.contributors],
        }


@dataclass
class ContributorStats:
    """Public API result: pipeline output plus ranking and summary extras."""

    generated_at: datetime
    analysis: AnalysisResult
    top_contributors: list[TopContributor]
    basic: BasicSummary

    @property
    def total_commits(self) -> int:
        return self.analysis.total_commits

    @property
    def contributors(self) -> dict[str, ContributorAccumulator]:
        return self.analysis.contributors

    @property
    def top_stats(self) -> TopStats:
        return self.analysis.top_stats

    @property
    def bus_factor(self) -> BusFactorInfo:
        return self.analysis.bus_factor

    def to_dict(self) -> dict[str, Any]:
        data = self.analysis.to_dict()
        data["topContributors"] = [c.to_dict() for c in self.top_contributors]
        data["meta"] = {"generatedAt": self.generated_at.isoformat()}
        data["basic"] = self.basic.to_dict()
        return data
