"""
git-contributor-stats - contributor analytics for a repository's history

Turns parsed commit records into per-contributor statistics: commit and line
totals, file ownership, activity over time, single-owner ("bus factor")
files and top-contributor rankings.
"""

__version__ = "0.1.0"

from .analytics import analyze
from .api import get_contributor_stats
from .config import AnalysisConfig, load_config
from .identity import build_alias_resolver, normalize_name, similarity_score
from .models import AnalysisResult, Commit, ContributorStats, FileChange

__all__ = [
    "get_contributor_stats",  # Main entry point
    "analyze",  # Pipeline only (no config discovery)
    "AnalysisConfig",
    "AnalysisResult",
    "Commit",
    "ContributorStats",
    "FileChange",
    "build_alias_resolver",
    "load_config",
    "normalize_name",
    "similarity_score",
]
