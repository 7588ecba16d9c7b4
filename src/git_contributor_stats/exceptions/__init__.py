"""Exception hierarchy for git-contributor-stats."""

from .base import ContributorStatsError
from .config import ConfigurationError, InvalidConfigError

__all__ = [
    "ContributorStatsError",
    "ConfigurationError",
    "InvalidConfigError",
]
