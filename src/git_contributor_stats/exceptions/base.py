"""Base exception for git-contributor-stats.

Commit data never raises: malformed records degrade to empty fields and are
still counted. Errors therefore only come from the setup around a run
(configuration values and config files), and carry the offending setting in
``details`` so callers can report it without parsing the message.
"""

from typing import Any, Dict, Optional


class ContributorStatsError(Exception):
    """Base exception for all git-contributor-stats errors.

    Args:
        message: Human-readable summary
        details: Context such as ``{"key": "top", "value": "0"}``; values are
            stored as strings so the error can be logged or serialized as-is
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = {k: str(v) for k, v in (details or {}).items()}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({context})"
