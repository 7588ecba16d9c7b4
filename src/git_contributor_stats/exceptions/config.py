"""Configuration exceptions: invalid settings and unreadable config sources."""

from typing import Any

from .base import ContributorStatsError


class ConfigurationError(ContributorStatsError):
    """A config file is missing, unreadable or has unknown keys."""


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": value, "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason
