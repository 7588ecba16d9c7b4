"""Configuration loading and management for git-contributor-stats.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig)
    2. Global config (~/.git-contributor-stats.toml)
    3. Project config (./git-contributor-stats.toml)
    4. Explicit config file
    5. Environment variables (GCS_* prefix)
    6. Keyword overrides

Example:
    >>> config = load_config(group_by="name", similarity_threshold=0.9)
    >>> config.group_by
    'name'
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .identity.similarity import ALGORITHMS

GroupBy = Literal["name", "email"]
Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "GCS_"
CONFIG_FILENAME = "git-contributor-stats.toml"
DEFAULT_ALIAS_FILENAME = ".git-contributor-stats-aliases.json"

SORT_METRICS = frozenset(
    {
        "changes",
        "commits",
        "additions",
        "adds",
        "lines-added",
        "deletions",
        "dels",
        "lines-deleted",
    }
)


@dataclass(frozen=True)
class AnalysisConfig:
    """Knobs for one analysis run.

    Attributes:
        Identity:
            group_by: Identity field commits are grouped on
            label_by: Field shown as the contributor label in summaries
            similarity_threshold: Merge identities scoring at or above this
                (0 disables similarity merging)
            similarity_algorithm: "sequence" or "levenshtein"
            alias_file: JSON alias configuration to load when no alias
                structure is passed in directly

        Ranking:
            sort_by: Metric for the ranked contributor list
            top: Keep only the first N ranked contributors (None = all)

        Output control:
            verbosity: Logging verbosity level
    """

    group_by: GroupBy = "email"
    label_by: GroupBy = "name"
    similarity_threshold: float = 0.85
    similarity_algorithm: str = "sequence"
    alias_file: Optional[str] = None

    sort_by: str = "changes"
    top: Optional[int] = None

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.group_by not in ("name", "email"):
            raise InvalidConfigError("group_by", self.group_by, "expected 'name' or 'email'")
        if self.label_by not in ("name", "email"):
            raise InvalidConfigError("label_by", self.label_by, "expected 'name' or 'email'")

        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise InvalidConfigError(
                "similarity_threshold", self.similarity_threshold, "must be between 0.0 and 1.0"
            )
        if self.similarity_algorithm not in ALGORITHMS:
            raise InvalidConfigError(
                "similarity_algorithm",
                self.similarity_algorithm,
                f"expected one of {', '.join(ALGORITHMS)}",
            )

        if self.sort_by.lower() not in SORT_METRICS:
            raise InvalidConfigError("sort_by", self.sort_by, "unknown sort metric")
        if self.top is not None and self.top < 1:
            raise InvalidConfigError("top", self.top, "must be at least 1")

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet/normal/verbose")


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (``verbose``/``quiet`` booleans are
            translated to ``verbosity``)

    Returns:
        Validated AnalysisConfig instance

    Raises:
        ConfigurationError: If a config file is missing, unreadable or has
            unknown keys
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / f".{CONFIG_FILENAME}"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / CONFIG_FILENAME
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())
    merged.update(_translate_flags(overrides))

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def apply_overrides(config: AnalysisConfig, **overrides) -> AnalysisConfig:
    """Copy of ``config`` with keyword overrides applied and re-validated.

    Raises:
        ConfigurationError: If an override names an unknown setting
        InvalidConfigError: If an overridden value fails validation
    """
    overrides = _translate_flags(overrides)
    if not overrides:
        return config
    try:
        return replace(config, **overrides)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _translate_flags(overrides: dict[str, Any]) -> dict[str, Any]:
    """Map ``verbose``/``quiet`` booleans onto ``verbosity``."""
    result = dict(overrides)
    if result.pop("verbose", False):
        result["verbosity"] = "verbose"
    if result.pop("quiet", False):
        result["verbosity"] = "quiet"
    return result


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from GCS_* environment variables.

    Supported environment variables:
        GCS_GROUP_BY: name/email
        GCS_LABEL_BY: name/email
        GCS_SIMILARITY_THRESHOLD: float
        GCS_SIMILARITY_ALGORITHM: sequence/levenshtein
        GCS_ALIAS_FILE: path
        GCS_SORT_BY: metric name
        GCS_TOP: int
        GCS_VERBOSITY: quiet/normal/verbose
    """
    type_hints = get_type_hints(AnalysisConfig)

    result: dict[str, Any] = {}

    for field_name in AnalysisConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load a TOML file and return the parsed dict.

    Accepts either top-level keys or a ``[contributor-stats]`` table.
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        data = tomllib.load(f)

    section = data.get("contributor-stats")
    if isinstance(section, dict):
        return dict(section)
    return data


def discover_alias_file(repo: Optional[Path] = None) -> Optional[Path]:
    """Default alias file inside ``repo`` (or the cwd), if present."""
    candidate = (repo or Path.cwd()) / DEFAULT_ALIAS_FILENAME
    return candidate if candidate.exists() else None
