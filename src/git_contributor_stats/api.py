"""Public API for git-contributor-stats.

Callers hand over commits already parsed from the version-control log and
get back ranked contributor statistics.

Example:
    >>> from git_contributor_stats import get_contributor_stats
    >>>
    >>> stats = get_contributor_stats(commits, group_by="name", top=10)
    >>> stats.top_stats.by_commits.name
    'Alice'
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from .analytics.analyzer import analyze
from .analytics.basic import aggregate_basic, compute_meta
from .analytics.ranking import sort_contributors
from .config import AnalysisConfig, apply_overrides, discover_alias_file, load_config
from .identity.aliases import AliasConfig, build_alias_resolver, load_alias_file
from .logging_config import get_logger, setup_logging
from .models import BasicSummary, ContributorStats, coerce_commit

logger = get_logger(__name__)


def get_contributor_stats(
    commits: Iterable[Any],
    config: Optional[AnalysisConfig] = None,
    alias_config: AliasConfig = None,
    config_file: Optional[Path] = None,
    **overrides,
) -> ContributorStats:
    """Compute contributor statistics for a commit sequence.

    Orchestrates:
    1. Load configuration (unless ``config`` is given)
    2. Build alias rules from ``alias_config``, else from the alias file
    3. Run the analytics pipeline
    4. Re-rank and truncate top contributors per ``sort_by``/``top``
    5. Attach the totals-only summary

    Args:
        commits: ``Commit`` objects or log-reader mappings
        config: Ready-made configuration; skips discovery when given,
            but ``overrides`` still apply on top of it
        alias_config: Already-parsed alias configuration
        config_file: Optional explicit TOML config path
        **overrides: Configuration overrides (e.g. group_by="name", top=5)

    Returns:
        ContributorStats

    Raises:
        ConfigurationError: If configuration is invalid
    """
    if overrides.get("verbose") or overrides.get("quiet"):
        setup_logging(verbose=bool(overrides.get("verbose")), quiet=bool(overrides.get("quiet")))

    if config is None:
        config = load_config(config_file=config_file, **overrides)
    else:
        config = apply_overrides(config, **overrides)

    if not alias_config:
        alias_config = _load_aliases(config)
    aliases = build_alias_resolver(alias_config)

    # Both passes below iterate the commits.
    commit_list = [coerce_commit(c) for c in commits]
    logger.debug(f"Analyzing {len(commit_list)} commits (group_by={config.group_by})")

    analysis = analyze(
        commit_list,
        similarity_threshold=config.similarity_threshold,
        alias_resolver=aliases.resolve,
        canonical_details=aliases.canonical_details,
        group_by=config.group_by,
        similarity_algorithm=config.similarity_algorithm,
    )

    top_contributors = analysis.top_contributors
    if config.sort_by.lower() != "commits":
        top_contributors = sort_contributors(top_contributors, config.sort_by)
    if config.top:
        top_contributors = top_contributors[: config.top]

    summaries = sort_contributors(
        aggregate_basic(
            commit_list,
            group_by=config.group_by,
            alias_resolver=aliases.resolve,
            canonical_details=aliases.canonical_details,
            similarity=config.similarity_threshold,
            similarity_algorithm=config.similarity_algorithm,
        ),
        config.sort_by,
    )
    if config.top:
        summaries = summaries[: config.top]

    return ContributorStats(
        generated_at=datetime.now(timezone.utc),
        analysis=analysis,
        top_contributors=top_contributors,
        basic=BasicSummary(
            meta=compute_meta(summaries),
            group_by=config.group_by,
            label_by=config.label_by,
            contributors=summaries,
        ),
    )


def _load_aliases(config: AnalysisConfig) -> AliasConfig:
    if config.alias_file:
        return load_alias_file(config.alias_file)
    default_path = discover_alias_file()
    if default_path is not None:
        logger.debug(f"Using alias file {default_path}")
        return load_alias_file(default_path)
    return None
