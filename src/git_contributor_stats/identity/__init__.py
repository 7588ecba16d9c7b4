"""Identity resolution: normalization, similarity and alias rules."""

from .aliases import AliasResolution, AliasRules, build_alias_resolver, load_alias_file
from .normalizer import normalize_name
from .similarity import levenshtein_distance, similarity_score

__all__ = [
    "AliasResolution",
    "AliasRules",
    "build_alias_resolver",
    "load_alias_file",
    "normalize_name",
    "levenshtein_distance",
    "similarity_score",
]
