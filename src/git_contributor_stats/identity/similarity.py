"""String similarity between identity keys.

The primary score is difflib's Ratcliff/Obershelp ratio (``2*M / T``, a
Dice-style coefficient over matching blocks). If it fails, the score falls
back to a normalized Levenshtein distance. Both return 1.0 for two empty
strings and 0.0 for an empty string against a non-empty one.
"""

from __future__ import annotations

from difflib import SequenceMatcher

from ..logging_config import get_logger

logger = get_logger(__name__)

SEQUENCE = "sequence"
LEVENSHTEIN = "levenshtein"
ALGORITHMS = (SEQUENCE, LEVENSHTEIN)


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance (insert, delete, substitute; unit costs)."""
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i] + [0] * len(b)
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current[j] = min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            )
        previous = current
    return previous[-1]


def levenshtein_similarity(a: str, b: str) -> float:
    longest = max(len(a), len(b), 1)
    return 1.0 - levenshtein_distance(a, b) / longest


def sequence_similarity(a: str, b: str) -> float:
    # SequenceMatcher is not strictly symmetric; fix the argument order.
    first, second = sorted((a, b))
    return SequenceMatcher(None, first, second, autojunk=False).ratio()


def similarity_score(a: str, b: str, algorithm: str = SEQUENCE) -> float:
    """Similarity in [0, 1]; symmetric, and 1.0 for identical strings."""
    if algorithm == LEVENSHTEIN:
        return levenshtein_similarity(a, b)
    try:
        return sequence_similarity(a, b)
    except Exception as e:
        logger.debug(f"Sequence similarity failed for {a!r}/{b!r}, using Levenshtein: {e}")
        return levenshtein_similarity(str(a or ""), str(b or ""))
