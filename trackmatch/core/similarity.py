"""Edit-distance similarity for fuzzy (tier 3) title comparison."""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein

from trackmatch.utils.constants import FUZZY_MATCH_THRESHOLD


def levenshtein_distance(str_a: str, str_b: str) -> int:
    """Number of single-character insertions, deletions and substitutions
    needed to turn ``str_a`` into ``str_b`` (each costs 1)."""
    return Levenshtein.distance(str_a, str_b)


def similarity(str_a: str, str_b: str) -> float:
    """Percentage similarity of two normalized strings (0.0 - 100.0).

    ``100 * (max_len - distance) / max_len``; two empty strings are
    identical (100.0).
    """
    max_length = max(len(str_a), len(str_b))
    if max_length == 0:
        return 100.0
    distance = levenshtein_distance(str_a, str_b)
    return 100.0 * (max_length - distance) / max_length


class FuzzyMatcher:
    """Applies the fuzzy threshold to similarity scores.

    Only ever used on candidates that already share a normalized artist,
    so the quadratic distance computation stays bounded.
    """

    def __init__(self, threshold: float = FUZZY_MATCH_THRESHOLD) -> None:
        """Initialize the fuzzy matcher.

        Args:
            threshold: Minimum score (0-100) for a match to be considered valid.
        """
        self._threshold = threshold

    @property
    def threshold(self) -> float:
        return self._threshold

    def similarity(self, str_a: str, str_b: str) -> float:
        return similarity(str_a, str_b)

    def is_match(self, str_a: str, str_b: str) -> bool:
        """Check if two strings are similar enough to count as a fuzzy match."""
        return self.similarity(str_a, str_b) >= self._threshold

    def passes(self, *scores: float) -> bool:
        """Check whether any of the given scores reaches the threshold."""
        return any(score >= self._threshold for score in scores)
