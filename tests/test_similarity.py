"""Tests for edit-distance similarity and the FuzzyMatcher threshold."""

from __future__ import annotations

import pytest

from trackmatch.core.similarity import FuzzyMatcher, levenshtein_distance, similarity


@pytest.fixture
def matcher() -> FuzzyMatcher:
    return FuzzyMatcher(threshold=85)


# ------------------------------------------------------------------
# levenshtein / similarity
# ------------------------------------------------------------------


class TestLevenshteinDistance:
    def test_classic_example(self):
        assert levenshtein_distance("kitten", "sitting") == 3

    def test_identical(self):
        assert levenshtein_distance("same", "same") == 0

    def test_against_empty(self):
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("abc", "") == 3


class TestSimilarity:
    def test_identical_strings(self):
        assert similarity("around the world", "around the world") == 100.0

    def test_both_empty(self):
        assert similarity("", "") == 100.0

    def test_one_empty(self):
        assert similarity("", "abc") == 0.0
        assert similarity("abc", "") == 0.0

    def test_formula(self):
        assert similarity("kitten", "sitting") == pytest.approx(100 * 4 / 7)

    def test_symmetric(self):
        assert similarity("abcdef", "abcxyz") == similarity("abcxyz", "abcdef")

    @pytest.mark.parametrize(
        "str_a, str_b",
        [
            ("a", "zzzzzzzzzz"),
            ("around the world", "arround the world"),
            ("", "x"),
            ("東京", "tokyo"),
        ],
    )
    def test_bounds(self, str_a: str, str_b: str):
        assert 0.0 <= similarity(str_a, str_b) <= 100.0


# ------------------------------------------------------------------
# FuzzyMatcher
# ------------------------------------------------------------------


class TestFuzzyMatcher:
    def test_default_threshold(self):
        assert FuzzyMatcher().threshold == 85

    def test_one_typo_in_ten_chars_matches(self, matcher: FuzzyMatcher):
        assert matcher.is_match("abcdefghij", "abcdefghix") is True

    def test_three_typos_in_ten_chars_rejected(self, matcher: FuzzyMatcher):
        assert matcher.is_match("abcdefghij", "abcdefgxyz") is False

    def test_exactly_at_threshold_matches(self, matcher: FuzzyMatcher):
        # 3 edits over 20 characters -> 85.0
        assert matcher.is_match("a" * 20, "a" * 17 + "bbb") is True

    def test_passes_any_score(self, matcher: FuzzyMatcher):
        assert matcher.passes(50.0, 90.0) is True
        assert matcher.passes(50.0, 84.9) is False
        assert matcher.passes() is False

    def test_custom_threshold(self):
        loose = FuzzyMatcher(threshold=50)
        assert loose.is_match("abcdef", "abcxyz") is True
