"""Unit tests for the string similarity scorers."""

from __future__ import annotations

import pytest

from json_deep_diff.algorithm.config import StringComparisonMethod
from json_deep_diff.algorithm.similarity import (
    cosine_similarity,
    jaro_winkler_similarity,
    string_similarity,
)


class TestJaroWinkler:
    """Character-level similarity with a prefix bonus."""

    def test_identical_strings_score_one(self) -> None:
        assert jaro_winkler_similarity("hi there", "hi there") == 1.0

    def test_disjoint_single_chars_score_zero(self) -> None:
        assert jaro_winkler_similarity("a", "b") == 0.0

    def test_empty_against_non_empty_scores_zero(self) -> None:
        assert jaro_winkler_similarity("a", "") == 0.0
        assert jaro_winkler_similarity("", "a") == 0.0

    def test_both_empty_are_identical(self) -> None:
        assert jaro_winkler_similarity("", "") == 1.0

    def test_same_shape_same_score(self) -> None:
        assert jaro_winkler_similarity("dog", "log") == jaro_winkler_similarity("bog", "fog")

    def test_prefix_weighted_more_heavily(self) -> None:
        assert jaro_winkler_similarity("aaa", "aab") > jaro_winkler_similarity("aaa", "aba")

    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [
            ("MARTHA", "MARHTA", 0.9611),
            ("DWAYNE", "DUANE", 0.84),
        ],
    )
    def test_reference_values(self, a: str, b: str, expected: float) -> None:
        assert jaro_winkler_similarity(a, b) == pytest.approx(expected, abs=1e-3)

    def test_symmetric(self) -> None:
        assert jaro_winkler_similarity("DWAYNE", "DUANE") == pytest.approx(
            jaro_winkler_similarity("DUANE", "DWAYNE")
        )

    @pytest.mark.parametrize(
        ("a", "b"),
        [("abc", "xyz"), ("ac-1", "ac-2"), ("control", "controls"), ("x", "xxxxxxxx")],
    )
    def test_in_unit_range(self, a: str, b: str) -> None:
        assert 0.0 <= jaro_winkler_similarity(a, b) <= 1.0


class TestCosine:
    """Word-frequency cosine similarity."""

    def test_identical_strings_score_one(self) -> None:
        assert cosine_similarity("hi there", "hi there") == 1.0

    def test_disjoint_words_score_zero(self) -> None:
        assert cosine_similarity("a", "b") == 0.0

    def test_empty_scores_zero(self) -> None:
        assert cosine_similarity("a", "") == 0.0

    def test_word_order_does_not_matter(self) -> None:
        assert cosine_similarity("hello world", "world hello") == pytest.approx(1.0)

    def test_letter_order_does_not_matter(self) -> None:
        assert cosine_similarity("aaa", "aab") == cosine_similarity("aaa", "aba")

    def test_partial_overlap(self) -> None:
        assert cosine_similarity("a b", "a c") == pytest.approx(0.5)


class TestStringSimilarity:
    """Dispatch by method and case folding."""

    def test_absolute_is_case_sensitive(self) -> None:
        assert string_similarity("hi there", "Hi there", StringComparisonMethod.ABSOLUTE) == 0.0

    def test_absolute_ignore_case(self) -> None:
        score = string_similarity(
            "hi there", "Hi there", StringComparisonMethod.ABSOLUTE, ignore_case=True
        )
        assert score == 1.0

    def test_absolute_different_strings(self) -> None:
        assert string_similarity("a", "b", StringComparisonMethod.ABSOLUTE, True) == 0.0

    def test_default_method_is_jaro_winkler(self) -> None:
        assert string_similarity("MARTHA", "MARHTA") == jaro_winkler_similarity("MARTHA", "MARHTA")

    def test_plain_string_method_accepted(self) -> None:
        assert string_similarity("a b", "a c", "cosine") == pytest.approx(0.5)  # type: ignore[arg-type]

    def test_ignore_case_applies_to_jaro_winkler(self) -> None:
        assert string_similarity("ABC", "abc", ignore_case=True) == 1.0

    def test_unknown_method_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown string similarity method"):
            string_similarity("a", "b", "unknown")  # type: ignore[arg-type]
