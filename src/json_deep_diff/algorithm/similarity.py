"""String similarity scorers, each normalized to [0, 1].

- ``jaro_winkler_similarity``: character-level similarity weighted towards a
  common prefix.  Used as the fuzzy signal when matching array elements by
  a string-valued property.
- ``cosine_similarity``: term-frequency cosine over whitespace-separated
  words; word order does not matter.
- ``string_similarity``: dispatches on ``StringComparisonMethod`` and
  optionally folds case first.

All scorers return exactly 1.0 for identical strings and 0.0 when either
string is empty (and they differ).
"""

from __future__ import annotations

import math
from collections import Counter

from json_deep_diff.algorithm.config import StringComparisonMethod

__all__ = ["cosine_similarity", "jaro_winkler_similarity", "string_similarity"]

# Winkler prefix scale and the longest prefix that earns a bonus.
_PREFIX_SCALE = 0.1
_MAX_PREFIX = 4
# Jaro score above which the prefix bonus is applied.
_BOOST_THRESHOLD = 0.7


def _jaro_similarity(a: str, b: str) -> float:
    """Compute the plain Jaro similarity of two non-empty, different strings."""
    match_range = max(max(len(a), len(b)) // 2 - 1, 0)
    a_matched = [False] * len(a)
    b_matched = [False] * len(b)

    matches = 0
    for i, ch in enumerate(a):
        low = max(0, i - match_range)
        high = min(len(b), i + match_range + 1)
        for j in range(low, high):
            if not b_matched[j] and b[j] == ch:
                a_matched[i] = b_matched[j] = True
                matches += 1
                break

    if matches == 0:
        return 0.0

    # Half the number of matched characters that appear in a different order.
    b_chars = (b[j] for j in range(len(b)) if b_matched[j])
    out_of_order = sum(
        1
        for i, ch in enumerate(a)
        if a_matched[i] and ch != next(b_chars)
    )
    transpositions = out_of_order / 2

    return (
        matches / len(a) + matches / len(b) + (matches - transpositions) / matches
    ) / 3


def jaro_winkler_similarity(a: str, b: str) -> float:
    """Return the Jaro-Winkler similarity of two strings.

    Example::

        jaro_winkler_similarity("hi there", "hi there")  # 1.0
        jaro_winkler_similarity("a", "b")                # 0.0
        jaro_winkler_similarity("aaa", "aab") > jaro_winkler_similarity("aaa", "aba")
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    score = _jaro_similarity(a, b)
    if score <= _BOOST_THRESHOLD:
        return score

    prefix = 0
    for ch_a, ch_b in zip(a[:_MAX_PREFIX], b[:_MAX_PREFIX]):
        if ch_a != ch_b:
            break
        prefix += 1

    return score + prefix * _PREFIX_SCALE * (1.0 - score)


def cosine_similarity(a: str, b: str) -> float:
    """Return the cosine similarity of the word-frequency vectors of two strings."""
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    freq_a = Counter(a.split())
    freq_b = Counter(b.split())
    dot = sum(count * freq_b[word] for word, count in freq_a.items())
    if dot == 0:
        return 0.0

    norm_a = math.sqrt(sum(c * c for c in freq_a.values()))
    norm_b = math.sqrt(sum(c * c for c in freq_b.values()))
    return dot / (norm_a * norm_b)


def string_similarity(
    a: str,
    b: str,
    method: StringComparisonMethod = StringComparisonMethod.JARO_WINKLER,
    ignore_case: bool = False,
) -> float:
    """Score two strings with the selected method.

    Args:
        a:           First string.
        b:           Second string.
        method:      Which scorer to use.
        ignore_case: Lowercase both strings before scoring.

    Returns:
        Float in [0.0, 1.0]; 1.0 means identical.

    Raises:
        ValueError: If *method* is not a ``StringComparisonMethod``.
    """
    if ignore_case:
        a = a.lower()
        b = b.lower()

    if method == StringComparisonMethod.JARO_WINKLER:
        return jaro_winkler_similarity(a, b)
    if method == StringComparisonMethod.COSINE:
        return cosine_similarity(a, b)
    if method == StringComparisonMethod.ABSOLUTE:
        return 1.0 if a == b else 0.0
    msg = f"Unknown string similarity method {method!r}"
    raise ValueError(msg)
