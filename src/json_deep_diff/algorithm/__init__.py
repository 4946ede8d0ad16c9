"""algorithm subpackage - public API for array matching.

Provides the configuration types, the string similarity scorers, the
Munkres assignment solver and the matcher strategies the comparator picks
from.  Import from this module (not from sub-modules directly) to stay on
the stable public interface.

Example::

    from json_deep_diff.algorithm import DISALLOWED, solve

    solve([[4, 1], [2, DISALLOWED]])  # [(0, 1), (1, 0)]
"""

from __future__ import annotations

from json_deep_diff.algorithm.config import (
    ComparatorConfig,
    ComparatorSettings,
    MatcherKind,
    MatcherSpec,
    MatchMethod,
    SettingsOverride,
    StringComparisonMethod,
)
from json_deep_diff.algorithm.matching import MatchReport, candidate_reports
from json_deep_diff.algorithm.munkres import (
    DISALLOWED,
    augment_with_unmatched,
    solve,
    solve_with_unmatched,
)
from json_deep_diff.algorithm.similarity import (
    cosine_similarity,
    jaro_winkler_similarity,
    string_similarity,
)

__all__ = [
    "DISALLOWED",
    "ComparatorConfig",
    "ComparatorSettings",
    "MatchMethod",
    "MatchReport",
    "MatcherKind",
    "MatcherSpec",
    "SettingsOverride",
    "StringComparisonMethod",
    "augment_with_unmatched",
    "candidate_reports",
    "cosine_similarity",
    "jaro_winkler_similarity",
    "solve",
    "solve_with_unmatched",
    "string_similarity",
]
