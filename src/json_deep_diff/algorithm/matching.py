"""Array matcher strategies: which left element corresponds to which right one.

Every strategy returns a ``MatchReport`` of indices only.  The comparator
recurses into the matched pairs, scores each candidate report and keeps the
cheapest, so strategies never build change records themselves.

Strategies:

- Greedy scoring (``greedy_match``): each left element, in order, takes the
  unmatched right element with the strictly highest score, provided the
  score is positive and at least the minimum confidence.
- Literal (``match_literal``): greedy on value equality, for primitives.
- Property (``match_by_property``): greedy on one property of two objects,
  compared literally or by string similarity.
- Heuristic (``heuristic_candidates``): one property report per shared
  property of the first elements and per configured method.
- Assignment (``match_hungarian``): Munkres over the pairwise comparator
  scores, minimizing the total change score.
- Fallback (``unmatched``): nothing matches; everything is removed/added.

``candidate_reports`` chooses among them from the settings and the shape of
the arrays.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from json_deep_diff.algorithm.config import (
    ComparatorSettings,
    MatcherKind,
    MatcherSpec,
    MatchMethod,
)
from json_deep_diff.algorithm.munkres import solve, solve_with_unmatched
from json_deep_diff.algorithm.similarity import string_similarity
from json_deep_diff.errors import TypeMismatchError
from json_deep_diff.tree.nodes import NodeKind, kind_of
from json_deep_diff.tree.pointers import count_leaves, property_intersection

__all__ = [
    "MatchReport",
    "PairScorer",
    "candidate_reports",
    "greedy_match",
    "heuristic_candidates",
    "literal_scorer",
    "match_by_property",
    "match_hungarian",
    "match_literal",
    "property_scorer",
    "unmatched",
    "values_equal",
]

logger = logging.getLogger(__name__)

# Scores one (left, right) element pair; higher means more alike.
Scorer = Callable[[Any, Any], float]
# Comparator score (change magnitude) of left[i] against right[j].
PairScorer = Callable[[int, int], float]


@dataclass(frozen=True, slots=True)
class MatchReport:
    """Correspondence between two arrays, by index.

    Attributes:
        matched: ``(left_index, right_index)`` pairs; each index appears at
            most once on its side.
        unmatched_left: Left indices with no partner (removed items).
        unmatched_right: Right indices with no partner (added items).
        match_property: Property the match was keyed on, if any.
        match_method: Name of the strategy that produced the report.
    """

    matched: tuple[tuple[int, int], ...]
    unmatched_left: tuple[int, ...]
    unmatched_right: tuple[int, ...]
    match_property: str | None = None
    match_method: str | None = None


def _report(
    matched: Sequence[tuple[int, int]],
    left_size: int,
    right_size: int,
    match_property: str | None = None,
    match_method: str | None = None,
) -> MatchReport:
    left_taken = {i for i, _ in matched}
    right_taken = {j for _, j in matched}
    return MatchReport(
        matched=tuple(matched),
        unmatched_left=tuple(i for i in range(left_size) if i not in left_taken),
        unmatched_right=tuple(j for j in range(right_size) if j not in right_taken),
        match_property=match_property,
        match_method=match_method,
    )


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


def values_equal(left: Any, right: Any, ignore_case: bool = False) -> bool:
    """Return True if two JSON values are equal.

    Booleans never equal numbers (``True != 1``), at any depth inside
    objects and arrays; with *ignore_case* two strings are compared
    case-insensitively.
    """
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        return left.keys() == right.keys() and all(
            values_equal(left[key], right[key], ignore_case) for key in left
        )
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        return len(left) == len(right) and all(
            values_equal(a, b, ignore_case) for a, b in zip(left, right)
        )
    if isinstance(left, (Mapping, list, tuple)) or isinstance(right, (Mapping, list, tuple)):
        return False
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    if ignore_case and isinstance(left, str) and isinstance(right, str):
        return left.lower() == right.lower()
    return bool(left == right)


def literal_scorer(settings: ComparatorSettings) -> Scorer:
    """Score 1 for equal values, else 0."""

    def score(left: Any, right: Any) -> float:
        return 1.0 if values_equal(left, right, settings.ignore_case) else 0.0

    return score


def property_scorer(
    prop: str, method: MatchMethod, settings: ComparatorSettings
) -> Scorer:
    """Score two objects by the value of *prop*.

    Elements that are not objects, or lack the property, score 0.  With
    SIMILARITY, two string values are scored by the configured string
    method; any other pair of values falls back to literal equality.
    """

    def score(left: Any, right: Any) -> float:
        if not isinstance(left, Mapping) or not isinstance(right, Mapping):
            return 0.0
        if prop not in left or prop not in right:
            return 0.0
        a, b = left[prop], right[prop]
        if method == MatchMethod.SIMILARITY and isinstance(a, str) and isinstance(b, str):
            return string_similarity(a, b, settings.string_method, settings.ignore_case)
        return 1.0 if values_equal(a, b, settings.ignore_case) else 0.0

    return score


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


def greedy_match(
    left: Sequence[Any],
    right: Sequence[Any],
    scorer: Scorer,
    minimum_confidence: float,
    *,
    match_property: str | None = None,
    match_method: str | None = None,
) -> MatchReport:
    """Pair elements greedily by score.

    Left elements are visited in order.  Each takes the still-unmatched
    right element with the strictly highest score (the lowest index wins
    ties, a perfect 1.0 stops the scan), provided that score is positive
    and at least *minimum_confidence*.
    """
    available = list(range(len(right)))
    matched: list[tuple[int, int]] = []

    for i, left_element in enumerate(left):
        best_index = -1
        best_score = 0.0
        for j in available:
            score = scorer(left_element, right[j])
            if score > best_score:
                best_index, best_score = j, score
                if score >= 1.0:
                    break
        if best_index != -1 and best_score >= minimum_confidence:
            available.remove(best_index)
            matched.append((i, best_index))

    return _report(matched, len(left), len(right), match_property, match_method)


def match_literal(
    left: Sequence[Any], right: Sequence[Any], settings: ComparatorSettings
) -> MatchReport:
    """Greedy matching on value equality."""
    return greedy_match(
        left,
        right,
        literal_scorer(settings),
        settings.minimum_confidence,
        match_method=MatchMethod.LITERAL.value,
    )


def match_by_property(
    left: Sequence[Any],
    right: Sequence[Any],
    prop: str,
    method: MatchMethod,
    settings: ComparatorSettings,
) -> MatchReport:
    """Greedy matching on the value of one object property."""
    return greedy_match(
        left,
        right,
        property_scorer(prop, method, settings),
        settings.minimum_confidence,
        match_property=prop,
        match_method=MatchMethod(method).value,
    )


def heuristic_candidates(
    left: Sequence[Any], right: Sequence[Any], settings: ComparatorSettings
) -> list[MatchReport]:
    """One property report per shared property of the first elements x method.

    Properties come in the left element's order, methods in the order of
    ``settings.heuristic_methods``.  Returns an empty list when the first
    elements are not both objects or share no property.
    """
    if not left or not right:
        return []
    if not isinstance(left[0], Mapping) or not isinstance(right[0], Mapping):
        return []
    return [
        match_by_property(left, right, prop, method, settings)
        for prop in property_intersection(left[0], right[0])
        for method in settings.heuristic_methods
    ]


def match_hungarian(
    left: Sequence[Any],
    right: Sequence[Any],
    spec: MatcherSpec,
    pair_score: PairScorer,
) -> MatchReport:
    """Optimal assignment minimizing the total comparator score.

    The cost of pairing ``left[i]`` with ``right[j]`` is ``pair_score(i, j)``.
    Pairs that cannot be compared (different shapes, or a ``pair_score``
    that raises ``TypeMismatchError`` for a shape mismatch further down)
    cost their potential, the sum of both leaf counts, and are never
    accepted even when the solver assigns them.

    After solving, a pair is dropped to unmatched when its cost divided by
    its potential exceeds ``spec.rejection_threshold`` (the ratio is 0 when
    the potential is 0).  With ``spec.allow_unmatched`` the solver may also
    leave an element unmatched at ``rejection_threshold`` times its leaf
    count, so the gate takes part in the optimization.
    """
    if not left or not right:
        return _report((), len(left), len(right), match_method=MatcherKind.HUNGARIAN.value)

    left_leaves = [count_leaves(value) for value in left]
    right_leaves = [count_leaves(value) for value in right]
    left_kinds = [kind_of(value) for value in left]
    right_kinds = [kind_of(value) for value in right]

    incomparable: set[tuple[int, int]] = set()

    def cell(i: int, j: int) -> float:
        if left_kinds[i] is right_kinds[j]:
            try:
                return pair_score(i, j)
            except TypeMismatchError as exc:
                logger.debug("Pair %d -> %d is not comparable: %s", i, j, exc)
        incomparable.add((i, j))
        return float(left_leaves[i] + right_leaves[j])

    cost = [[cell(i, j) for j in range(len(right))] for i in range(len(left))]

    if spec.allow_unmatched:
        threshold = spec.rejection_threshold
        pairs, _, _ = solve_with_unmatched(
            cost,
            [threshold * leaves for leaves in left_leaves],
            [threshold * leaves for leaves in right_leaves],
        )
    else:
        pairs = solve(cost)

    accepted: list[tuple[int, int]] = []
    for i, j in pairs:
        if (i, j) in incomparable:
            continue
        potential = left_leaves[i] + right_leaves[j]
        ratio = cost[i][j] / potential if potential else 0.0
        if ratio > spec.rejection_threshold:
            logger.debug("Rejected assignment %d -> %d (ratio %.3f)", i, j, ratio)
            continue
        accepted.append((i, j))

    return _report(accepted, len(left), len(right), match_method=MatcherKind.HUNGARIAN.value)


def unmatched(left: Sequence[Any], right: Sequence[Any]) -> MatchReport:
    """Report every left element removed and every right element added."""
    return _report((), len(left), len(right), match_method="unmatched")


# ---------------------------------------------------------------------------
# Strategy selection
# ---------------------------------------------------------------------------


def _reports_for_shape(
    left: Sequence[Any],
    right: Sequence[Any],
    settings: ComparatorSettings,
    pointer: str,
) -> list[MatchReport]:
    """Candidates picked from the kinds of the first element of each array."""
    left_kind = kind_of(left[0])
    right_kind = kind_of(right[0])

    if left_kind is NodeKind.PRIMITIVE and right_kind is NodeKind.PRIMITIVE:
        logger.debug("Array %r: literal matching", pointer)
        return [match_literal(left, right, settings)]

    if left_kind is NodeKind.OBJECT and right_kind is NodeKind.OBJECT:
        candidates = heuristic_candidates(left, right, settings)
        if candidates:
            logger.debug(
                "Array %r: %d heuristic candidate(s)", pointer, len(candidates)
            )
            return candidates
        logger.debug("Array %r: no shared properties, leaving unmatched", pointer)
        return [unmatched(left, right)]

    if left_kind is NodeKind.ARRAY and right_kind is NodeKind.ARRAY:
        logger.warning(
            "Array %r: arrays of arrays are not matched; reporting all items "
            "as removed and added",
            pointer,
        )
    else:
        logger.warning(
            "Array %r: mismatched element shapes %s and %s; reporting all "
            "items as removed and added",
            pointer,
            left_kind,
            right_kind,
        )
    return [unmatched(left, right)]


def _reports_for_spec(
    left: Sequence[Any],
    right: Sequence[Any],
    spec: MatcherSpec,
    settings: ComparatorSettings,
    pair_score: PairScorer,
    pointer: str,
) -> list[MatchReport]:
    if spec.kind == MatcherKind.PROPERTY:
        assert spec.property is not None
        return [match_by_property(left, right, spec.property, spec.method, settings)]
    if spec.kind == MatcherKind.HUNGARIAN:
        return [match_hungarian(left, right, spec, pair_score)]
    return _reports_for_shape(left, right, settings, pointer)


def candidate_reports(
    left: Sequence[Any],
    right: Sequence[Any],
    settings: ComparatorSettings,
    pair_score: PairScorer,
    pointer: str = "",
) -> list[MatchReport]:
    """Produce the candidate reports for two non-empty arrays.

    Explicit matchers in *settings* are used when present.  Otherwise, and
    for a configured HEURISTIC matcher, the first element of each array
    decides: primitives match literally, objects try every heuristic
    candidate, anything else (arrays of arrays, mixed shapes) is left
    unmatched.

    The caller scores every candidate and keeps the cheapest; the first
    candidate wins ties.
    """
    if settings.matchers:
        logger.debug(
            "Array %r: %d configured matcher(s)", pointer, len(settings.matchers)
        )
        return [
            report
            for spec in settings.matchers
            for report in _reports_for_spec(
                left, right, spec, settings, pair_score, pointer
            )
        ]
    return _reports_for_shape(left, right, settings, pointer)
