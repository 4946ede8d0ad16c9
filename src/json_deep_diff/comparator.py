"""Comparator: recursive structural diff of two JSON documents.

The comparator walks both documents in parallel, depth first:

- Objects are compared member by member over the union of their keys (left
  order first); members on one side only become ``PropertyAdded`` or
  ``PropertyDeleted`` and score their leaf count.
- Primitives score 1 when they differ and produce a ``PropertyChanged``.
- Arrays are reconciled: a matching strategy pairs left and right elements,
  matched pairs are compared recursively and the rest are reported as
  removed or added items.  Of several candidate matchings the one with the
  lowest total score wins.

Settings are resolved per pointer from ``ComparatorConfig`` using the
*right* pointer; ignore patterns are tested against the *left* pointer.

Example::

    comparator = Comparator()
    result = comparator.compare({"a": [1, 2]}, "old", {"a": [2, 3]}, "new")
    result.score  # 2: 1 removed, 3 added
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Any

from json_deep_diff.algorithm.config import ComparatorConfig, ComparatorSettings
from json_deep_diff.algorithm.matching import MatchReport, candidate_reports, values_equal
from json_deep_diff.cache import MemoizationCache
from json_deep_diff.errors import TypeMismatchError
from json_deep_diff.result import (
    ArrayChanged,
    ArrayItem,
    ArraySubElement,
    Change,
    DocumentComparison,
    PropertyAdded,
    PropertyChanged,
    PropertyDeleted,
)
from json_deep_diff.tree.nodes import NodeKind, TrackedElement, track
from json_deep_diff.tree.pointers import (
    count_leaves,
    pointer_to_condition,
    property_union,
    test_pointer_conditions,
)

__all__ = ["Comparator"]

logger = logging.getLogger(__name__)

# (changes, score) of one element pair.
ComparisonOutcome = tuple[tuple[Change, ...], int]


@dataclass(frozen=True, slots=True)
class _ElementMatch:
    """Winning matching of two element lists, with every pair compared."""

    report: MatchReport
    pairs: tuple[ArraySubElement, ...]
    score: int


def _parent_pointer(pointer: str) -> str:
    return pointer.rsplit("/", 1)[0]


class Comparator:
    """Structural diff engine.

    Args:
        config: Settings and overrides to compare with.  Defaults to
            ``ComparatorConfig()``.

    One instance may run any number of comparisons; each ``compare`` call
    starts with an empty memoization cache.
    """

    def __init__(self, config: ComparatorConfig | None = None) -> None:
        self.config = config if config is not None else ComparatorConfig()
        self._settings: dict[str, ComparatorSettings] = {}
        self._cache: MemoizationCache | None = None

    # ------------------------------------------------------------------
    # Public surface
    # ------------------------------------------------------------------

    def compare(
        self,
        left_doc: Any,
        left_label: str,
        right_doc: Any,
        right_label: str,
    ) -> DocumentComparison:
        """Compare two documents.

        Raises:
            TypeMismatchError: If two values at corresponding positions have
                different shapes, e.g. an array on the left and an object on
                the right.
            UnsolvableError: If a configured assignment matcher cannot solve
                its cost matrix.
        """
        self._settings = {}
        self._cache = (
            MemoizationCache(max_size=self.config.cache_size)
            if self.config.memoize
            else None
        )
        logger.debug("Comparing %r against %r", left_label, right_label)

        changes, score = self.compare_elements(track(left_doc), track(right_doc))

        if self._cache is not None:
            logger.debug(
                "Comparison finished: score=%d, cache hits=%d misses=%d",
                score,
                self._cache.hits,
                self._cache.misses,
            )
        return DocumentComparison(
            left_label=left_label,
            right_label=right_label,
            changes=changes,
            score=score,
        )

    def settings_for(self, pointer: str) -> ComparatorSettings:
        """Effective settings at *pointer*, memoized for the current comparison."""
        settings = self._settings.get(pointer)
        if settings is None:
            settings = self._settings[pointer] = self.config.settings_for(pointer)
        return settings

    def compare_elements(
        self, left: TrackedElement, right: TrackedElement
    ) -> ComparisonOutcome:
        """Compare two elements at corresponding positions."""
        settings = self.settings_for(right.pointer)
        if test_pointer_conditions(left.pointer, settings.ignore):
            return (), 0

        if left.kind is not right.kind:
            raise TypeMismatchError(
                left.pointer, right.pointer, left.kind.value, right.kind.value
            )

        if left.kind is NodeKind.OBJECT:
            return self._compare_objects(left, right, settings)
        if left.kind is NodeKind.ARRAY:
            array_change, score = self._compare_arrays(left, right, settings)
            return ((array_change,) if array_change.has_changes else ()), score
        return self._compare_primitives(left, right, settings)

    # ------------------------------------------------------------------
    # Objects and primitives
    # ------------------------------------------------------------------

    def _is_ignored(
        self, left_pointer: str, right_pointer: str, parent: ComparatorSettings
    ) -> bool:
        if test_pointer_conditions(left_pointer, parent.ignore):
            return True
        return test_pointer_conditions(left_pointer, self.settings_for(right_pointer).ignore)

    def _compare_objects(
        self,
        left: TrackedElement,
        right: TrackedElement,
        settings: ComparatorSettings,
    ) -> ComparisonOutcome:
        changes: list[Change] = []
        score = 0

        for key in property_union(left.raw, right.raw):
            left_pointer = f"{left.pointer}/{key}"
            right_pointer = f"{right.pointer}/{key}"
            if self._is_ignored(left_pointer, right_pointer, settings):
                continue

            if key not in left.raw:
                value = right.raw[key]
                changes.append(
                    PropertyAdded(
                        right_pointer=right_pointer,
                        right_parent_pointer=right.pointer,
                        left_parent_pointer=left.pointer,
                        value=value,
                    )
                )
                score += count_leaves(value)
            elif key not in right.raw:
                value = left.raw[key]
                changes.append(
                    PropertyDeleted(
                        left_pointer=left_pointer,
                        left_parent_pointer=left.pointer,
                        right_parent_pointer=right.pointer,
                        value=value,
                    )
                )
                score += count_leaves(value)
            else:
                sub_changes, sub_score = self.compare_elements(
                    track(left.raw[key], left_pointer),
                    track(right.raw[key], right_pointer),
                )
                changes.extend(sub_changes)
                score += sub_score

        return tuple(changes), score

    def _compare_primitives(
        self,
        left: TrackedElement,
        right: TrackedElement,
        settings: ComparatorSettings,
    ) -> ComparisonOutcome:
        if values_equal(left.raw, right.raw, settings.ignore_case):
            return (), 0
        change = PropertyChanged(
            left_pointer=left.pointer,
            left_value=left.raw,
            right_pointer=right.pointer,
            right_value=right.raw,
        )
        return (change,), 1

    # ------------------------------------------------------------------
    # Arrays
    # ------------------------------------------------------------------

    def _compare_arrays(
        self,
        left: TrackedElement,
        right: TrackedElement,
        settings: ComparatorSettings,
    ) -> tuple[ArrayChanged, int]:
        if self._cache is not None:
            cached = self._cache.get(left.pointer, right.pointer)
            if cached is not None:
                return cached

        result = self._reconcile_arrays(left, right, settings)

        if self._cache is not None:
            self._cache.set(left.pointer, right.pointer, result)
        return result

    def _reconcile_arrays(
        self,
        left: TrackedElement,
        right: TrackedElement,
        settings: ComparatorSettings,
    ) -> tuple[ArrayChanged, int]:
        left_items = left.children()
        right_items = right.children()

        if not left_items or not right_items:
            removed = tuple(ArrayItem(e.pointer, e.raw) for e in left_items)
            added = tuple(ArrayItem(e.pointer, e.raw) for e in right_items)
            score = sum(count_leaves(e.raw) for e in (*left_items, *right_items))
            change = ArrayChanged(
                left_pointer=left.pointer,
                right_pointer=right.pointer,
                added_items=added,
                removed_items=removed,
                sub_changes=(),
            )
            return change, score

        match = self._match_elements(left_items, right_items, settings, right.pointer)
        pairs = list(match.pairs)
        out_of_tree: list[ArraySubElement] = []
        score = match.score

        if settings.out_of_tree:
            pairs, out_of_tree, delta = self._compare_out_of_tree(pairs)
            score += delta

        change = ArrayChanged(
            left_pointer=left.pointer,
            right_pointer=right.pointer,
            added_items=tuple(
                ArrayItem(right_items[j].pointer, right_items[j].raw)
                for j in match.report.unmatched_right
            ),
            removed_items=tuple(
                ArrayItem(left_items[i].pointer, left_items[i].raw)
                for i in match.report.unmatched_left
            ),
            sub_changes=tuple(pair for pair in pairs if pair.changes),
            out_of_tree_changes=tuple(out_of_tree),
            matched_pairs=tuple((pair.left_pointer, pair.right_pointer) for pair in pairs),
            match_property=match.report.match_property,
            match_method=match.report.match_method,
        )
        return change, score

    def _match_elements(
        self,
        left_items: Sequence[TrackedElement],
        right_items: Sequence[TrackedElement],
        settings: ComparatorSettings,
        pointer: str,
    ) -> _ElementMatch:
        """Run the candidate strategies and keep the lowest-scoring matching.

        A candidate that pairs two elements whose shapes differ somewhere
        below the array is disqualified.  The ``TypeMismatchError`` is only
        raised when every candidate is disqualified.
        """
        outcomes: dict[tuple[int, int], ComparisonOutcome] = {}
        failures: dict[tuple[int, int], TypeMismatchError] = {}

        def compare_pair(i: int, j: int) -> ComparisonOutcome:
            if (i, j) in failures:
                raise failures[i, j]
            outcome = outcomes.get((i, j))
            if outcome is None:
                try:
                    outcome = self.compare_elements(left_items[i], right_items[j])
                except TypeMismatchError as exc:
                    failures[i, j] = exc
                    raise
                outcomes[i, j] = outcome
            return outcome

        left_raw = [e.raw for e in left_items]
        right_raw = [e.raw for e in right_items]
        candidates = candidate_reports(
            left_raw,
            right_raw,
            settings,
            lambda i, j: float(compare_pair(i, j)[1]),
            pointer,
        )

        best: MatchReport | None = None
        best_score = 0
        first_failure: TypeMismatchError | None = None
        for report in candidates:
            try:
                matched_score = sum(compare_pair(i, j)[1] for i, j in report.matched)
            except TypeMismatchError as exc:
                logger.debug(
                    "Array %r: discarding %s candidate: %s", pointer, report.match_method, exc
                )
                if first_failure is None:
                    first_failure = exc
                continue
            score = (
                matched_score
                + sum(count_leaves(left_raw[i]) for i in report.unmatched_left)
                + sum(count_leaves(right_raw[j]) for j in report.unmatched_right)
            )
            if best is None or score < best_score:
                best, best_score = report, score

        if best is None:
            assert first_failure is not None
            raise first_failure
        pairs = tuple(
            ArraySubElement(
                left_pointer=left_items[i].pointer,
                right_pointer=right_items[j].pointer,
                changes=compare_pair(i, j)[0],
                score=compare_pair(i, j)[1],
            )
            for i, j in best.matched
        )
        logger.debug(
            "Array %r: matched %d pair(s) by %s (score %d)",
            pointer,
            len(pairs),
            best.match_method,
            best_score,
        )
        return _ElementMatch(report=best, pairs=pairs, score=best_score)

    def _compare_out_of_tree(
        self, pairs: list[ArraySubElement]
    ) -> tuple[list[ArraySubElement], list[ArraySubElement], int]:
        """Reconcile items removed from and added to sibling nested arrays.

        Removed and added items found in the nested array changes of
        *pairs* are grouped by their generalized pointer.  Groups present on
        both sides are matched with the usual strategy selection; matched
        items are taken out of the nested changes.

        Returns:
            ``(pairs, out_of_tree_matches, score_delta)`` where *pairs* has
            the matched items removed from its nested changes.
        """
        left_groups: dict[str, list[TrackedElement]] = {}
        right_groups: dict[str, list[TrackedElement]] = {}
        for pair in pairs:
            for change in pair.changes:
                if not isinstance(change, ArrayChanged):
                    continue
                for item in change.removed_items:
                    left_groups.setdefault(pointer_to_condition(item.pointer), []).append(
                        track(item.value, item.pointer)
                    )
                for item in change.added_items:
                    right_groups.setdefault(pointer_to_condition(item.pointer), []).append(
                        track(item.value, item.pointer)
                    )

        matches: list[ArraySubElement] = []
        delta = 0
        for condition, left_items in left_groups.items():
            right_items = right_groups.get(condition)
            if not right_items:
                continue
            settings = self.settings_for(_parent_pointer(right_items[0].pointer))
            match = self._match_elements(left_items, right_items, settings, condition)
            matches.extend(match.pairs)
            delta += sum(pair.score for pair in match.pairs)

        if not matches:
            return pairs, [], 0

        logger.debug("Out-of-tree matching paired %d item(s)", len(matches))
        left_taken = {pair.left_pointer for pair in matches}
        right_taken = {pair.right_pointer for pair in matches}

        ablated: list[ArraySubElement] = []
        for pair in pairs:
            changes: list[Change] = []
            removed_score = 0
            for change in pair.changes:
                if isinstance(change, ArrayChanged):
                    removed_score += sum(
                        count_leaves(item.value)
                        for item in change.removed_items
                        if item.pointer in left_taken
                    )
                    removed_score += sum(
                        count_leaves(item.value)
                        for item in change.added_items
                        if item.pointer in right_taken
                    )
                    change = replace(
                        change,
                        removed_items=tuple(
                            item for item in change.removed_items if item.pointer not in left_taken
                        ),
                        added_items=tuple(
                            item for item in change.added_items if item.pointer not in right_taken
                        ),
                    )
                    if not change.has_changes:
                        continue
                changes.append(change)
            delta -= removed_score
            ablated.append(
                replace(pair, changes=tuple(changes), score=pair.score - removed_score)
            )

        return ablated, matches, delta
