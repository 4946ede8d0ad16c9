"""pytest plugin for json-deep-diff.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

import pytest

from json_deep_diff import (
    ArrayChanged,
    Change,
    ComparatorConfig,
    PropertyAdded,
    PropertyChanged,
    PropertyDeleted,
    compare,
)


def describe_changes(changes: Iterable[Change], indent: str = "  ") -> Iterator[str]:
    """Yield one human-readable line per change, nesting array element changes."""
    for change in changes:
        match change:
            case PropertyAdded():
                yield f"{indent}+ {change.right_pointer}: {change.value!r}"
            case PropertyDeleted():
                yield f"{indent}- {change.left_pointer}: {change.value!r}"
            case PropertyChanged():
                yield (
                    f"{indent}~ {change.left_pointer}: "
                    f"{change.left_value!r} -> {change.right_value!r}"
                )
            case ArrayChanged():
                yield f"{indent}[] {change.left_pointer} -> {change.right_pointer}"
                for item in change.removed_items:
                    yield f"{indent}  - {item.pointer}: {item.value!r}"
                for item in change.added_items:
                    yield f"{indent}  + {item.pointer}: {item.value!r}"
                for sub in (*change.sub_changes, *change.out_of_tree_changes):
                    yield f"{indent}  {sub.left_pointer} <-> {sub.right_pointer}"
                    yield from describe_changes(sub.changes, indent + "    ")


@pytest.fixture(scope="session")
def assert_json_unchanged() -> Any:
    """Fixture that returns a callable JSON structural equality asserter.

    The fixture is session-scoped because the returned callable is stateless
    (delegates to compare() which creates a fresh Comparator per call).

    Usage in tests::

        def test_reordered(assert_json_unchanged):
            assert_json_unchanged([{"id": 1}, {"id": 2}], [{"id": 2}, {"id": 1}])

        def test_changed(assert_json_unchanged):
            with pytest.raises(AssertionError, match=r"score=1"):
                assert_json_unchanged({"name": "x"}, {"name": "y"})

    Returns:
        A callable ``_assert(actual, expected, config=None) -> None`` that
        raises ``AssertionError`` listing every change when the documents
        differ.
    """

    def _assert(
        actual: Any,
        expected: Any,
        config: ComparatorConfig | dict[str, Any] | None = None,
    ) -> None:
        """Assert that two JSON documents have no structural differences.

        Args:
            actual:   The actual JSON value produced by the code under test.
            expected: The expected/reference JSON value.
            config:   Optional ComparatorConfig or configuration mapping.

        Raises:
            AssertionError: When the comparison reports any change, with the
                total score and one line per change.
        """
        result = compare(
            actual, expected, config=config, left_label="actual", right_label="expected"
        )
        if result.has_changes:
            lines = "\n".join(describe_changes(result.changes))
            raise AssertionError(
                f"JSON documents differ: score={result.score}\n{lines}"
            )

    return _assert
