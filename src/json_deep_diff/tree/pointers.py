"""Pointer helpers: condition matching, splitting and leaf counting.

A *pointer* is a slash-delimited path from the document root, e.g.
``/catalog/groups/0/id``; the root pointer is the empty string.

A *condition* (or pattern) is a pointer-like string that selects a set of
pointers.  Two tokens are special when they make up a whole segment:

- ``#`` matches one array index (a run of digits).
- ``*`` matches any single segment.

A condition starting with ``/`` is anchored at the document root.  Any
other condition matches when it lines up with a trailing run of segments of
the pointer, so ``controls/#`` matches ``/catalog/controls/12`` and
``/catalog/controls/12/controls/5`` alike.  The condition ``/`` matches
only the root pointer.

Example::

    test_pointer_condition("/catalog/groups/0/id", "/catalog/groups/#/id")  # True
    test_pointer_condition("/metadata/id", "id")                           # True
    test_pointer_condition("/metadata/uuid", "id")                         # False
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from functools import lru_cache
from typing import Any

from json_deep_diff.errors import PathResolutionError

__all__ = [
    "count_leaves",
    "pointer_to_condition",
    "property_intersection",
    "property_union",
    "split_pointer",
    "test_pointer_condition",
    "test_pointer_conditions",
]


@lru_cache(maxsize=1024)
def _compile_condition(condition: str) -> re.Pattern[str]:
    """Translate a condition into an anchored regular expression."""
    anchored = condition.startswith("/")
    body = condition[1:] if anchored else condition

    parts: list[str] = []
    for token in body.split("/"):
        if token == "#":
            parts.append(r"\d+")
        elif token == "*":
            parts.append(r"[^/]+")
        else:
            parts.append(re.escape(token))

    prefix = "^/" if anchored else "(?:^|/)"
    return re.compile(prefix + "/".join(parts) + "$")


def test_pointer_condition(pointer: str, condition: str) -> bool:
    """Return True if *pointer* is selected by *condition*.

    Raises:
        PathResolutionError: If *pointer* is neither the root pointer nor
            starts with ``/``.
    """
    if pointer and not pointer.startswith("/"):
        raise PathResolutionError(
            f"Invalid pointer {pointer!r}, must start with a '/'", pointer
        )

    if condition == "/":
        return pointer == ""

    return _compile_condition(condition).search(pointer) is not None


# Not a pytest test function despite the name.
test_pointer_condition.__test__ = False  # type: ignore[attr-defined]


def test_pointer_conditions(pointer: str, conditions: Iterable[str]) -> bool:
    """Return True if *pointer* is selected by any of *conditions*."""
    return any(test_pointer_condition(pointer, c) for c in conditions)


test_pointer_conditions.__test__ = False  # type: ignore[attr-defined]


def pointer_to_condition(pointer: str) -> str:
    """Generalize a pointer by replacing every array index with ``#``.

    ``/catalog/groups/3/controls/0`` becomes ``/catalog/groups/#/controls/#``.
    """
    return "/".join("#" if seg.isdigit() else seg for seg in pointer.split("/"))


def split_pointer(pointer: str) -> tuple[str, ...]:
    """Split a pointer into its segments.

    The root pointer ``""`` has no segments.  A single leading ``/`` is
    optional, so relative paths such as ``a/0`` split the same way as
    ``/a/0``.
    """
    if pointer == "":
        return ()
    if pointer.startswith("/"):
        pointer = pointer[1:]
    return tuple(pointer.split("/"))


def count_leaves(value: Any) -> int:
    """Count the primitive values in a JSON value.

    Primitives count as 1; objects and arrays count the sum of their
    members, so empty containers count as 0.  This is the change magnitude
    used when a whole subtree is added or removed.
    """
    if isinstance(value, Mapping):
        return sum(count_leaves(v) for v in value.values())
    if isinstance(value, (list, tuple)):
        return sum(count_leaves(v) for v in value)
    return 1


def property_union(left: Mapping[str, Any], right: Mapping[str, Any]) -> list[str]:
    """Property names of both objects: left order first, then right-only names."""
    return list(dict.fromkeys([*left, *right]))


def property_intersection(
    left: Mapping[str, Any], right: Mapping[str, Any]
) -> list[str]:
    """Property names present in both objects, in left order."""
    return [key for key in left if key in right]
