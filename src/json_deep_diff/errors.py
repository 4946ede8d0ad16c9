"""Exception hierarchy for json-deep-diff.

Every error raised by the comparison core derives from ``DiffError`` and
also from the closest built-in exception, so callers can catch either the
package base class or the familiar standard type::

    try:
        compare(left, right)
    except TypeMismatchError as exc:     # also a TypeError
        print(exc.left_pointer, exc.right_pointer)

None of these errors are recovered inside the package: a comparison either
runs to completion or raises.
"""

from __future__ import annotations

__all__ = [
    "ConfigParseError",
    "DiffError",
    "PathResolutionError",
    "TypeMismatchError",
    "UnsolvableError",
]


class DiffError(Exception):
    """Base class for all json-deep-diff errors."""


class TypeMismatchError(DiffError, TypeError):
    """Left and right values at the same position have different shapes.

    Attributes:
        left_pointer:  Pointer of the left value.
        right_pointer: Pointer of the right value.
        left_kind:     Shape of the left value ("object", "array", "primitive").
        right_kind:    Shape of the right value.
    """

    def __init__(
        self,
        left_pointer: str,
        right_pointer: str,
        left_kind: str,
        right_kind: str,
    ) -> None:
        self.left_pointer = left_pointer
        self.right_pointer = right_pointer
        self.left_kind = left_kind
        self.right_kind = right_kind
        super().__init__(
            f"Cannot compare {left_kind} at {left_pointer!r} "
            f"with {right_kind} at {right_pointer!r}"
        )


class PathResolutionError(DiffError, LookupError):
    """A pointer could not be resolved against a document.

    Attributes:
        pointer: Pointer of the node navigation started from (or the invalid
            pointer itself for malformed pointers).
        segment: The segment that failed to resolve, if any.
    """

    def __init__(self, message: str, pointer: str, segment: str | None = None) -> None:
        self.pointer = pointer
        self.segment = segment
        super().__init__(message)


class UnsolvableError(DiffError, ArithmeticError):
    """The assignment solver cannot produce a valid assignment."""


class ConfigParseError(DiffError, ValueError):
    """Comparator configuration is malformed.

    Attributes:
        key: Dotted path of the offending configuration key, e.g.
            ``"constraints./items.matchers[0].type"``.
    """

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(f"Config field '{key}' {message}")
