"""TrackedElement and NodeKind: pointer-aware read-only views over JSON values.

A ``TrackedElement`` pairs a raw JSON value with the pointer it lives at.
Its ``kind`` is classified once, when the element is wrapped, so the
comparator can dispatch on the tag instead of re-inspecting Python types.
Children are wrapped lazily on navigation; the raw document is never copied
or mutated.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any

from json_deep_diff.errors import PathResolutionError
from json_deep_diff.tree.pointers import split_pointer, test_pointer_condition

__all__ = ["NodeKind", "TrackedElement", "kind_of", "track"]


class NodeKind(StrEnum):
    """Shape of a JSON value.

    - OBJECT    -> "object"    : mapping of string keys to values
    - ARRAY     -> "array"     : ordered sequence of values
    - PRIMITIVE -> "primitive" : string, number, boolean or null
    """

    OBJECT = auto()
    ARRAY = auto()
    PRIMITIVE = auto()


def kind_of(value: Any) -> NodeKind:
    """Classify a raw JSON value.

    Raises:
        TypeError: If *value* is not a JSON value.
    """
    if isinstance(value, Mapping):
        return NodeKind.OBJECT
    if isinstance(value, (list, tuple)):
        return NodeKind.ARRAY
    if value is None or isinstance(value, (str, bool, int, float)):
        return NodeKind.PRIMITIVE
    raise TypeError(f"Unsupported JSON value type: {type(value)!r}")


def track(raw: Any, pointer: str = "") -> TrackedElement:
    """Wrap *raw* as a ``TrackedElement`` located at *pointer*."""
    return TrackedElement(pointer=pointer, raw=raw, kind=kind_of(raw))


@dataclass(frozen=True, slots=True)
class TrackedElement:
    """Read-only view of one node of a document.

    Attributes:
        pointer: Path of this node from the document root ("" for the root).
        raw:     The underlying value; the document owns it.
        kind:    Shape of ``raw``, classified when the view was created.
    """

    pointer: str
    raw: Any
    kind: NodeKind

    def resolve(self, path: str) -> TrackedElement:
        """Navigate *path* (slash-delimited, leading ``/`` optional) from this node.

        Raises:
            PathResolutionError: If an object member is missing, an array
                index is non-numeric or out of bounds, or a segment is
                requested below a primitive.
        """
        node = self
        for segment in split_pointer(path):
            node = node._child(segment)
        return node

    def children(self) -> tuple[TrackedElement, ...]:
        """Immediate children: insertion order for objects, index order for arrays."""
        if self.kind is NodeKind.OBJECT:
            return tuple(
                track(value, f"{self.pointer}/{key}") for key, value in self.raw.items()
            )
        if self.kind is NodeKind.ARRAY:
            return tuple(
                track(value, f"{self.pointer}/{index}")
                for index, value in enumerate(self.raw)
            )
        return ()

    def matches_condition(self, condition: str) -> bool:
        """Return True if this node's pointer is selected by *condition*."""
        return test_pointer_condition(self.pointer, condition)

    def _child(self, segment: str) -> TrackedElement:
        if self.kind is NodeKind.OBJECT:
            if segment not in self.raw:
                raise PathResolutionError(
                    f"Cannot resolve path, property {segment!r} does not exist "
                    f"in object {self.pointer!r}",
                    self.pointer,
                    segment,
                )
            return track(self.raw[segment], f"{self.pointer}/{segment}")

        if self.kind is NodeKind.ARRAY:
            if not segment.isdigit():
                raise PathResolutionError(
                    f"Cannot resolve path, {segment!r} is not a valid index "
                    f"of array {self.pointer!r}",
                    self.pointer,
                    segment,
                )
            index = int(segment)
            if index >= len(self.raw):
                raise PathResolutionError(
                    f"Cannot resolve path, index {index} does not exist "
                    f"in array {self.pointer!r}",
                    self.pointer,
                    segment,
                )
            return track(self.raw[index], f"{self.pointer}/{index}")

        raise PathResolutionError(
            f"Cannot resolve path, {self.pointer!r} is a terminal (primitive) node",
            self.pointer,
            segment,
        )
