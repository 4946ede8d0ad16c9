"""Change records and the DocumentComparison result.

A comparison produces a tree of ``Change`` records.  ``Change`` is a closed
union of four frozen dataclasses; consumers dispatch on it with ``match``::

    for change in result.changes:
        match change:
            case PropertyAdded(right_pointer=pointer):
                print("added", pointer)
            case PropertyDeleted(left_pointer=pointer):
                print("deleted", pointer)
            case PropertyChanged(left_pointer=pointer, right_value=value):
                print("changed", pointer, "->", value)
            case ArrayChanged() as array:
                print("array", array.left_pointer, len(array.added_items))

Every record is immutable; ``to_dict`` renders a plain JSON-compatible
structure for reports and logs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias

__all__ = [
    "ArrayChanged",
    "ArrayItem",
    "ArraySubElement",
    "Change",
    "DocumentComparison",
    "PropertyAdded",
    "PropertyChanged",
    "PropertyDeleted",
    "change_to_dict",
]


@dataclass(frozen=True, slots=True)
class PropertyAdded:
    """An object member present only on the right."""

    right_pointer: str
    right_parent_pointer: str
    left_parent_pointer: str
    value: Any


@dataclass(frozen=True, slots=True)
class PropertyDeleted:
    """An object member present only on the left."""

    left_pointer: str
    left_parent_pointer: str
    right_parent_pointer: str
    value: Any


@dataclass(frozen=True, slots=True)
class PropertyChanged:
    """Two primitives at corresponding positions that differ."""

    left_pointer: str
    left_value: Any
    right_pointer: str
    right_value: Any


@dataclass(frozen=True, slots=True)
class ArrayItem:
    """An array element that was removed (left side) or added (right side)."""

    pointer: str
    value: Any


@dataclass(frozen=True, slots=True)
class ArraySubElement:
    """A matched pair of array elements and the changes between them.

    Attributes:
        left_pointer:  Pointer of the left element.
        right_pointer: Pointer of the right element.
        changes:       Changes nested inside the pair (may be empty).
        score:         Change score of the pair.
    """

    left_pointer: str
    right_pointer: str
    changes: tuple[Change, ...]
    score: int


@dataclass(frozen=True, slots=True)
class ArrayChanged:
    """Element-level differences between two arrays.

    Attributes:
        left_pointer:        Pointer of the left array.
        right_pointer:       Pointer of the right array.
        added_items:         Right elements with no left partner.
        removed_items:       Left elements with no right partner.
        sub_changes:         Matched pairs whose nested changes are non-empty.
        out_of_tree_changes: Pairs reconciled across sibling arrays.
        matched_pairs:       Every matched ``(left_pointer, right_pointer)``,
            including pairs without changes.
        match_property:      Property the elements were matched on, if any.
        match_method:        Strategy that produced the matching.
    """

    left_pointer: str
    right_pointer: str
    added_items: tuple[ArrayItem, ...]
    removed_items: tuple[ArrayItem, ...]
    sub_changes: tuple[ArraySubElement, ...]
    out_of_tree_changes: tuple[ArraySubElement, ...] = ()
    matched_pairs: tuple[tuple[str, str], ...] = ()
    match_property: str | None = None
    match_method: str | None = None

    @property
    def has_changes(self) -> bool:
        """True if any element was added, removed or changed."""
        return bool(
            self.added_items
            or self.removed_items
            or self.sub_changes
            or self.out_of_tree_changes
        )


Change: TypeAlias = PropertyAdded | PropertyDeleted | PropertyChanged | ArrayChanged


@dataclass(frozen=True, slots=True)
class DocumentComparison:
    """Result of comparing two documents.

    Attributes:
        left_label:  Caller-supplied name of the left document.
        right_label: Caller-supplied name of the right document.
        changes:     Top-level changes in document order.
        score:       Total change score; 0 means the documents are equivalent.
    """

    left_label: str
    right_label: str
    changes: tuple[Change, ...]
    score: int

    @property
    def has_changes(self) -> bool:
        """True if the comparison found any difference."""
        return bool(self.changes)

    def to_dict(self) -> dict[str, Any]:
        """Render the comparison as JSON-compatible dicts and lists."""
        return {
            "leftDocument": self.left_label,
            "rightDocument": self.right_label,
            "score": self.score,
            "changes": [change_to_dict(change) for change in self.changes],
        }


def _sub_element_to_dict(element: ArraySubElement) -> dict[str, Any]:
    return {
        "leftPointer": element.left_pointer,
        "rightPointer": element.right_pointer,
        "score": element.score,
        "changes": [change_to_dict(change) for change in element.changes],
    }


def change_to_dict(change: Change) -> dict[str, Any]:
    """Render one change record, tagged with its ``type``."""
    match change:
        case PropertyAdded():
            return {
                "type": "property_added",
                "rightPointer": change.right_pointer,
                "rightParentPointer": change.right_parent_pointer,
                "leftParentPointer": change.left_parent_pointer,
                "value": change.value,
            }
        case PropertyDeleted():
            return {
                "type": "property_deleted",
                "leftPointer": change.left_pointer,
                "leftParentPointer": change.left_parent_pointer,
                "rightParentPointer": change.right_parent_pointer,
                "value": change.value,
            }
        case PropertyChanged():
            return {
                "type": "property_changed",
                "leftPointer": change.left_pointer,
                "leftValue": change.left_value,
                "rightPointer": change.right_pointer,
                "rightValue": change.right_value,
            }
        case ArrayChanged():
            rendered: dict[str, Any] = {
                "type": "array_changed",
                "leftPointer": change.left_pointer,
                "rightPointer": change.right_pointer,
                "addedItems": [
                    {"rightPointer": item.pointer, "rightElement": item.value}
                    for item in change.added_items
                ],
                "removedItems": [
                    {"leftPointer": item.pointer, "leftElement": item.value}
                    for item in change.removed_items
                ],
                "changed": [_sub_element_to_dict(sub) for sub in change.sub_changes],
            }
            if change.out_of_tree_changes:
                rendered["outOfTreeChanges"] = [
                    _sub_element_to_dict(sub) for sub in change.out_of_tree_changes
                ]
            if change.match_property is not None:
                rendered["matchProperty"] = change.match_property
            if change.match_method is not None:
                rendered["matchMethod"] = change.match_method
            return rendered
    msg = f"Unknown change type: {type(change)!r}"
    raise TypeError(msg)
