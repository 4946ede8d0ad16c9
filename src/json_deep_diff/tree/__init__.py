"""Tree subpackage: pointer-aware views over JSON documents.

Re-exports the public API for the tree module:
- TrackedElement: read-only view of a node with its pointer and shape
- NodeKind: StrEnum of the three shapes (OBJECT, ARRAY, PRIMITIVE)
- track: wraps a raw value as a TrackedElement
- test_pointer_condition: pointer pattern matching (``#`` and ``*`` tokens)
"""

from json_deep_diff.tree.nodes import NodeKind, TrackedElement, kind_of, track
from json_deep_diff.tree.pointers import (
    count_leaves,
    pointer_to_condition,
    test_pointer_condition,
    test_pointer_conditions,
)

__all__ = [
    "NodeKind",
    "TrackedElement",
    "count_leaves",
    "kind_of",
    "pointer_to_condition",
    "test_pointer_condition",
    "test_pointer_conditions",
    "track",
]
