"""Unit tests for TrackedElement, NodeKind and track()."""

from __future__ import annotations

import dataclasses

import pytest

from json_deep_diff.errors import PathResolutionError
from json_deep_diff.tree.nodes import NodeKind, TrackedElement, kind_of, track


class TestKindOf:
    """Classification of raw JSON values."""

    @pytest.mark.parametrize("value", [True, 123, 1.5, "hey there", None])
    def test_primitives(self, value: object) -> None:
        assert kind_of(value) is NodeKind.PRIMITIVE

    @pytest.mark.parametrize("value", [{}, {"a": ""}])
    def test_objects(self, value: object) -> None:
        assert kind_of(value) is NodeKind.OBJECT

    @pytest.mark.parametrize("value", [[], [1, 2, 3]])
    def test_arrays(self, value: object) -> None:
        assert kind_of(value) is NodeKind.ARRAY

    def test_unsupported_type_raises(self) -> None:
        with pytest.raises(TypeError, match="Unsupported JSON value type"):
            kind_of(object())

    def test_node_kind_values(self) -> None:
        assert NodeKind.OBJECT == "object"
        assert NodeKind.ARRAY == "array"
        assert NodeKind.PRIMITIVE == "primitive"


class TestTrack:
    """Wrapping raw values."""

    def test_root_pointer_is_empty(self) -> None:
        element = track({"a": 1})
        assert element.pointer == ""
        assert element.kind is NodeKind.OBJECT

    def test_element_is_frozen(self) -> None:
        element = track([1])
        with pytest.raises(dataclasses.FrozenInstanceError):
            element.pointer = "/x"  # type: ignore[misc]

    def test_raw_is_not_copied(self) -> None:
        doc = {"a": [1, 2]}
        assert track(doc).raw is doc


class TestResolve:
    """Navigating from a tracked element."""

    def test_object_property(self) -> None:
        assert track({"a": "hello"}).resolve("a").raw == "hello"

    def test_array_index(self) -> None:
        element = track(["0th elem", "1st elem", "second elem"]).resolve("1")
        assert element.raw == "1st elem"
        assert element.pointer == "/1"

    def test_nested_path(self) -> None:
        doc = {"a": [{"b": "c"}]}
        element = track(doc).resolve("/a/0/b")
        assert element.raw == "c"
        assert element.pointer == "/a/0/b"
        assert element.kind is NodeKind.PRIMITIVE

    def test_empty_path_is_self(self) -> None:
        element = track({"a": 1})
        assert element.resolve("") is element

    def test_resolve_from_child_keeps_full_pointer(self) -> None:
        child = track({"a": {"b": {"c": 1}}}).resolve("a")
        assert child.resolve("b/c").pointer == "/a/b/c"

    def test_missing_property_raises(self) -> None:
        with pytest.raises(PathResolutionError, match="does not exist") as exc_info:
            track({"a": True}).resolve("b")
        assert exc_info.value.segment == "b"

    def test_out_of_bounds_raises(self) -> None:
        with pytest.raises(PathResolutionError, match="does not exist"):
            track([]).resolve("0")

    def test_invalid_index_raises(self) -> None:
        with pytest.raises(PathResolutionError, match="not a valid index"):
            track([1]).resolve("0.5")

    def test_negative_index_raises(self) -> None:
        with pytest.raises(PathResolutionError, match="not a valid index"):
            track([1]).resolve("-1")

    def test_descending_into_primitive_raises(self) -> None:
        with pytest.raises(PathResolutionError, match="primitive"):
            track(1).resolve("subprop")

    def test_error_is_lookup_error(self) -> None:
        with pytest.raises(LookupError):
            track({}).resolve("missing")


class TestChildren:
    """Immediate children of a tracked element."""

    def test_object_children_in_insertion_order(self) -> None:
        children = track({"b": 1, "a": 2}).children()
        assert [c.pointer for c in children] == ["/b", "/a"]
        assert [c.raw for c in children] == [1, 2]

    def test_array_children_in_index_order(self) -> None:
        children = track({"xs": ["x", {"y": 1}]}).resolve("xs").children()
        assert [c.pointer for c in children] == ["/xs/0", "/xs/1"]
        assert [c.kind for c in children] == [NodeKind.PRIMITIVE, NodeKind.OBJECT]

    def test_primitive_has_no_children(self) -> None:
        assert track("leaf").children() == ()

    def test_children_are_tracked_elements(self) -> None:
        assert all(isinstance(c, TrackedElement) for c in track([1, 2]).children())


class TestMatchesCondition:
    """Condition tests on tracked elements."""

    def test_matches(self) -> None:
        element = track({"controls": [{"id": "a"}]}).resolve("controls/0/id")
        assert element.matches_condition("controls/#/id")
        assert not element.matches_condition("/id")
