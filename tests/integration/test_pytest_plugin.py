"""Integration tests for the json-deep-diff pytest plugin.

These tests verify that the assert_json_unchanged fixture is auto-discovered
via the pytest11 entry point and behaves correctly.

NOTE: These tests require json-deep-diff to be installed (even in editable mode
via ``pip install -e .``). The pytest11 entry point is only registered at
install time -- running from a raw source checkout without installing will not
discover the fixture.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Any

import pytest

from json_deep_diff import ComparatorConfig, ComparatorSettings, compare
from json_deep_diff.integrations._pytest_plugin import describe_changes


def test_fixture_passes_reordered_docs(assert_json_unchanged: Any) -> None:
    """Reordered array elements are not changes."""
    assert_json_unchanged(
        {"items": [{"id": 1}, {"id": 2}]},
        {"items": [{"id": 2}, {"id": 1}]},
    )


def test_fixture_fails_changed_value(assert_json_unchanged: Any) -> None:
    """A changed primitive should raise AssertionError with the score."""
    with pytest.raises(AssertionError, match=r"score=1"):
        assert_json_unchanged({"name": "x"}, {"name": "y"})


def test_fixture_custom_config(assert_json_unchanged: Any) -> None:
    """Custom ComparatorConfig parameter should be forwarded to compare()."""
    assert_json_unchanged(
        {"x": "ABC"},
        {"x": "abc"},
        config=ComparatorConfig(base=ComparatorSettings(ignore_case=True)),
    )


def test_fixture_config_mapping(assert_json_unchanged: Any) -> None:
    """A configuration mapping is parsed like compare() parses it."""
    assert_json_unchanged(
        {"id": 1, "v": 2},
        {"id": 9, "v": 2},
        config={"defaults": {"ignore": ["id"]}},
    )


def test_fixture_error_message_contents(assert_json_unchanged: Any) -> None:
    """AssertionError message should list every change."""
    with pytest.raises(AssertionError) as exc_info:
        assert_json_unchanged(
            {"name": "x", "gone": 1, "tags": ["a"]},
            {"name": "y", "new": 2, "tags": ["b"]},
        )

    error_message = str(exc_info.value)
    assert "score=5" in error_message
    assert "~ /name: 'x' -> 'y'" in error_message
    assert "- /gone: 1" in error_message
    assert "+ /new: 2" in error_message
    assert "[] /tags -> /tags" in error_message


def test_fixture_returns_callable(assert_json_unchanged: Any) -> None:
    """The fixture should return a callable, not None or a direct assertion result."""
    assert callable(assert_json_unchanged), (
        "assert_json_unchanged fixture must return a callable, not a direct value"
    )


def test_describe_changes_nests_array_elements() -> None:
    """Matched pairs with changes are listed under their array, indented."""
    result = compare(
        [{"id": 1, "v": "a"}],
        [{"id": 1, "v": "b"}],
    )
    lines = list(describe_changes(result.changes))
    assert lines == [
        "  []  -> ",
        "    /0 <-> /0",
        "      ~ /0/v: 'a' -> 'b'",
    ]


def test_plugin_discovery() -> None:
    """Verify assert_json_unchanged appears in pytest --fixtures output."""
    result = subprocess.run(
        [sys.executable, "-m", "pytest", "--fixtures", "-q"],
        capture_output=True,
        text=True,
        cwd=str(Path(__file__).resolve().parents[2]),
    )
    assert "assert_json_unchanged" in result.stdout, (
        f"assert_json_unchanged not found in pytest --fixtures output.\n"
        f"stdout:\n{result.stdout}\n"
        f"stderr:\n{result.stderr}"
    )
