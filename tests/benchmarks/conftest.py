"""Deterministic document generators for performance benchmarks.

All generators produce fixed, reproducible documents. No random values.
Three tiers: a 10-element array, a 100-element catalog and a 500-element
catalog with nested controls. Each tier provides both a "similar" pair
(a few edits and a reordering) and a "dissimilar" pair (no shared values).

The tiers keep per-array element counts moderate: every array is matched
by trying each shared property of its first elements, and each candidate
compares the pairs it matched.
"""

from __future__ import annotations

from typing import Any

import pytest


def _item(i: int, prefix: str = "item") -> dict[str, Any]:
    return {"id": f"{prefix}-{i}", "title": f"{prefix} title {i}", "rank": i}


def _make_flat(count: int) -> list[dict[str, Any]]:
    return [_item(i) for i in range(count)]


def _make_similar_flat(count: int) -> tuple[list[Any], list[Any]]:
    """Reverse the order and edit every third title."""
    left = _make_flat(count)
    right = [
        {**item, "title": item["title"] + " (edited)"} if i % 3 == 0 else dict(item)
        for i, item in enumerate(left)
    ]
    return left, list(reversed(right))


def _make_catalog(groups: int, controls: int, prefix: str = "ctl") -> dict[str, Any]:
    return {
        "catalog": {
            "uuid": f"{prefix}-catalog",
            "groups": [
                {
                    "id": f"{prefix}-g{g}",
                    "title": f"{prefix} group {g}",
                    "controls": [
                        {
                            "id": f"{prefix}-g{g}-c{c}",
                            "title": f"{prefix} control {g}.{c}",
                            "props": [{"name": "label", "value": f"{g}.{c}"}],
                        }
                        for c in range(controls)
                    ],
                }
                for g in range(groups)
            ],
        }
    }


def _make_similar_catalog(groups: int, controls: int) -> tuple[dict[str, Any], dict[str, Any]]:
    """Same catalog with one control edited per group and the groups reversed."""
    left = _make_catalog(groups, controls)
    right = _make_catalog(groups, controls)
    for group in right["catalog"]["groups"]:
        group["controls"][0]["title"] += " (revised)"
    right["catalog"]["groups"].reverse()
    return left, right


def _make_dissimilar_catalog(
    groups: int, controls: int
) -> tuple[dict[str, Any], dict[str, Any]]:
    return _make_catalog(groups, controls, "left"), _make_catalog(groups, controls, "right")


# --- Fixtures for each size tier ---


@pytest.fixture
def pair_10_similar() -> tuple[list[Any], list[Any]]:
    """10-element array, reordered with edits."""
    return _make_similar_flat(10)


@pytest.fixture
def pair_10_dissimilar() -> tuple[list[Any], list[Any]]:
    """10-element arrays with no shared values."""
    return _make_flat(10), [_item(i, "other") for i in range(10)]


@pytest.fixture
def pair_100_similar() -> tuple[dict[str, Any], dict[str, Any]]:
    """10 groups x 10 controls, reordered with edits."""
    return _make_similar_catalog(10, 10)


@pytest.fixture
def pair_100_dissimilar() -> tuple[dict[str, Any], dict[str, Any]]:
    """10 groups x 10 controls with no shared values."""
    return _make_dissimilar_catalog(10, 10)


@pytest.fixture
def pair_500_similar() -> tuple[dict[str, Any], dict[str, Any]]:
    """20 groups x 25 controls, reordered with edits."""
    return _make_similar_catalog(20, 25)


@pytest.fixture
def pair_500_dissimilar() -> tuple[dict[str, Any], dict[str, Any]]:
    """20 groups x 25 controls with no shared values."""
    return _make_dissimilar_catalog(20, 25)
