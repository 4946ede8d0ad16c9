"""Public API functions for json-deep-diff.

This module provides the three user-facing functions: compare, has_changes
and change_score.  Each call creates a fresh ``Comparator`` so no state is
shared between calls.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from json_deep_diff.algorithm.config import ComparatorConfig
from json_deep_diff.comparator import Comparator
from json_deep_diff.result import DocumentComparison

__all__ = ["change_score", "compare", "has_changes"]

ConfigLike = ComparatorConfig | Mapping[str, Any] | None


def _resolve_config(config: ConfigLike) -> ComparatorConfig | None:
    if config is None or isinstance(config, ComparatorConfig):
        return config
    return ComparatorConfig.from_dict(config)


def compare(
    left: Any,
    right: Any,
    config: ConfigLike = None,
    *,
    left_label: str = "left",
    right_label: str = "right",
) -> DocumentComparison:
    """Compare two JSON values and return the change report.

    Args:
        left:        First JSON value (dict, list, str, int, float, bool, None).
        right:       Second JSON value.
        config:      A ``ComparatorConfig``, a configuration mapping accepted
                     by ``ComparatorConfig.from_dict``, or None for defaults.
        left_label:  Name recorded for the left document.
        right_label: Name recorded for the right document.

    Returns:
        A ``DocumentComparison`` holding the changes and the total score.

    Raises:
        ConfigParseError: If *config* is a mapping that does not parse.
        TypeMismatchError: If values at corresponding positions have
            different shapes.
    """
    comparator = Comparator(config=_resolve_config(config))
    return comparator.compare(left, left_label, right, right_label)


def has_changes(left: Any, right: Any, config: ConfigLike = None) -> bool:
    """Return True if the two JSON values differ under *config*."""
    return compare(left, right, config=config).has_changes


def change_score(left: Any, right: Any, config: ConfigLike = None) -> int:
    """Return the total change score; 0 means no differences."""
    return compare(left, right, config=config).score
