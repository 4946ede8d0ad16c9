"""JSON deep diff - structural change reports for JSON documents."""

from __future__ import annotations

import logging

from json_deep_diff.algorithm.config import (
    ComparatorConfig,
    ComparatorSettings,
    MatcherKind,
    MatcherSpec,
    MatchMethod,
    SettingsOverride,
    StringComparisonMethod,
)
from json_deep_diff.api import change_score, compare, has_changes
from json_deep_diff.comparator import Comparator
from json_deep_diff.errors import (
    ConfigParseError,
    DiffError,
    PathResolutionError,
    TypeMismatchError,
    UnsolvableError,
)
from json_deep_diff.result import (
    ArrayChanged,
    ArrayItem,
    ArraySubElement,
    Change,
    DocumentComparison,
    PropertyAdded,
    PropertyChanged,
    PropertyDeleted,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__: str = "0.1.0"
__all__: list[str] = [
    "ArrayChanged",
    "ArrayItem",
    "ArraySubElement",
    "Change",
    "Comparator",
    "ComparatorConfig",
    "ComparatorSettings",
    "ConfigParseError",
    "DiffError",
    "DocumentComparison",
    "MatchMethod",
    "MatcherKind",
    "MatcherSpec",
    "PathResolutionError",
    "PropertyAdded",
    "PropertyChanged",
    "PropertyDeleted",
    "SettingsOverride",
    "StringComparisonMethod",
    "TypeMismatchError",
    "UnsolvableError",
    "change_score",
    "compare",
    "has_changes",
]
