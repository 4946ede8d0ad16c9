"""Comparator configuration: matcher specs, per-pointer settings and overrides.

All configuration objects are frozen (immutable) dataclasses validated on
construction.  Closed choices are ``StrEnum`` members so they compare equal
to their plain-string spelling.

Settings are resolved per pointer: ``ComparatorConfig.settings_for`` starts
from ``base`` and applies every ``SettingsOverride`` whose pattern selects
the pointer, lowest priority first, so higher priorities win.

Configuration can be built directly or parsed from a mapping (typically
loaded from JSON or YAML by the caller) with ``ComparatorConfig.from_dict``::

    config = ComparatorConfig.from_dict(
        {
            "defaults": {"ignoreCase": True},
            "constraints": {
                "/catalog/groups": {
                    "priority": 1,
                    "matchers": [{"type": "property", "property": "id"}],
                },
                "uuid": {"ignore": ["uuid"]},
            },
        }
    )

Unknown keys are rejected with ``ConfigParseError``.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from enum import StrEnum, auto
from typing import Any

from json_deep_diff.errors import ConfigParseError
from json_deep_diff.tree.pointers import test_pointer_condition

__all__ = [
    "ComparatorConfig",
    "ComparatorSettings",
    "MatchMethod",
    "MatcherKind",
    "MatcherSpec",
    "SettingsOverride",
    "StringComparisonMethod",
]


class StringComparisonMethod(StrEnum):
    """How two strings are scored in similarity matching.

    - ABSOLUTE:     1.0 when equal, else 0.0.
    - JARO_WINKLER: character-level similarity, prefix weighted.
    - COSINE:       word-frequency cosine similarity.
    """

    ABSOLUTE = "absolute"
    JARO_WINKLER = "jaro-winkler"
    COSINE = "cosine"


class MatchMethod(StrEnum):
    """How a property value of two array elements is scored.

    - LITERAL:    1 when the values are equal, else 0.
    - SIMILARITY: string similarity for two strings, literal otherwise.
    """

    LITERAL = auto()
    SIMILARITY = auto()


class MatcherKind(StrEnum):
    """Array matching strategy.

    - PROPERTY:  greedy matching on one named property.
    - HEURISTIC: greedy matching on every shared property x method, keeping
                 the cheapest result.
    - HUNGARIAN: optimal assignment minimizing total change score.
    """

    PROPERTY = auto()
    HEURISTIC = auto()
    HUNGARIAN = auto()


@dataclass(frozen=True, slots=True)
class MatcherSpec:
    """A configured array matching strategy.

    Attributes:
        kind: Which strategy to run.
        property: Property to match on.  Required for PROPERTY.
        method: Scoring method for PROPERTY.
        rejection_threshold: HUNGARIAN only.  Pairs whose change score over
            their total leaf count exceeds this ratio are left unmatched.
        allow_unmatched: HUNGARIAN only.  Let the solver leave an element
            unmatched at rejection_threshold times its leaf count instead
            of forcing a complete pairing.
    """

    kind: MatcherKind
    property: str | None = None
    method: MatchMethod = MatchMethod.LITERAL
    rejection_threshold: float = 0.95
    allow_unmatched: bool = False

    def __post_init__(self) -> None:
        if self.kind == MatcherKind.PROPERTY and not self.property:
            msg = "PROPERTY matchers require a property name"
            raise ValueError(msg)
        if not 0.0 <= self.rejection_threshold <= 1.0:
            msg = f"rejection_threshold must be in [0, 1], got {self.rejection_threshold}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ComparatorSettings:
    """Effective comparison settings at one pointer.

    Attributes:
        ignore: Pointer conditions excluded from comparison and matching.
        ignore_case: Compare strings case-insensitively.
        matchers: Explicit array matching strategies.  When empty the
            default heuristic chooses one from the array contents.
        string_method: Scorer used by SIMILARITY matching.
        minimum_confidence: Lowest score a greedy match may be accepted at.
        out_of_tree: Reconcile items that moved between sibling arrays.
        heuristic_methods: Methods the default heuristic tries for each
            shared property, in order.  Earlier methods win ties.
    """

    ignore: tuple[str, ...] = ()
    ignore_case: bool = False
    matchers: tuple[MatcherSpec, ...] = ()
    string_method: StringComparisonMethod = StringComparisonMethod.JARO_WINKLER
    minimum_confidence: float = 0.7
    out_of_tree: bool = False
    heuristic_methods: tuple[MatchMethod, ...] = (
        MatchMethod.LITERAL,
        MatchMethod.SIMILARITY,
    )

    def __post_init__(self) -> None:
        if not 0.0 <= self.minimum_confidence <= 1.0:
            msg = f"minimum_confidence must be in [0, 1], got {self.minimum_confidence}"
            raise ValueError(msg)
        if not self.heuristic_methods:
            msg = "heuristic_methods must not be empty"
            raise ValueError(msg)


_SETTINGS_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(ComparatorSettings))


@dataclass(frozen=True, slots=True)
class SettingsOverride:
    """Partial settings applied wherever ``pattern`` selects the pointer.

    Fields left as None keep the value they inherit.
    """

    pattern: str
    priority: float = math.inf
    ignore: tuple[str, ...] | None = None
    ignore_case: bool | None = None
    matchers: tuple[MatcherSpec, ...] | None = None
    string_method: StringComparisonMethod | None = None
    minimum_confidence: float | None = None
    out_of_tree: bool | None = None
    heuristic_methods: tuple[MatchMethod, ...] | None = None

    def apply(self, settings: ComparatorSettings) -> ComparatorSettings:
        """Return *settings* with every field this override sets replaced."""
        changes = {
            name: getattr(self, name)
            for name in _SETTINGS_FIELDS
            if getattr(self, name) is not None
        }
        return replace(settings, **changes) if changes else settings


@dataclass(frozen=True, slots=True)
class ComparatorConfig:
    """Top-level comparator configuration.

    Attributes:
        overrides: Pattern-scoped partial settings.
        base: Settings used where no override applies.
        memoize: Cache array match results while a comparison runs.
        cache_size: Maximum number of cached array results.
    """

    overrides: tuple[SettingsOverride, ...] = ()
    base: ComparatorSettings = field(default_factory=ComparatorSettings)
    memoize: bool = True
    cache_size: int = 4096

    def __post_init__(self) -> None:
        if self.cache_size < 1:
            msg = f"cache_size must be >= 1, got {self.cache_size}"
            raise ValueError(msg)

    def settings_for(self, pointer: str) -> ComparatorSettings:
        """Merge every override selecting *pointer* onto the base settings.

        Overrides apply in ascending priority; equal priorities apply in
        declaration order.
        """
        applicable = sorted(
            (o for o in self.overrides if test_pointer_condition(pointer, o.pattern)),
            key=lambda o: o.priority,
        )
        settings = self.base
        for override in applicable:
            settings = override.apply(settings)
        return settings

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ComparatorConfig:
        """Parse a configuration mapping.

        Raises:
            ConfigParseError: On unknown keys, wrongly typed values or values
                rejected by validation.  The error names the offending key.
        """
        _require_mapping(data, "<root>")
        _reject_unknown(data, ("memoize", "cacheSize", "defaults", "constraints"), "")

        kwargs: dict[str, Any] = {}
        if "memoize" in data:
            kwargs["memoize"] = _as_bool(data["memoize"], "memoize")
        if "cacheSize" in data:
            value = data["cacheSize"]
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigParseError("cacheSize", "must be an integer")
            kwargs["cache_size"] = value

        if "defaults" in data:
            defaults = data["defaults"]
            _require_mapping(defaults, "defaults")
            _reject_unknown(defaults, tuple(_SETTINGS_KEYS), "defaults")
            base_fields = _parse_settings_fields(defaults, "defaults")
            kwargs["base"] = _build(ComparatorSettings, base_fields, "defaults")

        if "constraints" in data:
            constraints = data["constraints"]
            _require_mapping(constraints, "constraints")
            kwargs["overrides"] = tuple(
                _parse_override(pattern, raw, f"constraints.{pattern}")
                for pattern, raw in constraints.items()
            )

        return _build(cls, kwargs, "<root>")


# ---------------------------------------------------------------------------
# Mapping parsing helpers
# ---------------------------------------------------------------------------

# camelCase config key -> ComparatorSettings field
_SETTINGS_KEYS: dict[str, str] = {
    "ignore": "ignore",
    "ignoreCase": "ignore_case",
    "matchers": "matchers",
    "stringComparisonMethod": "string_method",
    "minimumConfidence": "minimum_confidence",
    "outOfTree": "out_of_tree",
    "heuristicMethods": "heuristic_methods",
}

_MATCHER_KEYS: tuple[str, ...] = (
    "type",
    "property",
    "method",
    "rejectionThreshold",
    "allowUnmatched",
)


def _join(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _require_mapping(value: Any, path: str) -> None:
    if not isinstance(value, Mapping):
        raise ConfigParseError(path, "must be a table/object")


def _reject_unknown(data: Mapping[str, Any], allowed: tuple[str, ...], path: str) -> None:
    for key in data:
        if key not in allowed:
            raise ConfigParseError(
                _join(path, str(key)),
                f"is not a recognized option (expected one of {', '.join(allowed)})",
            )


def _as_bool(value: Any, path: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigParseError(path, "must be a boolean")
    return value


def _as_number(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigParseError(path, "must be a number")
    return float(value)


def _as_str_tuple(value: Any, path: str) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ConfigParseError(path, "must be a list of strings")
    if not all(isinstance(item, str) for item in value):
        raise ConfigParseError(path, "must contain only strings")
    return tuple(value)


def _as_enum(enum_type: type[StrEnum], value: Any, path: str) -> Any:
    try:
        return enum_type(value)
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_type)
        raise ConfigParseError(path, f"must be one of {choices}, got {value!r}") from exc


def _build(factory: Any, kwargs: dict[str, Any], path: str) -> Any:
    """Instantiate a config dataclass, reporting validation errors as ConfigParseError."""
    try:
        return factory(**kwargs)
    except ConfigParseError:
        raise
    except ValueError as exc:
        raise ConfigParseError(path, str(exc)) from exc


def _parse_matcher(raw: Any, path: str) -> MatcherSpec:
    _require_mapping(raw, path)
    _reject_unknown(raw, _MATCHER_KEYS, path)
    if "type" not in raw:
        raise ConfigParseError(_join(path, "type"), "must be specified")

    kwargs: dict[str, Any] = {"kind": _as_enum(MatcherKind, raw["type"], _join(path, "type"))}
    if "property" in raw:
        if not isinstance(raw["property"], str):
            raise ConfigParseError(_join(path, "property"), "must be a string")
        kwargs["property"] = raw["property"]
    if "method" in raw:
        kwargs["method"] = _as_enum(MatchMethod, raw["method"], _join(path, "method"))
    if "rejectionThreshold" in raw:
        kwargs["rejection_threshold"] = _as_number(
            raw["rejectionThreshold"], _join(path, "rejectionThreshold")
        )
    if "allowUnmatched" in raw:
        kwargs["allow_unmatched"] = _as_bool(
            raw["allowUnmatched"], _join(path, "allowUnmatched")
        )
    return _build(MatcherSpec, kwargs, path)


def _parse_settings_fields(data: Mapping[str, Any], path: str) -> dict[str, Any]:
    """Parse the settings keys present in *data* into dataclass keyword arguments."""
    parsed: dict[str, Any] = {}
    if "ignore" in data:
        parsed["ignore"] = _as_str_tuple(data["ignore"], _join(path, "ignore"))
    if "ignoreCase" in data:
        parsed["ignore_case"] = _as_bool(data["ignoreCase"], _join(path, "ignoreCase"))
    if "matchers" in data:
        matchers = data["matchers"]
        if not isinstance(matchers, list):
            raise ConfigParseError(_join(path, "matchers"), "must be a list")
        parsed["matchers"] = tuple(
            _parse_matcher(raw, f"{_join(path, 'matchers')}[{index}]")
            for index, raw in enumerate(matchers)
        )
    if "stringComparisonMethod" in data:
        parsed["string_method"] = _as_enum(
            StringComparisonMethod,
            data["stringComparisonMethod"],
            _join(path, "stringComparisonMethod"),
        )
    if "minimumConfidence" in data:
        parsed["minimum_confidence"] = _as_number(
            data["minimumConfidence"], _join(path, "minimumConfidence")
        )
    if "outOfTree" in data:
        parsed["out_of_tree"] = _as_bool(data["outOfTree"], _join(path, "outOfTree"))
    if "heuristicMethods" in data:
        key = _join(path, "heuristicMethods")
        parsed["heuristic_methods"] = tuple(
            _as_enum(MatchMethod, item, key)
            for item in _as_str_tuple(data["heuristicMethods"], key)
        )
    return parsed


def _parse_override(pattern: str, raw: Any, path: str) -> SettingsOverride:
    _require_mapping(raw, path)
    _reject_unknown(raw, ("priority", *_SETTINGS_KEYS), path)

    kwargs = _parse_settings_fields(raw, path)
    if "priority" in raw:
        kwargs["priority"] = _as_number(raw["priority"], _join(path, "priority"))

    if "minimum_confidence" in kwargs and not 0.0 <= kwargs["minimum_confidence"] <= 1.0:
        raise ConfigParseError(_join(path, "minimumConfidence"), "must be in [0, 1]")
    if kwargs.get("heuristic_methods") == ():
        raise ConfigParseError(_join(path, "heuristicMethods"), "must not be empty")

    return SettingsOverride(pattern=pattern, **kwargs)
