"""Property condition matching."""

from __future__ import annotations

import operator
import re
from collections.abc import Callable

from .exceptions import (
    InvalidPatternError,
    MissingPropertyError,
    NotOrderableError,
    TypeMismatchError,
    UnsupportedOperatorError,
)
from .models import Properties, PropertyCondition, PropertyValue

_ORDERING: dict[str, Callable[[float, float], bool]] = {
    "gt": operator.gt,
    "lt": operator.lt,
    "gte": operator.ge,
    "lte": operator.le,
}

KNOWN_OPERATORS = frozenset(
    {
        "exact",
        "is_not",
        "is_set",
        "is_not_set",
        "icontains",
        "not_icontains",
        "regex",
        "not_regex",
        *_ORDERING,
    }
)


def _values_equal(expected: PropertyValue, actual: PropertyValue) -> bool:
    # bool is an int subclass; keep True distinct from 1
    if isinstance(expected, bool) or isinstance(actual, bool):
        return type(expected) is type(actual) and expected == actual
    return expected == actual


def _exact(expected: PropertyValue, actual: PropertyValue) -> bool:
    if isinstance(expected, list):
        return any(_values_equal(item, actual) for item in expected)
    return _values_equal(expected, actual)


def _require_str(value: PropertyValue, side: str, condition: PropertyCondition) -> str:
    if not isinstance(value, str):
        raise TypeMismatchError(
            f"{condition.operator} on {condition.key!r} needs a string {side}, "
            f"got {type(value).__name__}"
        )
    return value


def _to_float(value: PropertyValue, side: str, condition: PropertyCondition) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise NotOrderableError(
            f"{side} {value!r} of {condition.key!r} is not orderable"
        )
    return float(value)


def _regex(condition: PropertyCondition, actual: PropertyValue) -> bool:
    pattern = _require_str(condition.value, "pattern", condition)
    text = _require_str(actual, "property value", condition)
    try:
        compiled = re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(f"Invalid regex {pattern!r}: {e}", cause=e) from e
    return compiled.search(text) is not None


def match_property(condition: PropertyCondition, properties: Properties) -> bool:
    """Evaluate one condition against the caller's property bag.

    Raises an ``EvaluationError`` subclass when the condition cannot be
    decided. Operators this client does not know never match.
    """
    op = condition.operator
    if op == "is_not_set":
        raise UnsupportedOperatorError("Can't match properties with operator is_not_set")
    if op == "is_set":
        return condition.key in properties
    if op not in KNOWN_OPERATORS:
        return False
    if condition.key not in properties:
        raise MissingPropertyError(
            f"Can't match {condition.key!r} without a given property value"
        )

    expected = condition.value
    actual = properties[condition.key]

    if op == "exact":
        return _exact(expected, actual)
    if op == "is_not":
        return not _exact(expected, actual)
    if op in ("icontains", "not_icontains"):
        needle = _require_str(expected, "expected value", condition).casefold()
        haystack = _require_str(actual, "property value", condition).casefold()
        return (needle in haystack) == (op == "icontains")
    if op in ("regex", "not_regex"):
        return _regex(condition, actual) == (op == "regex")

    compare = _ORDERING[op]
    return compare(
        _to_float(actual, "Property value", condition),
        _to_float(expected, "Expected value", condition),
    )
