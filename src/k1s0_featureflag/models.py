"""featureflag data models."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union

from .exceptions import DecodeError

PropertyValue = Union[str, int, float, bool, None, list["PropertyValue"]]
Properties = Mapping[str, PropertyValue]
FlagValue = Union[bool, str]


def _as_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise DecodeError(f"{what} must be an object, got {type(data).__name__}")
    return data


def _as_list(data: Any, what: str) -> list[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise DecodeError(f"{what} must be a list, got {type(data).__name__}")
    return data


def _percentage(data: Any, what: str) -> float | None:
    """Read an optional 0-100 rollout percentage."""
    if data is None:
        return None
    if isinstance(data, bool) or not isinstance(data, (int, float)):
        raise DecodeError(f"{what} must be a number, got {data!r}")
    return float(min(max(data, 0), 100))


def _flag(data: Mapping[str, Any], name: str, key: str) -> bool:
    value = data.get(name)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise DecodeError(f"{key} {name} must be a boolean, got {value!r}")
    return value


@dataclass(frozen=True)
class PropertyCondition:
    """Single targeting condition of a rule group."""

    key: str
    operator: str = "exact"
    value: PropertyValue = None
    type: str = "person"

    @classmethod
    def from_dict(cls, data: Any) -> PropertyCondition:
        data = _as_mapping(data, "property")
        key = data.get("key")
        if not isinstance(key, str):
            raise DecodeError(f"property key must be a string, got {key!r}")
        return cls(
            key=key,
            operator=data.get("operator") or "exact",
            value=data.get("value"),
            type=data.get("type") or "person",
        )


@dataclass(frozen=True)
class RuleGroup:
    """AND-ed list of conditions, optionally gated by a rollout percentage."""

    properties: tuple[PropertyCondition, ...] = ()
    rollout_percentage: float | None = None

    @classmethod
    def from_dict(cls, data: Any) -> RuleGroup:
        data = _as_mapping(data, "group")
        return cls(
            properties=tuple(
                PropertyCondition.from_dict(p)
                for p in _as_list(data.get("properties"), "group properties")
            ),
            rollout_percentage=_percentage(
                data.get("rollout_percentage"), "group rollout_percentage"
            ),
        )


@dataclass(frozen=True)
class VariantDefinition:
    """One variant of a multivariate flag."""

    key: str
    rollout_percentage: float | None = None
    name: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> VariantDefinition:
        data = _as_mapping(data, "variant")
        key = data.get("key")
        if not isinstance(key, str):
            raise DecodeError(f"variant key must be a string, got {key!r}")
        return cls(
            key=key,
            rollout_percentage=_percentage(
                data.get("rollout_percentage"), "variant rollout_percentage"
            ),
            name=data.get("name") or "",
        )


@dataclass(frozen=True)
class MultivariateSpec:
    """Ordered variants; order defines the bucket boundaries."""

    variants: tuple[VariantDefinition, ...] = ()

    @classmethod
    def from_dict(cls, data: Any) -> MultivariateSpec:
        data = _as_mapping(data, "multivariate")
        return cls(
            variants=tuple(
                VariantDefinition.from_dict(v)
                for v in _as_list(data.get("variants"), "variants")
            )
        )


@dataclass(frozen=True)
class VariantRange:
    """Computed bucket [value_min, value_max) of a variant."""

    key: str
    value_min: float
    value_max: float


@dataclass(frozen=True)
class FlagFilters:
    groups: tuple[RuleGroup, ...] = ()
    multivariate: MultivariateSpec | None = None
    aggregation_group_type_index: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> FlagFilters:
        if data is None:
            return cls()
        data = _as_mapping(data, "filters")
        multivariate = data.get("multivariate")
        index = data.get("aggregation_group_type_index")
        if index is not None and (isinstance(index, bool) or not isinstance(index, int)):
            raise DecodeError(f"aggregation_group_type_index must be an integer, got {index!r}")
        return cls(
            groups=tuple(RuleGroup.from_dict(g) for g in _as_list(data.get("groups"), "groups")),
            multivariate=MultivariateSpec.from_dict(multivariate) if multivariate else None,
            aggregation_group_type_index=index,
        )


@dataclass(frozen=True)
class FlagDefinition:
    """Feature flag definition as served by the flag listing endpoint."""

    key: str
    is_simple_flag: bool = False
    rollout_percentage: float | None = None
    active: bool = True
    filters: FlagFilters = field(default_factory=FlagFilters)

    @property
    def groups(self) -> tuple[RuleGroup, ...]:
        return self.filters.groups

    @property
    def multivariate(self) -> MultivariateSpec | None:
        return self.filters.multivariate

    @classmethod
    def from_dict(cls, data: Any) -> FlagDefinition:
        """Build a FlagDefinition from an API record."""
        data = _as_mapping(data, "feature flag")
        key = data.get("key")
        if not isinstance(key, str) or not key:
            raise DecodeError(f"feature flag key must be a non-empty string, got {key!r}")
        return cls(
            key=key,
            is_simple_flag=_flag(data, "is_simple_flag", key),
            rollout_percentage=_percentage(
                data.get("rollout_percentage"), f"{key} rollout_percentage"
            ),
            active=_flag(data, "active", key),
            filters=FlagFilters.from_dict(data.get("filters")),
        )


def parse_flag_list(payload: Any) -> list[FlagDefinition]:
    """Decode a flag listing response body (``{"results": [...]}``)."""
    payload = _as_mapping(payload, "feature flag response")
    return [
        FlagDefinition.from_dict(item)
        for item in _as_list(payload.get("results"), "results")
    ]


@dataclass(frozen=True)
class DecideResponse:
    """Server-computed flag values from the decide endpoint."""

    feature_flags: Mapping[str, FlagValue] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> DecideResponse:
        data = _as_mapping(data, "decide response")
        flags = data.get("featureFlags") or {}
        flags = _as_mapping(flags, "featureFlags")
        values: dict[str, FlagValue] = {}
        for key, value in flags.items():
            if isinstance(value, (bool, str)):
                values[key] = value
            elif value is None:
                values[key] = False
            else:
                raise DecodeError(f"flag value for {key} must be bool or string, got {value!r}")
        return cls(feature_flags=values)


@dataclass(frozen=True)
class FlagSnapshot:
    """Immutable set of active flag definitions published by the poller."""

    flags: tuple[FlagDefinition, ...] = ()
    _index: Mapping[str, FlagDefinition] = field(
        default_factory=lambda: MappingProxyType({}), repr=False, compare=False
    )

    @classmethod
    def from_flags(cls, flags: Iterable[FlagDefinition]) -> FlagSnapshot:
        active = tuple(flag for flag in flags if flag.active)
        index: dict[str, FlagDefinition] = {}
        for flag in active:
            index.setdefault(flag.key, flag)
        return cls(flags=active, _index=MappingProxyType(index))

    @classmethod
    def empty(cls) -> FlagSnapshot:
        return cls()

    def get(self, key: str) -> FlagDefinition | None:
        return self._index.get(key)

    def __len__(self) -> int:
        return len(self.flags)
