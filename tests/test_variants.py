"""Variant resolution tests."""

import pytest
from k1s0_featureflag import (
    FlagDefinition,
    FlagFilters,
    MultivariateSpec,
    RuleGroup,
    VariantDefinition,
    resolve_variant,
    variant_lookup_table,
)
from k1s0_featureflag.hashing import hash_subject

MULTIVARIATE_RESULTS = [
    "second-variant", "second-variant", "first-variant", False, False,
    "second-variant", "first-variant", False, False, False,
    "first-variant", "third-variant", False, "first-variant", "second-variant",
    "first-variant", False, False, "fourth-variant", "first-variant",
]


def make_spec(*variants: tuple[str, int]) -> MultivariateSpec:
    return MultivariateSpec(
        variants=tuple(VariantDefinition(key=k, rollout_percentage=p) for k, p in variants)
    )


def make_flag(key: str, spec: MultivariateSpec | None, groups: tuple[RuleGroup, ...] = ()) -> FlagDefinition:
    return FlagDefinition(key=key, filters=FlagFilters(groups=groups, multivariate=spec))


def test_lookup_table_partitions_in_order() -> None:
    table = variant_lookup_table(make_spec(("a", 20), ("b", 30), ("c", 50)))
    assert [r.key for r in table] == ["a", "b", "c"]
    assert table[0].value_min == 0.0
    for previous, current in zip(table, table[1:]):
        assert current.value_min == previous.value_max
        assert current.value_min < current.value_max
    assert table[-1].value_max == pytest.approx(1.0)


def test_lookup_table_empty_without_spec() -> None:
    assert variant_lookup_table(None) == []


def test_lookup_table_missing_percentage_is_empty_range() -> None:
    spec = MultivariateSpec(variants=(VariantDefinition("a"), VariantDefinition("b", 100)))
    table = variant_lookup_table(spec)
    assert table[0].value_min == table[0].value_max == 0.0
    assert table[1].value_max == pytest.approx(1.0)


def test_resolve_returns_only_declared_keys() -> None:
    flag = make_flag("ab", make_spec(("A", 30), ("B", 70)))
    results = {resolve_variant(flag, f"user-{i}") for i in range(500)}
    assert results == {"A", "B"}


def test_resolve_matches_hash_range() -> None:
    flag = make_flag("ab", make_spec(("A", 30), ("B", 70)))
    for i in range(100):
        value = hash_subject("ab", f"user-{i}", "variant")
        expected = "A" if value < 0.3 else "B"
        assert resolve_variant(flag, f"user-{i}") == expected


def test_resolve_gap_defaults_to_true() -> None:
    flag = make_flag("gap", make_spec(("A", 10)))
    results = [resolve_variant(flag, f"user-{i}") for i in range(200)]
    assert set(results) == {"A", True}
    assert results.count(True) > results.count("A")


def test_resolve_without_spec_is_true() -> None:
    assert resolve_variant(make_flag("plain", None), "user") is True


def test_multivariate_matches_other_sdks() -> None:
    """Variant assignment shared with the other client libraries."""
    from k1s0_featureflag import match_feature_flag

    flag = make_flag(
        "multivariate-flag",
        make_spec(
            ("first-variant", 50),
            ("second-variant", 20),
            ("third-variant", 20),
            ("fourth-variant", 5),
            ("fifth-variant", 5),
        ),
        groups=(RuleGroup(properties=(), rollout_percentage=55),),
    )
    for i, expected in enumerate(MULTIVARIATE_RESULTS):
        assert match_feature_flag(flag, f"distinct_id_{i}", {}) == expected
