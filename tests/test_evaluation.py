"""Local flag evaluation tests."""

import pytest
from k1s0_featureflag import (
    FlagDefinition,
    FlagFilters,
    InconclusiveMatchError,
    MissingPropertyError,
    MultivariateSpec,
    PropertyCondition,
    RuleGroup,
    VariantDefinition,
    check_rollout,
    evaluate_locally,
    is_condition_match,
    match_feature_flag,
)


def make_flag(
    key: str = "flag",
    groups: tuple[RuleGroup, ...] = (),
    multivariate: MultivariateSpec | None = None,
    is_simple_flag: bool = False,
    rollout_percentage: int | None = None,
) -> FlagDefinition:
    return FlagDefinition(
        key=key,
        is_simple_flag=is_simple_flag,
        rollout_percentage=rollout_percentage,
        filters=FlagFilters(groups=groups, multivariate=multivariate),
    )


def region(value: object, operator: str = "exact") -> PropertyCondition:
    return PropertyCondition(key="region", operator=operator, value=value)


def test_empty_group_always_matches() -> None:
    flag = make_flag()
    assert is_condition_match(flag, "user", RuleGroup(), {}) is True


def test_group_conditions_are_anded() -> None:
    group = RuleGroup(
        properties=(
            region("USA"),
            PropertyCondition(key="plan", operator="exact", value="pro"),
        )
    )
    flag = make_flag(groups=(group,))
    assert is_condition_match(flag, "u", group, {"region": "USA", "plan": "pro"}) is True
    assert is_condition_match(flag, "u", group, {"region": "USA", "plan": "free"}) is False


def test_group_rollout_gates_after_properties_match() -> None:
    group = RuleGroup(properties=(region("USA"),), rollout_percentage=30)
    flag = make_flag(key="gated", groups=(group,))
    for i in range(100):
        subject = f"user-{i}"
        expected = check_rollout("gated", subject, 30)
        assert is_condition_match(flag, subject, group, {"region": "USA"}) is expected


def test_group_rollout_zero_never_matches() -> None:
    group = RuleGroup(properties=(region("USA"),), rollout_percentage=0)
    flag = make_flag(groups=(group,))
    assert not any(
        is_condition_match(flag, f"user-{i}", group, {"region": "USA"}) for i in range(50)
    )


def test_no_matching_group_is_false() -> None:
    flag = make_flag(groups=(RuleGroup(properties=(region("USA"),)),))
    assert match_feature_flag(flag, "user", {"region": "Canada"}) is False


def test_first_matching_group_wins() -> None:
    flag = make_flag(
        groups=(
            RuleGroup(properties=(region("Canada"),)),
            RuleGroup(properties=(region("USA"),)),
            RuleGroup(properties=(region("USA", "is_not_set"),)),
        )
    )
    # the third group would raise, so reaching True proves evaluation stopped
    assert match_feature_flag(flag, "user", {"region": "USA"}) is True


def test_matcher_error_propagates() -> None:
    flag = make_flag(groups=(RuleGroup(properties=(region("USA"),)),))
    with pytest.raises(MissingPropertyError):
        match_feature_flag(flag, "user", {})


def test_multivariate_match_returns_variant() -> None:
    spec = MultivariateSpec(
        variants=(VariantDefinition("A", 30), VariantDefinition("B", 70)),
    )
    flag = make_flag(groups=(RuleGroup(properties=(region("USA"),)),), multivariate=spec)
    for i in range(100):
        assert match_feature_flag(flag, f"user-{i}", {"region": "USA"}) in ("A", "B")
    assert match_feature_flag(flag, "user", {"region": "Canada"}) is False


def test_simple_flag_without_groups_uses_flag_rollout() -> None:
    flag = make_flag(key="rollout50", is_simple_flag=True, rollout_percentage=50)
    first = evaluate_locally(flag, "user-42", {})
    assert first is check_rollout("rollout50", "user-42", 50)
    assert all(evaluate_locally(flag, "user-42", {}) is first for _ in range(10))


def test_simple_flag_without_percentage_is_fully_rolled_out() -> None:
    flag = make_flag(is_simple_flag=True)
    assert all(evaluate_locally(flag, f"user-{i}", {}) is True for i in range(50))


def test_flag_without_local_rules_is_inconclusive() -> None:
    with pytest.raises(InconclusiveMatchError):
        evaluate_locally(make_flag(), "user", {})
