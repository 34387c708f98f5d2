"""Local flag evaluation against rule groups."""

from __future__ import annotations

from .exceptions import InconclusiveMatchError
from .hashing import check_rollout
from .matching import match_property
from .models import FlagDefinition, FlagValue, Properties, RuleGroup
from .variants import resolve_variant


def is_condition_match(
    flag: FlagDefinition,
    subject_id: str,
    group: RuleGroup,
    properties: Properties,
) -> bool:
    """All conditions of ``group`` match, then the group's rollout gate applies."""
    for condition in group.properties:
        if not match_property(condition, properties):
            return False
    if group.rollout_percentage is not None:
        return check_rollout(flag.key, subject_id, group.rollout_percentage)
    return True


def match_feature_flag(
    flag: FlagDefinition,
    subject_id: str,
    properties: Properties,
) -> FlagValue:
    """First matching group wins; multivariate flags then pick a variant."""
    for group in flag.groups:
        if is_condition_match(flag, subject_id, group, properties):
            if flag.multivariate is not None:
                return resolve_variant(flag, subject_id)
            return True
    return False


def evaluate_locally(
    flag: FlagDefinition,
    subject_id: str,
    properties: Properties,
) -> FlagValue:
    """Decide ``flag`` without a server round trip.

    Raises ``InconclusiveMatchError`` when the definition carries no rules the
    client can evaluate, and any matcher error raised while walking the groups.
    """
    if flag.groups:
        return match_feature_flag(flag, subject_id, properties)
    if flag.is_simple_flag:
        rollout = 100 if flag.rollout_percentage is None else flag.rollout_percentage
        return check_rollout(flag.key, subject_id, rollout)
    raise InconclusiveMatchError(f"Flag {flag.key} has no locally evaluable rules")
