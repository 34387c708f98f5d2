"""Multivariate variant resolution."""

from __future__ import annotations

from .hashing import hash_subject
from .models import FlagDefinition, FlagValue, MultivariateSpec, VariantRange

VARIANT_SALT = "variant"


def variant_lookup_table(multivariate: MultivariateSpec | None) -> list[VariantRange]:
    """Contiguous bucket ranges, one per variant, in declaration order."""
    if multivariate is None:
        return []
    table: list[VariantRange] = []
    value_min = 0.0
    for variant in multivariate.variants:
        value_max = value_min + (variant.rollout_percentage or 0) / 100
        table.append(VariantRange(key=variant.key, value_min=value_min, value_max=value_max))
        value_min = value_max
    return table


def resolve_variant(flag: FlagDefinition, subject_id: str) -> FlagValue:
    """Variant key for the subject, or ``True`` when no range contains its hash."""
    for variant in variant_lookup_table(flag.multivariate):
        # hashed once per range, matching the bucket assignment of existing clients
        value = hash_subject(flag.key, subject_id, VARIANT_SALT)
        if variant.value_min <= value < variant.value_max:
            return variant.key
    return True
