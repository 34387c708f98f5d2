"""Deterministic subject bucketing.

Every SDK must hash the same input the same way so that a subject lands in
the same bucket regardless of which client evaluates the flag.
"""

from __future__ import annotations

import hashlib

from .exceptions import InternalHashError

LONG_SCALE = 0xFFFFFFFFFFFFFFF
_HEX_WIDTH = 15


def hash_subject(key: str, subject_id: str, salt: str = "") -> float:
    """Map (flag key, subject id, salt) to a float in [0, 1).

    SHA-1 of ``"<key>.<subject_id><salt>"``, first 15 hex digits read as an
    integer and divided by ``LONG_SCALE``.
    """
    digest = hashlib.sha1(f"{key}.{subject_id}{salt}".encode("utf-8")).hexdigest()
    try:
        value = int(digest[:_HEX_WIDTH], 16)
    except ValueError as e:
        raise InternalHashError(f"Unable to parse digest for {key}: {digest!r}", cause=e) from e
    return value / LONG_SCALE


def check_rollout(key: str, subject_id: str, rollout_percentage: float) -> bool:
    """Whether the subject falls inside a ``rollout_percentage`` (0-100) rollout."""
    return hash_subject(key, subject_id) <= rollout_percentage / 100
