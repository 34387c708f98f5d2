"""InMemoryFlagApi implementation."""

from __future__ import annotations

import threading
from collections.abc import Mapping

from .api import FlagApi
from .exceptions import FeatureFlagError, TransportError
from .models import FlagDefinition, FlagValue


class InMemoryFlagApi(FlagApi):
    """In-memory flag service for tests."""

    def __init__(self, flags: list[FlagDefinition] | None = None) -> None:
        self._lock = threading.Lock()
        self._flags: list[FlagDefinition] = list(flags or [])
        self._decide: dict[str, dict[str, FlagValue]] = {}
        self._failures: list[FeatureFlagError] = []
        self._decide_error: FeatureFlagError | None = None
        self.fetch_count = 0
        self.decide_calls: list[tuple[str, dict[str, str]]] = []

    def set_flags(self, flags: list[FlagDefinition]) -> None:
        with self._lock:
            self._flags = list(flags)

    def set_decide(self, distinct_id: str, values: dict[str, FlagValue]) -> None:
        """Register the decide result for a subject."""
        with self._lock:
            self._decide[distinct_id] = dict(values)

    def fail_next(self, error: FeatureFlagError | None = None, times: int = 1) -> None:
        """Make the next ``times`` fetches raise ``error``."""
        with self._lock:
            self._failures.extend([error or TransportError("connection refused")] * times)

    def fail_decide(self, error: FeatureFlagError | None) -> None:
        """Make every decide call raise ``error`` (None clears it)."""
        with self._lock:
            self._decide_error = error

    def fetch_flag_definitions(self) -> list[FlagDefinition]:
        with self._lock:
            self.fetch_count += 1
            if self._failures:
                raise self._failures.pop(0)
            return list(self._flags)

    def decide(
        self,
        distinct_id: str,
        groups: Mapping[str, str] | None = None,
    ) -> dict[str, FlagValue]:
        with self._lock:
            self.decide_calls.append((distinct_id, dict(groups or {})))
            if self._decide_error is not None:
                raise self._decide_error
            return dict(self._decide.get(distinct_id, {}))
