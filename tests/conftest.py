"""Shared fixtures and helpers."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

import pytest
from k1s0_featureflag import FeatureFlagError, FlagDefinition, InMemoryFlagApi


class GatedFlagApi(InMemoryFlagApi):
    """InMemoryFlagApi whose fetches block until ``gate`` is set."""

    def __init__(self, flags: list[FlagDefinition] | None = None) -> None:
        super().__init__(flags)
        self.gate = threading.Event()
        self.entered = threading.Event()

    def fetch_flag_definitions(self) -> list[FlagDefinition]:
        self.entered.set()
        self.gate.wait(5)
        return super().fetch_flag_definitions()


class ErrorRecorder:
    """Error sink collecting reported errors."""

    def __init__(self) -> None:
        self.errors: list[FeatureFlagError] = []

    def __call__(self, error: FeatureFlagError) -> None:
        self.errors.append(error)


def wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def errors() -> ErrorRecorder:
    return ErrorRecorder()
