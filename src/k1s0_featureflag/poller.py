"""FeatureFlagPoller: background refresh of the flag definition snapshot."""

from __future__ import annotations

import threading
from collections.abc import Callable
from enum import Enum
from types import TracebackType

import structlog

from .api import FlagApi
from .exceptions import FeatureFlagError, FeatureFlagErrorCodes
from .models import FlagDefinition, FlagSnapshot

ErrorSink = Callable[[FeatureFlagError], None]

logger = structlog.stdlib.get_logger(__name__)


class PollerState(str, Enum):
    """Lifecycle of a FeatureFlagPoller."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


def log_error(error: FeatureFlagError) -> None:
    """Default error sink."""
    logger.error("Unable to refresh feature flags", error_code=error.code, error=str(error))


class FeatureFlagPoller:
    """Keeps an in-memory snapshot of the active flag definitions current.

    A single daemon thread owns the refresh loop and is the only writer of the
    snapshot. It refreshes once right away, then every ``poll_interval_seconds``
    or as soon as ``force_reload`` is called. Readers block until the first
    successful refresh, or until ``shutdown`` releases them with an empty
    snapshot.
    """

    def __init__(
        self,
        api: FlagApi,
        poll_interval_seconds: float = 300.0,
        on_error: ErrorSink | None = None,
    ) -> None:
        self._api = api
        self._interval = poll_interval_seconds
        self._on_error = on_error or log_error
        self._snapshot = FlagSnapshot.empty()
        self._state = PollerState.UNINITIALIZED
        self._loaded_once = False
        # guards _snapshot and _state; never held across a fetch
        self._lock = threading.Lock()
        # serializes fetches
        self._refresh_lock = threading.Lock()
        self._loaded = threading.Event()
        self._wake = threading.Event()
        self._stopping = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def state(self) -> PollerState:
        with self._lock:
            return self._state

    def start(self) -> None:
        """Launch the refresh loop."""
        with self._lock:
            if self._thread is not None or self._state is not PollerState.UNINITIALIZED:
                raise FeatureFlagError(
                    FeatureFlagErrorCodes.CONFIG_ERROR,
                    f"Poller cannot be started in state {self._state.value}",
                )
            self._thread = threading.Thread(
                target=self._poll_loop,
                name="k1s0-featureflag-poller",
                daemon=True,
            )
            self._thread.start()

    def _transition(self, state: PollerState) -> None:
        with self._lock:
            if self._state in (PollerState.SHUTTING_DOWN, PollerState.STOPPED):
                return
            self._state = state

    def _report(self, error: FeatureFlagError) -> None:
        try:
            self._on_error(error)
        except Exception:
            logger.exception("Feature flag error sink raised", error_code=error.code)

    def refresh(self) -> bool:
        """Fetch the flag list once and publish it.

        Returns False when the fetch failed or the poller is shutting down;
        the previous snapshot is kept.
        """
        with self._refresh_lock:
            if self._stopping.is_set():
                return False
            self._transition(PollerState.LOADING)
            try:
                flags = self._api.fetch_flag_definitions()
            except FeatureFlagError as e:
                self._report(e)
                self._transition(
                    PollerState.READY if self._loaded_once else PollerState.UNINITIALIZED
                )
                return False
            except Exception as e:
                self._report(
                    FeatureFlagError(
                        FeatureFlagErrorCodes.TRANSPORT_ERROR,
                        f"Unexpected error fetching feature flags: {e}",
                        cause=e,
                    )
                )
                self._transition(
                    PollerState.READY if self._loaded_once else PollerState.UNINITIALIZED
                )
                return False

            snapshot = FlagSnapshot.from_flags(flags)
            with self._lock:
                self._snapshot = snapshot
                self._loaded_once = True
            self._transition(PollerState.READY)
            self._loaded.set()
            logger.debug(
                "Feature flags refreshed",
                fetched=len(flags),
                active=len(snapshot),
            )
            return True

    def _poll_loop(self) -> None:
        while not self._stopping.is_set():
            self._wake.clear()
            if self._stopping.is_set():
                break
            self.refresh()
            self._wake.wait(self._interval)

    def force_reload(self) -> None:
        """Request an out-of-band refresh. Requests made during a fetch coalesce."""
        if self._stopping.is_set():
            return
        self._wake.set()

    def snapshot(self, timeout: float | None = None) -> FlagSnapshot:
        """Current snapshot, waiting for the first successful load.

        Returns the empty snapshot when ``timeout`` expires or the poller shut
        down before any load succeeded.
        """
        with self._lock:
            if self._state is PollerState.UNINITIALIZED and self._thread is None:
                raise FeatureFlagError(
                    FeatureFlagErrorCodes.CONFIG_ERROR,
                    "Poller has not been started",
                )
        if not self._loaded.wait(timeout):
            return FlagSnapshot.empty()
        with self._lock:
            return self._snapshot

    def get_feature_flags(self, timeout: float | None = None) -> list[FlagDefinition]:
        """Active flag definitions, blocking until the first successful load."""
        return list(self.snapshot(timeout).flags)

    def shutdown(self, timeout: float | None = None) -> None:
        """Stop future refreshes and release any waiting reader.

        An in-flight fetch is allowed to finish. Safe to call more than once.
        """
        with self._lock:
            if self._state in (PollerState.SHUTTING_DOWN, PollerState.STOPPED):
                return
            self._state = PollerState.SHUTTING_DOWN
            thread = self._thread
        self._stopping.set()
        self._wake.set()
        self._loaded.set()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._wake.clear()
        with self._lock:
            self._state = PollerState.STOPPED
        logger.debug("Feature flag poller stopped")

    def __enter__(self) -> FeatureFlagPoller:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()
