"""FeatureFlagClient: public flag evaluation API."""

from __future__ import annotations

from collections.abc import Mapping
from types import TracebackType

import structlog

from .api import FlagApi
from .config import FeatureFlagConfig
from .evaluation import evaluate_locally
from .exceptions import EvaluationError, FeatureFlagError, InconclusiveMatchError
from .http_client import HttpFlagApi
from .models import FlagDefinition, FlagValue, Properties
from .poller import ErrorSink, FeatureFlagPoller

logger = structlog.stdlib.get_logger(__name__)


def _is_enabled_value(value: FlagValue) -> bool:
    return value is not False and value != "false"


class FeatureFlagClient:
    """Evaluates feature flags against a locally polled set of definitions.

    Flags are decided locally whenever their definition allows it. Flags that
    carry no locally evaluable rules are computed by the remote decide
    endpoint. Evaluation failures never propagate: the caller's default is
    returned and the error is logged.
    """

    def __init__(
        self,
        config: FeatureFlagConfig,
        api: FlagApi | None = None,
        on_error: ErrorSink | None = None,
        start: bool = True,
    ) -> None:
        self._config = config
        self._api = api or HttpFlagApi(config)
        self._owns_api = api is None
        self._poller = FeatureFlagPoller(
            self._api,
            poll_interval_seconds=config.poll_interval_seconds,
            on_error=on_error,
        )
        if start:
            self._poller.start()

    @property
    def poller(self) -> FeatureFlagPoller:
        return self._poller

    def start(self) -> None:
        self._poller.start()

    def get_feature_flags(self) -> list[FlagDefinition]:
        """Active flag definitions; blocks until the first successful load."""
        return self._poller.get_feature_flags()

    def force_reload(self) -> None:
        self._poller.force_reload()

    def shutdown(self) -> None:
        self._poller.shutdown()
        if self._owns_api:
            self._api.close()

    def is_feature_enabled(
        self,
        key: str,
        distinct_id: str,
        default: bool = False,
        person_properties: Properties | None = None,
        group_properties: Mapping[str, Properties] | None = None,
        groups: Mapping[str, str] | None = None,
    ) -> bool:
        """Whether ``key`` is on for the subject. Any variant counts as on."""
        value = self.get_feature_flag(
            key,
            distinct_id,
            default=default,
            person_properties=person_properties,
            group_properties=group_properties,
            groups=groups,
        )
        return _is_enabled_value(value)

    def get_feature_flag(
        self,
        key: str,
        distinct_id: str,
        default: FlagValue = False,
        person_properties: Properties | None = None,
        group_properties: Mapping[str, Properties] | None = None,
        groups: Mapping[str, str] | None = None,
    ) -> FlagValue:
        """Value of ``key`` for the subject: a variant key, True or False.

        Unknown flags and flags that cannot be evaluated resolve to ``default``.

        Args:
            key: flag key
            distinct_id: subject id
            default: value returned when the flag cannot be decided
            person_properties: properties matched by person-targeted flags
            group_properties: group type -> properties, for group flags
            groups: group type -> group key of the subject
        """
        try:
            flag = self._poller.snapshot().get(key)
        except FeatureFlagError as e:
            logger.error(
                "Feature flags are not available",
                flag_key=key,
                error_code=e.code,
                error=str(e),
            )
            return default
        if flag is None:
            return default

        try:
            return self._evaluate(flag, distinct_id, person_properties, group_properties, groups)
        except InconclusiveMatchError:
            pass
        except EvaluationError as e:
            logger.warning(
                "Unable to evaluate feature flag locally",
                flag_key=key,
                error_code=e.code,
                error=str(e),
            )
            return default

        try:
            values = self._api.decide(distinct_id, groups)
        except FeatureFlagError as e:
            logger.error(
                "Unable to get flag value from decide",
                flag_key=key,
                error_code=e.code,
                error=str(e),
            )
            return default
        value = values.get(key, False)
        return value if _is_enabled_value(value) else False

    def _evaluate(
        self,
        flag: FlagDefinition,
        distinct_id: str,
        person_properties: Properties | None,
        group_properties: Mapping[str, Properties] | None,
        groups: Mapping[str, str] | None,
    ) -> FlagValue:
        index = flag.filters.aggregation_group_type_index
        if index is None:
            return evaluate_locally(flag, distinct_id, person_properties or {})

        group_type = self._config.group_type_mapping.get(str(index))
        if group_type is None or not groups or group_type not in groups:
            raise InconclusiveMatchError(
                f"Flag {flag.key} is aggregated by group type {index} with no local group key"
            )
        properties = (group_properties or {}).get(group_type, {})
        return evaluate_locally(flag, groups[group_type], properties)

    def __enter__(self) -> FeatureFlagClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()
