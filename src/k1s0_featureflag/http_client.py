"""FlagApi over HTTP using httpx."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from .api import FlagApi
from .config import FeatureFlagConfig
from .exceptions import DecodeError, TransportError
from .models import DecideResponse, FlagDefinition, FlagValue, parse_flag_list

USER_AGENT = "k1s0-featureflag/0.1.0"
FLAG_LIST_PATH = "/api/feature_flag/"
DECIDE_PATH = "/decide/"


class HttpFlagApi(FlagApi):
    """httpx based client of the flag listing and decide endpoints."""

    def __init__(
        self,
        config: FeatureFlagConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._client = httpx.Client(
            base_url=config.endpoint.rstrip("/"),
            headers={
                "Authorization": f"Bearer {config.personal_api_key}",
                "User-Agent": USER_AGENT,
            },
            timeout=config.timeout_seconds,
            transport=transport,
        )

    def _request(self, method: str, path: str, context: str, **kwargs: Any) -> Any:
        try:
            resp = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"{context}: {e}", cause=e) from e
        if resp.status_code != httpx.codes.OK:
            raise TransportError(
                f"{context}: HTTP {resp.status_code}: {resp.text}",
                status_code=resp.status_code,
            )
        try:
            return resp.json()
        except ValueError as e:
            raise DecodeError(f"{context}: response is not valid JSON", cause=e) from e

    def fetch_flag_definitions(self) -> list[FlagDefinition]:
        data = self._request(
            "GET",
            FLAG_LIST_PATH,
            "Unable to fetch feature flags",
            params={"token": self._config.project_api_key},
        )
        return parse_flag_list(data)

    def decide(
        self,
        distinct_id: str,
        groups: Mapping[str, str] | None = None,
    ) -> dict[str, FlagValue]:
        data = self._request(
            "POST",
            DECIDE_PATH,
            "Error calling /decide/",
            params={"v": "2"},
            json={
                "api_key": self._config.project_api_key,
                "distinct_id": distinct_id,
                "groups": dict(groups or {}),
            },
        )
        return dict(DecideResponse.from_dict(data).feature_flags)

    def close(self) -> None:
        self._client.close()
