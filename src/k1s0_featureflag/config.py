"""featureflag client configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import FeatureFlagError, FeatureFlagErrorCodes


class LogSection(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    format: Literal["json", "text"] = "json"


class FeatureFlagConfig(BaseModel):
    """Settings of a FeatureFlagClient."""

    endpoint: str
    project_api_key: str
    personal_api_key: str
    poll_interval_seconds: float = Field(default=300.0, gt=0)
    timeout_seconds: float = Field(default=10.0, gt=0)
    # group type index (as sent in aggregation_group_type_index) -> group type name
    group_type_mapping: dict[str, str] = Field(default_factory=dict)
    log: LogSection = Field(default_factory=LogSection)


def load_config(path: Path) -> FeatureFlagConfig:
    """Read a YAML file and return the validated FeatureFlagConfig.

    The settings may sit at the top level or under a ``featureflag`` key.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FeatureFlagError(
            code=FeatureFlagErrorCodes.READ_FILE,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data: Any = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise FeatureFlagError(
            code=FeatureFlagErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    if isinstance(data, dict) and isinstance(data.get("featureflag"), dict):
        data = data["featureflag"]
    try:
        return FeatureFlagConfig.model_validate(data)
    except ValidationError as e:
        raise FeatureFlagError(
            code=FeatureFlagErrorCodes.CONFIG_ERROR,
            message=f"Config validation failed: {e}",
            cause=e,
        ) from e
