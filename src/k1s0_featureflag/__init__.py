"""k1s0 featureflag library."""

from .api import FlagApi
from .client import FeatureFlagClient
from .config import FeatureFlagConfig, LogSection, load_config
from .evaluation import evaluate_locally, is_condition_match, match_feature_flag
from .exceptions import (
    DecodeError,
    EvaluationError,
    FeatureFlagError,
    FeatureFlagErrorCodes,
    InconclusiveMatchError,
    InternalHashError,
    InvalidPatternError,
    MissingPropertyError,
    NotOrderableError,
    TransportError,
    TypeMismatchError,
    UnsupportedOperatorError,
)
from .hashing import LONG_SCALE, check_rollout, hash_subject
from .http_client import HttpFlagApi
from .logger import configure_from_section, configure_logging
from .matching import match_property
from .memory import InMemoryFlagApi
from .models import (
    DecideResponse,
    FlagDefinition,
    FlagFilters,
    FlagSnapshot,
    MultivariateSpec,
    PropertyCondition,
    RuleGroup,
    VariantDefinition,
    VariantRange,
    parse_flag_list,
)
from .poller import FeatureFlagPoller, PollerState
from .variants import resolve_variant, variant_lookup_table

__all__ = [
    "DecideResponse",
    "DecodeError",
    "EvaluationError",
    "FeatureFlagClient",
    "FeatureFlagConfig",
    "FeatureFlagError",
    "FeatureFlagErrorCodes",
    "FeatureFlagPoller",
    "FlagApi",
    "FlagDefinition",
    "FlagFilters",
    "FlagSnapshot",
    "HttpFlagApi",
    "InMemoryFlagApi",
    "InconclusiveMatchError",
    "InternalHashError",
    "InvalidPatternError",
    "LONG_SCALE",
    "LogSection",
    "MissingPropertyError",
    "MultivariateSpec",
    "NotOrderableError",
    "PollerState",
    "PropertyCondition",
    "RuleGroup",
    "TransportError",
    "TypeMismatchError",
    "UnsupportedOperatorError",
    "VariantDefinition",
    "VariantRange",
    "check_rollout",
    "configure_from_section",
    "configure_logging",
    "evaluate_locally",
    "hash_subject",
    "is_condition_match",
    "load_config",
    "match_feature_flag",
    "match_property",
    "parse_flag_list",
    "resolve_variant",
    "variant_lookup_table",
]
