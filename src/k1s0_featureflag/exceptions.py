"""featureflag library exception types."""

from __future__ import annotations


class FeatureFlagErrorCodes:
    """Error code constants."""

    CONFIG_ERROR: str = "CONFIG_ERROR"
    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    TRANSPORT_ERROR: str = "TRANSPORT_ERROR"
    DECODE_ERROR: str = "DECODE_ERROR"
    MISSING_PROPERTY: str = "MISSING_PROPERTY"
    NOT_ORDERABLE: str = "NOT_ORDERABLE"
    INVALID_PATTERN: str = "INVALID_PATTERN"
    UNSUPPORTED_OPERATOR: str = "UNSUPPORTED_OPERATOR"
    TYPE_MISMATCH: str = "TYPE_MISMATCH"
    INTERNAL_HASH_ERROR: str = "INTERNAL_HASH_ERROR"
    EVALUATION_ERROR: str = "EVALUATION_ERROR"
    INCONCLUSIVE_MATCH: str = "INCONCLUSIVE_MATCH"


class FeatureFlagError(Exception):
    """Base error of the featureflag library."""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class TransportError(FeatureFlagError):
    """Network failure or non-success status from the flag API."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(FeatureFlagErrorCodes.TRANSPORT_ERROR, message, cause)
        self.status_code = status_code


class DecodeError(FeatureFlagError):
    """Malformed response body."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(FeatureFlagErrorCodes.DECODE_ERROR, message, cause)


class EvaluationError(FeatureFlagError):
    """Failure scoped to a single flag evaluation."""

    code_value: str = FeatureFlagErrorCodes.EVALUATION_ERROR

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(self.code_value, message, cause)


class MissingPropertyError(EvaluationError):
    code_value = FeatureFlagErrorCodes.MISSING_PROPERTY


class NotOrderableError(EvaluationError):
    code_value = FeatureFlagErrorCodes.NOT_ORDERABLE


class InvalidPatternError(EvaluationError):
    code_value = FeatureFlagErrorCodes.INVALID_PATTERN


class UnsupportedOperatorError(EvaluationError):
    code_value = FeatureFlagErrorCodes.UNSUPPORTED_OPERATOR


class TypeMismatchError(EvaluationError):
    code_value = FeatureFlagErrorCodes.TYPE_MISMATCH


class InternalHashError(EvaluationError):
    code_value = FeatureFlagErrorCodes.INTERNAL_HASH_ERROR


class InconclusiveMatchError(EvaluationError):
    """The flag cannot be decided from local definitions alone."""

    code_value = FeatureFlagErrorCodes.INCONCLUSIVE_MATCH
