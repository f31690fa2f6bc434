"""
Custom Exception Hierarchy

Provides specific exception types for different error categories
with structured error information.

Advisory (LLM) failures form a closed set of kinds, enumerated by
``ErrorKind``. Every kind has its own exception class and all of them share
the same payload shape (code, message, details, status_code), so callers can
branch on ``kind`` without matching message strings.
"""
from enum import Enum
from typing import Optional, Dict, Any


class ReefMetricsError(Exception):
    """Base exception for all ReefMetrics errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        payload: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(ReefMetricsError):
    """Bad local input or reference data."""

    status_code = 400

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        extra = {"field": field} if field else {}
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={**extra, **(details or {})}
        )
        self.field = field


class NotFoundError(ReefMetricsError):
    """A referenced aquarium, parameter or aquarium type does not exist."""

    status_code = 404

    def __init__(self, message: str, resource: str = "unknown"):
        super().__init__(
            message=message,
            code="NOT_FOUND",
            details={"resource": resource}
        )
        self.resource = resource


class ConflictError(ReefMetricsError):
    """The record would duplicate an existing one, e.g. an aquarium name."""

    status_code = 409

    def __init__(self, message: str, resource: str = "unknown"):
        super().__init__(
            message=message,
            code="CONFLICT",
            details={"resource": resource}
        )
        self.resource = resource


# ---- Advisory service taxonomy ----

class ErrorKind(str, Enum):
    """Every way an advisory call can fail."""
    CONFIG = "CONFIG_ERROR"            # bad local setup, never retryable
    VALIDATION = "VALIDATION_ERROR"    # bad input, local or remote-reported
    NETWORK = "NETWORK_ERROR"          # transient
    TIMEOUT = "TIMEOUT_ERROR"          # transient, retry with backoff
    AUTH = "AUTH_ERROR"                # operator must fix the credential
    RATE_LIMIT = "RATE_LIMIT_ERROR"    # retry after the supplied delay
    MODEL = "MODEL_ERROR"              # model unavailable
    TOKEN_LIMIT = "TOKEN_LIMIT_ERROR"  # response truncated
    PARSE = "PARSE_ERROR"              # remote response malformed
    PAYMENT = "PAYMENT_ERROR"          # account out of credits
    API = "API_ERROR"                  # any other HTTP error status
    UNKNOWN = "UNKNOWN_ERROR"

    @property
    def retryable(self) -> bool:
        return self in (ErrorKind.NETWORK, ErrorKind.TIMEOUT, ErrorKind.RATE_LIMIT)


class AdvisoryError(ReefMetricsError):
    """Base exception for failures of the remote advisory service."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        super().__init__(message=message, code=self.kind.value, details=details)
        if status_code is not None:
            self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.kind.retryable


class AdvisoryConfigError(AdvisoryError):
    """Missing or malformed API credential."""
    kind = ErrorKind.CONFIG


class AdvisoryValidationError(AdvisoryError):
    """Out-of-range model parameters, or a 400 from the remote service."""
    kind = ErrorKind.VALIDATION
    status_code = 400


class AdvisoryNetworkError(AdvisoryError):
    """Connection failure that is not a timeout."""
    kind = ErrorKind.NETWORK

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(
            message=message,
            details={"cause": repr(cause)} if cause is not None else None
        )
        self.cause = cause


class AdvisoryTimeoutError(AdvisoryError):
    """The request exceeded the hard timeout and was cancelled."""
    kind = ErrorKind.TIMEOUT

    def __init__(self, message: str, timeout_seconds: float):
        super().__init__(message=message, details={"timeout_seconds": timeout_seconds})
        self.timeout_seconds = timeout_seconds


class AdvisoryAuthError(AdvisoryError):
    """HTTP 401."""
    kind = ErrorKind.AUTH
    status_code = 401


class AdvisoryRateLimitError(AdvisoryError):
    """HTTP 429."""
    kind = ErrorKind.RATE_LIMIT
    status_code = 429

    def __init__(self, message: str, retry_after: int = 60):
        super().__init__(message=message, details={"retry_after": retry_after})
        self.retry_after = retry_after


class AdvisoryModelError(AdvisoryError):
    """HTTP 404: the requested model does not exist or is unavailable."""
    kind = ErrorKind.MODEL
    status_code = 404

    def __init__(self, message: str, model_name: Optional[str] = None):
        super().__init__(
            message=message,
            details={"model": model_name} if model_name else None
        )
        self.model_name = model_name


class AdvisoryTokenLimitError(AdvisoryError):
    """The completion was cut off (finish_reason == "length")."""
    kind = ErrorKind.TOKEN_LIMIT

    def __init__(self, message: str, token_count: Optional[int] = None):
        super().__init__(
            message=message,
            details={"token_count": token_count} if token_count is not None else None
        )
        self.token_count = token_count


class AdvisoryParseError(AdvisoryError):
    """The response could not be decoded into the declared shape."""
    kind = ErrorKind.PARSE


class AdvisoryPaymentError(AdvisoryError):
    """HTTP 402."""
    kind = ErrorKind.PAYMENT
    status_code = 402


class AdvisoryAPIError(AdvisoryError):
    """Any other non-success HTTP status."""
    kind = ErrorKind.API

    def __init__(self, message: str, status_code: int, body: Any = None):
        super().__init__(
            message=message,
            details={"status": status_code, "body": body},
            status_code=status_code
        )


class AdvisoryUnavailableError(ReefMetricsError):
    """
    The single failure surfaced at the advisory boundary.

    The kind of the underlying AdvisoryError is kept on ``cause_kind`` for
    diagnostics and is not part of ``to_dict()``.
    """

    status_code = 503

    def __init__(self, cause_kind: ErrorKind = ErrorKind.UNKNOWN):
        super().__init__(
            message=(
                "AI recommendation service is temporarily unavailable. "
                "Please try again later."
            ),
            code="AI_SERVICE_UNAVAILABLE"
        )
        self.cause_kind = cause_kind
