"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging
from .exceptions import (
    ReefMetricsError,
    ValidationError,
    NotFoundError,
    ConflictError,
    ErrorKind,
    AdvisoryError,
    AdvisoryConfigError,
    AdvisoryValidationError,
    AdvisoryNetworkError,
    AdvisoryTimeoutError,
    AdvisoryAuthError,
    AdvisoryRateLimitError,
    AdvisoryModelError,
    AdvisoryTokenLimitError,
    AdvisoryParseError,
    AdvisoryPaymentError,
    AdvisoryAPIError,
    AdvisoryUnavailableError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "ReefMetricsError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "ErrorKind",
    "AdvisoryError",
    "AdvisoryConfigError",
    "AdvisoryValidationError",
    "AdvisoryNetworkError",
    "AdvisoryTimeoutError",
    "AdvisoryAuthError",
    "AdvisoryRateLimitError",
    "AdvisoryModelError",
    "AdvisoryTokenLimitError",
    "AdvisoryParseError",
    "AdvisoryPaymentError",
    "AdvisoryAPIError",
    "AdvisoryUnavailableError",
]
