"""Error taxonomy, classification and retry."""

from .codes import ErrorCode, ErrorType
from .errors import (
    AppError,
    AuthenticationError,
    ClientError,
    NetworkError,
    ServerError,
    UnknownError,
    ValidationError,
)
from .error_classifier import ErrorClassifier
from .messages import get_error_message, get_missing_field_message
from .retry import RetryDecision, RetryManager, RetryPolicy, RetryScheduler

__all__ = [
    "ErrorCode",
    "ErrorType",
    "AppError",
    "AuthenticationError",
    "ClientError",
    "NetworkError",
    "ServerError",
    "UnknownError",
    "ValidationError",
    "ErrorClassifier",
    "get_error_message",
    "get_missing_field_message",
    "RetryDecision",
    "RetryManager",
    "RetryPolicy",
    "RetryScheduler",
]
