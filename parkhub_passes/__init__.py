"""
ParkHub Pass SDK - batch parking-pass creation against the ParkHub API.

Features:
- Authenticated async client with error classification and retry
- Bounded-concurrency batch creation with per-item failure isolation
- Batch summaries with "retry failed only" support
"""

__version__ = "0.1.0"

from .api.client import ParkHubPassClient
from .batch import BatchCancelledError, BatchOrchestrator, ResultReconciler
from .config import ClientConfig
from .http import AuthenticatedClient
from .models import (
    ApiErrorBody,
    ApiResponse,
    BatchSummary,
    CreationFailure,
    CreationRequest,
    CreationSuccess,
    ParkHubEvent,
    ParkHubPass,
    ReferenceDefaults,
    SpotType,
)
from .reliability import (
    AppError,
    AuthenticationError,
    ClientError,
    ErrorClassifier,
    ErrorCode,
    ErrorType,
    NetworkError,
    RetryManager,
    RetryPolicy,
    RetryScheduler,
    ServerError,
    UnknownError,
    ValidationError,
)
from .services import EventsApi, PassesApi
from .storage import CredentialStore, InMemoryCredentialStore, validate_api_key

__all__ = [
    "__version__",
    "ParkHubPassClient",
    "BatchCancelledError",
    "BatchOrchestrator",
    "ResultReconciler",
    "ClientConfig",
    "AuthenticatedClient",
    "ApiErrorBody",
    "ApiResponse",
    "BatchSummary",
    "CreationFailure",
    "CreationRequest",
    "CreationSuccess",
    "ParkHubEvent",
    "ParkHubPass",
    "ReferenceDefaults",
    "SpotType",
    "AppError",
    "AuthenticationError",
    "ClientError",
    "ErrorClassifier",
    "ErrorCode",
    "ErrorType",
    "NetworkError",
    "RetryManager",
    "RetryPolicy",
    "RetryScheduler",
    "ServerError",
    "UnknownError",
    "ValidationError",
    "EventsApi",
    "PassesApi",
    "CredentialStore",
    "InMemoryCredentialStore",
    "validate_api_key",
]
