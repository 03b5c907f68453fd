"""Wire and result models."""

from .api import ApiErrorBody, ApiResponse
from .events import ParkHubEvent
from .passes import CreationRequest, ParkHubPass, SpotType
from .results import (
    BatchSummary,
    CreationFailure,
    CreationOutcome,
    CreationSuccess,
    ReferenceDefaults,
)

__all__ = [
    "ApiErrorBody",
    "ApiResponse",
    "ParkHubEvent",
    "CreationRequest",
    "ParkHubPass",
    "SpotType",
    "BatchSummary",
    "CreationFailure",
    "CreationOutcome",
    "CreationSuccess",
    "ReferenceDefaults",
]
