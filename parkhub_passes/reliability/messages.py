"""
Default user-facing error messages.

Messages are looked up by error type and code, with field-specific
overrides for validation problems. Server-supplied messages always win;
these are only used when the API did not send one.
"""

from typing import Dict, Optional

from .codes import ErrorCode, ErrorType


DEFAULT_ERROR_MESSAGES: Dict[ErrorType, Dict[ErrorCode, str]] = {
    ErrorType.NETWORK: {
        ErrorCode.CONNECTION_ERROR: (
            "Unable to connect to the ParkHub service. "
            "Please check your internet connection and try again."
        ),
        ErrorCode.TIMEOUT: (
            "The request to ParkHub timed out. Please try again. If the problem "
            "persists, the service may be experiencing high load."
        ),
    },
    ErrorType.AUTHENTICATION: {
        ErrorCode.INVALID_API_KEY: (
            "The API key provided is invalid or has expired. Please update your API key."
        ),
        ErrorCode.MISSING_API_KEY: (
            "No API key found. Please enter your ParkHub API key to continue."
        ),
    },
    ErrorType.VALIDATION: {
        ErrorCode.INVALID_INPUT: (
            "The provided information contains errors. "
            "Please review and correct the highlighted fields."
        ),
        ErrorCode.DUPLICATE_BARCODE: "A pass with this barcode already exists in the system.",
    },
    ErrorType.SERVER: {
        ErrorCode.SERVER_ERROR: (
            "The ParkHub service encountered an error. Please try again later."
        ),
        ErrorCode.RATE_LIMIT_EXCEEDED: (
            "You have made too many requests. Please wait a moment before trying again."
        ),
    },
    ErrorType.CLIENT: {
        ErrorCode.UNKNOWN_ERROR: (
            "An unexpected client error occurred. Please check the request and try again."
        ),
        ErrorCode.EVENT_NOT_FOUND: (
            "The requested event could not be found. "
            "It may have been removed or the ID is incorrect."
        ),
    },
    ErrorType.UNKNOWN: {
        ErrorCode.UNKNOWN_ERROR: (
            "An unexpected error occurred. "
            "Please try again or contact support if the problem persists."
        ),
    },
}

# Keyed by wire (camelCase) field name
FIELD_ERROR_MESSAGES: Dict[str, Dict[ErrorCode, str]] = {
    "eventId": {
        ErrorCode.INVALID_INPUT: "Event ID must be in the format EV##### (where # is a digit).",
        ErrorCode.EVENT_NOT_FOUND: "No event found with this ID. Please check and try again.",
    },
    "accountId": {
        ErrorCode.INVALID_INPUT: "Account ID is required and must be in the correct format.",
    },
    "barcode": {
        ErrorCode.INVALID_INPUT: "Barcode must follow the format BC###### (where # is a digit).",
        ErrorCode.DUPLICATE_BARCODE: "This barcode already exists. Please use a unique barcode.",
    },
    "customerName": {
        ErrorCode.INVALID_INPUT: (
            "Customer name is required and must contain only letters, spaces, and hyphens."
        ),
    },
    "spotType": {
        ErrorCode.INVALID_INPUT: "Spot type must be one of: Regular, VIP, Premium.",
    },
    "lotId": {
        ErrorCode.INVALID_INPUT: "Lot ID is required and must be in the correct format.",
    },
}


def get_error_message(
    error_type: ErrorType,
    code: ErrorCode,
    field: Optional[str] = None
) -> str:
    """
    Resolve the default message for an error.

    Args:
        error_type: Taxonomy branch of the error
        code: Specific error code
        field: Optional wire field name for field-specific messages

    Returns:
        The most specific message available, falling back to the generic
        unknown-error message.
    """
    if isinstance(field, str) and code in FIELD_ERROR_MESSAGES.get(field, {}):
        return FIELD_ERROR_MESSAGES[field][code]

    by_code = DEFAULT_ERROR_MESSAGES.get(error_type, {})
    if code in by_code:
        return by_code[code]

    return DEFAULT_ERROR_MESSAGES[ErrorType.UNKNOWN][ErrorCode.UNKNOWN_ERROR]


FIELD_LABELS: Dict[str, str] = {
    "eventId": "Event ID",
    "accountId": "Account ID",
    "barcode": "Barcode",
    "customerName": "Customer name",
    "spotType": "Spot type",
    "lotId": "Lot ID",
}


def get_missing_field_message(field: str) -> str:
    """Message for a required field that was left empty."""
    return f"{FIELD_LABELS.get(field, field)} is required."
