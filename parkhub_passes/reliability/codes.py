"""Error taxonomy enums."""

from enum import Enum


class ErrorType(str, Enum):
    """Taxonomy branches for application errors."""
    NETWORK = "network"
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    SERVER = "server"
    CLIENT = "client"
    UNKNOWN = "unknown"


class ErrorCode(str, Enum):
    """Specific error codes, as sent by the ParkHub API."""
    CONNECTION_ERROR = "connection_error"
    TIMEOUT = "timeout"
    INVALID_API_KEY = "invalid_api_key"
    MISSING_API_KEY = "missing_api_key"
    INVALID_INPUT = "invalid_input"
    DUPLICATE_BARCODE = "duplicate_barcode"
    EVENT_NOT_FOUND = "event_not_found"
    SERVER_ERROR = "server_error"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    UNKNOWN_ERROR = "unknown_error"
