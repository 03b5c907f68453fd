"""
Application error hierarchy.

Every failure surfaced by the client is one of the ``AppError`` variants
below. Each variant owns a fixed set of error codes; constructing a variant
with a code from another branch is a programming error and raises
``ValueError``.
"""

from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Optional, Type

from .codes import ErrorCode, ErrorType
from .messages import get_error_message


class AppError(Exception):
    """Base class for all classified ParkHub client errors."""

    error_type: ErrorType = ErrorType.UNKNOWN
    allowed_codes: FrozenSet[ErrorCode] = frozenset()

    def __init__(
        self,
        code: ErrorCode,
        message: Optional[str] = None,
        *,
        field: Optional[str] = None,
        timestamp: Optional[datetime] = None
    ):
        code = ErrorCode(code)
        if code not in self.allowed_codes:
            raise ValueError(
                f"{type(self).__name__} does not accept code '{code.value}'"
            )
        self.code = code
        self.message = message or get_error_message(self.error_type, code, field)
        self.timestamp = timestamp or datetime.now(timezone.utc)
        super().__init__(self.message)

    @property
    def type(self) -> ErrorType:
        return self.error_type

    @property
    def retryable(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a JSON-compatible dict (camelCase keys)."""
        data = {
            "type": self.error_type.value,
            "code": self.code.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "retryable": self.retryable,
        }
        data.update(self._extra_fields())
        return data

    def _extra_fields(self) -> Dict[str, Any]:
        return {}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppError":
        """Rebuild an error produced by ``to_dict``.

        Original exceptions are not restored; only their description survives.
        """
        error_type = ErrorType(data.get("type", ErrorType.UNKNOWN.value))
        target = _VARIANTS[error_type]
        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)
        return target._from_fields(data, timestamp)

    @classmethod
    def _from_fields(cls, data: Dict[str, Any], timestamp: Optional[datetime]) -> "AppError":
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, message={self.message!r})"


class NetworkError(AppError):
    """Connection-level failure; no HTTP response was received."""

    error_type = ErrorType.NETWORK
    allowed_codes = frozenset({ErrorCode.CONNECTION_ERROR, ErrorCode.TIMEOUT})

    def __init__(
        self,
        code: ErrorCode = ErrorCode.CONNECTION_ERROR,
        message: Optional[str] = None,
        *,
        retry_count: int = 0,
        original_error: Optional[BaseException] = None,
        timestamp: Optional[datetime] = None
    ):
        super().__init__(code, message, timestamp=timestamp)
        self.retry_count = retry_count
        self.original_error = original_error

    @property
    def retryable(self) -> bool:
        return True

    def _extra_fields(self) -> Dict[str, Any]:
        return {
            "retryCount": self.retry_count,
            "originalError": repr(self.original_error) if self.original_error else None,
        }

    @classmethod
    def _from_fields(cls, data, timestamp):
        return cls(
            data["code"],
            data.get("message"),
            retry_count=data.get("retryCount", 0),
            timestamp=timestamp,
        )


class AuthenticationError(AppError):
    """The API key is missing, invalid or rejected."""

    error_type = ErrorType.AUTHENTICATION
    allowed_codes = frozenset({ErrorCode.INVALID_API_KEY, ErrorCode.MISSING_API_KEY})

    def __init__(
        self,
        code: ErrorCode = ErrorCode.INVALID_API_KEY,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        timestamp: Optional[datetime] = None
    ):
        super().__init__(code, message, timestamp=timestamp)
        self.status_code = status_code

    def _extra_fields(self) -> Dict[str, Any]:
        return {"statusCode": self.status_code}

    @classmethod
    def _from_fields(cls, data, timestamp):
        return cls(
            data["code"],
            data.get("message"),
            status_code=data.get("statusCode"),
            timestamp=timestamp,
        )


class ValidationError(AppError):
    """The request was rejected because of its content."""

    error_type = ErrorType.VALIDATION
    allowed_codes = frozenset({ErrorCode.INVALID_INPUT, ErrorCode.DUPLICATE_BARCODE})

    def __init__(
        self,
        code: ErrorCode = ErrorCode.INVALID_INPUT,
        message: Optional[str] = None,
        *,
        field: Optional[str] = None,
        field_errors: Optional[Dict[str, str]] = None,
        status_code: Optional[int] = None,
        timestamp: Optional[datetime] = None
    ):
        super().__init__(code, message, field=field, timestamp=timestamp)
        self.field = field
        if field_errors is None:
            field_errors = {field: self.message} if isinstance(field, str) and field else {}
        self.field_errors = field_errors
        self.status_code = status_code

    def _extra_fields(self) -> Dict[str, Any]:
        return {
            "field": self.field,
            "fieldErrors": dict(self.field_errors),
            "statusCode": self.status_code,
        }

    @classmethod
    def _from_fields(cls, data, timestamp):
        return cls(
            data["code"],
            data.get("message"),
            field=data.get("field"),
            field_errors=data.get("fieldErrors"),
            status_code=data.get("statusCode"),
            timestamp=timestamp,
        )


class ServerError(AppError):
    """The service failed (5xx) or throttled the caller (429)."""

    error_type = ErrorType.SERVER
    allowed_codes = frozenset({ErrorCode.SERVER_ERROR, ErrorCode.RATE_LIMIT_EXCEEDED})

    def __init__(
        self,
        code: ErrorCode = ErrorCode.SERVER_ERROR,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        retryable: Optional[bool] = None,
        retry_after: Optional[float] = None,
        timestamp: Optional[datetime] = None
    ):
        super().__init__(code, message, timestamp=timestamp)
        self.status_code = status_code
        if retryable is None:
            retryable = (
                self.code == ErrorCode.RATE_LIMIT_EXCEEDED
                or (status_code is not None and status_code >= 500)
            )
        self._retryable = retryable
        self.retry_after = retry_after

    @property
    def retryable(self) -> bool:
        return self._retryable

    def _extra_fields(self) -> Dict[str, Any]:
        return {"statusCode": self.status_code, "retryAfter": self.retry_after}

    @classmethod
    def _from_fields(cls, data, timestamp):
        return cls(
            data["code"],
            data.get("message"),
            status_code=data.get("statusCode"),
            retryable=data.get("retryable"),
            retry_after=data.get("retryAfter"),
            timestamp=timestamp,
        )


class ClientError(AppError):
    """Any other client-side HTTP failure (e.g. 404)."""

    error_type = ErrorType.CLIENT
    allowed_codes = frozenset({ErrorCode.UNKNOWN_ERROR, ErrorCode.EVENT_NOT_FOUND})

    def __init__(
        self,
        code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        message: Optional[str] = None,
        *,
        status_code: Optional[int] = None,
        timestamp: Optional[datetime] = None
    ):
        super().__init__(code, message, timestamp=timestamp)
        self.status_code = status_code

    def _extra_fields(self) -> Dict[str, Any]:
        return {"statusCode": self.status_code}

    @classmethod
    def _from_fields(cls, data, timestamp):
        return cls(
            data["code"],
            data.get("message"),
            status_code=data.get("statusCode"),
            timestamp=timestamp,
        )


class UnknownError(AppError):
    """Anything the classifier could not place in another branch."""

    error_type = ErrorType.UNKNOWN
    allowed_codes = frozenset({ErrorCode.UNKNOWN_ERROR})

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        original_error: Optional[BaseException] = None,
        timestamp: Optional[datetime] = None
    ):
        super().__init__(ErrorCode.UNKNOWN_ERROR, message, timestamp=timestamp)
        self.original_error = original_error

    def _extra_fields(self) -> Dict[str, Any]:
        return {
            "originalError": repr(self.original_error) if self.original_error else None,
        }

    @classmethod
    def _from_fields(cls, data, timestamp):
        return cls(data.get("message"), timestamp=timestamp)


_VARIANTS: Dict[ErrorType, Type[AppError]] = {
    ErrorType.NETWORK: NetworkError,
    ErrorType.AUTHENTICATION: AuthenticationError,
    ErrorType.VALIDATION: ValidationError,
    ErrorType.SERVER: ServerError,
    ErrorType.CLIENT: ClientError,
    ErrorType.UNKNOWN: UnknownError,
}
