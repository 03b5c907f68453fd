"""
Error classification for ParkHub API calls.

Maps any raw failure (transport exceptions, HTTP error responses, error
envelopes returned with a 2xx status, arbitrary exceptions) onto exactly one
``AppError`` variant.
"""

import asyncio
from typing import Any, Dict, Optional, Tuple, Union

import httpx

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


class ErrorClassifier:
    """Classifies raw failures into the application error taxonomy."""

    VALIDATION_STATUS_CODES = {400, 422}
    # 4xx statuses whose meaning wins over a duplicate_barcode body code
    RESERVED_STATUS_CODES = {401, 403, 429}

    # Which variant owns each code, for envelope errors
    CODE_OWNERS = {
        ErrorCode.CONNECTION_ERROR: ErrorType.NETWORK,
        ErrorCode.TIMEOUT: ErrorType.NETWORK,
        ErrorCode.INVALID_API_KEY: ErrorType.AUTHENTICATION,
        ErrorCode.MISSING_API_KEY: ErrorType.AUTHENTICATION,
        ErrorCode.INVALID_INPUT: ErrorType.VALIDATION,
        ErrorCode.DUPLICATE_BARCODE: ErrorType.VALIDATION,
        ErrorCode.SERVER_ERROR: ErrorType.SERVER,
        ErrorCode.RATE_LIMIT_EXCEEDED: ErrorType.SERVER,
        ErrorCode.EVENT_NOT_FOUND: ErrorType.CLIENT,
        ErrorCode.UNKNOWN_ERROR: ErrorType.UNKNOWN,
    }

    @classmethod
    def classify(cls, raw: BaseException) -> AppError:
        """
        Classify a raw failure.

        Never raises. An ``AppError`` is returned unchanged, so classifying
        twice yields the same object.

        Args:
            raw: The exception raised by a call

        Returns:
            The matching AppError variant
        """
        if isinstance(raw, AppError):
            return raw

        if isinstance(raw, httpx.HTTPStatusError):
            return cls.classify_response(raw.response)

        if isinstance(raw, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
            return NetworkError(ErrorCode.TIMEOUT, original_error=raw)

        if isinstance(raw, (httpx.RequestError, ConnectionError)):
            return NetworkError(ErrorCode.CONNECTION_ERROR, original_error=raw)

        return UnknownError(str(raw) or None, original_error=raw)

    @classmethod
    def classify_response(cls, response: httpx.Response) -> AppError:
        """Classify a non-2xx HTTP response."""
        status = response.status_code
        body_code, message, field = cls._extract_body_error(response)

        if status == 401:
            return AuthenticationError(
                ErrorCode.INVALID_API_KEY, message, status_code=status
            )
        if status == 403:
            return AuthenticationError(
                ErrorCode.MISSING_API_KEY, message, status_code=status
            )

        if (
            400 <= status < 500
            and status not in cls.RESERVED_STATUS_CODES
            and body_code == ErrorCode.DUPLICATE_BARCODE.value
        ):
            return ValidationError(
                ErrorCode.DUPLICATE_BARCODE,
                message,
                field=field or "barcode",
                status_code=status,
            )

        if status in cls.VALIDATION_STATUS_CODES:
            return ValidationError(
                ErrorCode.INVALID_INPUT, message, field=field, status_code=status
            )

        if status == 429:
            return ServerError(
                ErrorCode.RATE_LIMIT_EXCEEDED,
                message,
                status_code=status,
                retryable=True,
                retry_after=cls.get_retry_after(response),
            )

        if status >= 500:
            return ServerError(
                ErrorCode.SERVER_ERROR, message, status_code=status, retryable=True
            )

        if body_code == ErrorCode.EVENT_NOT_FOUND.value:
            return ClientError(ErrorCode.EVENT_NOT_FOUND, message, status_code=status)
        return ClientError(ErrorCode.UNKNOWN_ERROR, message, status_code=status)

    @classmethod
    def from_api_error(
        cls,
        body_error: Union[Dict[str, Any], Any, None],
        status_code: Optional[int] = None
    ) -> AppError:
        """
        Classify an error envelope (``{"success": false, "error": {...}}``).

        The variant is chosen by the error code; unknown codes become
        ``UnknownError``.
        """
        if body_error is None:
            return UnknownError()
        if not isinstance(body_error, dict):
            body_error = body_error.model_dump() if hasattr(body_error, "model_dump") else {}

        raw_code = str(body_error.get("code") or "").lower()
        message = _as_text(body_error.get("message"))
        field = _as_text(body_error.get("field"))

        try:
            code = ErrorCode(raw_code)
        except ValueError:
            return UnknownError(message)

        owner = cls.CODE_OWNERS[code]
        if owner == ErrorType.NETWORK:
            return NetworkError(code, message)
        if owner == ErrorType.AUTHENTICATION:
            return AuthenticationError(code, message, status_code=status_code)
        if owner == ErrorType.VALIDATION:
            return ValidationError(code, message, field=field, status_code=status_code)
        if owner == ErrorType.SERVER:
            return ServerError(code, message, status_code=status_code, retryable=True)
        if owner == ErrorType.CLIENT:
            return ClientError(code, message, status_code=status_code)
        return UnknownError(message)

    @staticmethod
    def get_retry_after(response: httpx.Response) -> Optional[float]:
        """Numeric Retry-After header in seconds, if present."""
        retry_after = response.headers.get("Retry-After")
        if retry_after:
            try:
                return float(retry_after)
            except ValueError:
                return None
        return None

    @staticmethod
    def _extract_body_error(
        response: httpx.Response
    ) -> Tuple[Optional[str], Optional[str], Optional[str]]:
        """Return (code, message, field) from an error body, best effort."""
        try:
            body = response.json()
        except Exception:  # noqa: BLE001 - non-JSON error bodies are common
            return None, None, None

        if not isinstance(body, dict):
            return None, None, None

        error = body.get("error")
        if isinstance(error, str):
            return None, error or None, _as_text(body.get("field"))

        source = error if isinstance(error, dict) else body
        code = _as_text(source.get("code"))
        return (
            code.lower() if code else None,
            _as_text(source.get("message")),
            _as_text(source.get("field")),
        )


def _as_text(value: Any) -> Optional[str]:
    """Non-empty scalar as a string; lists, dicts and blanks become None."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    text = str(value).strip()
    return text or None
