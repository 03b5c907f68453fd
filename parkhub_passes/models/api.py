"""Response envelope models."""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..reliability.errors import AppError

T = TypeVar("T")


class ApiErrorBody(BaseModel):
    """Error object inside a failed envelope."""
    code: str
    message: str = ""
    field: Optional[str] = None

    @classmethod
    def from_app_error(cls, error: AppError) -> "ApiErrorBody":
        return cls(
            code=error.code.value,
            message=error.message,
            field=getattr(error, "field", None),
        )


class ApiResponse(BaseModel, Generic[T]):
    """
    Uniform ``{success, data, error}`` envelope.

    ``app_error`` carries the classified error of a failed call and is never
    serialised.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool
    data: Optional[T] = None
    error: Optional[ApiErrorBody] = None
    app_error: Optional[AppError] = Field(default=None, exclude=True, repr=False)

    @staticmethod
    def is_envelope(body: Any) -> bool:
        """True when ``body`` already has the envelope shape."""
        return isinstance(body, dict) and isinstance(body.get("success"), bool)

    @classmethod
    def from_body(cls, body: Any) -> "ApiResponse":
        """
        Wrap a successful response body, keeping envelopes as they are.

        An envelope without a ``data`` key (e.g. ``{"success": true,
        "passId": "..."}``) keeps its remaining keys as ``data``.
        """
        if cls.is_envelope(body):
            error = body.get("error") or None
            if isinstance(error, str):
                error = {"code": "unknown_error", "message": error}
            if "data" in body:
                data = body["data"]
            else:
                data = {k: v for k, v in body.items() if k not in ("success", "error")} or None
            return cls(success=body["success"], data=data, error=error)
        return cls(success=True, data=body, error=None)

    @classmethod
    def failure(cls, error: AppError) -> "ApiResponse":
        return cls(
            success=False,
            data=None,
            error=ApiErrorBody.from_app_error(error),
            app_error=error,
        )
