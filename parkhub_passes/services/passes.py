"""Pass listing and single-pass creation endpoints."""

from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..config.constants import CREATE_PASS_PATH, PASSES_PATH
from ..http.client import AuthenticatedClient
from ..models.api import ApiResponse
from ..models.passes import CreationRequest, ParkHubPass
from ..models.results import CreationSuccess
from ..reliability.codes import ErrorCode
from ..reliability.errors import UnknownError, ValidationError
from ..reliability.messages import get_missing_field_message


class PassesApi:
    """Pass listing and creation."""

    def __init__(self, client: AuthenticatedClient):
        self.client = client

    async def get_passes_for_event(
        self,
        event_id: str,
        landmark_id: Optional[str] = None
    ) -> ApiResponse[List[ParkHubPass]]:
        """List the passes of one event."""
        if not event_id or not event_id.strip():
            raise ValueError("event_id is required")

        landmark = landmark_id or self.client.config.landmark_id
        response = await self.client.get(
            PASSES_PATH.format(landmark=landmark),
            params={"landMarkId": landmark, "eventId": event_id.strip()},
        )
        if not response.success:
            return response

        try:
            passes = [ParkHubPass.model_validate(item) for item in response.data or []]
        except (PydanticValidationError, TypeError) as exc:
            return ApiResponse.failure(
                UnknownError("Unexpected pass data from ParkHub.", original_error=exc)
            )
        return ApiResponse[List[ParkHubPass]](success=True, data=passes)

    async def create_pass(self, request: CreationRequest) -> CreationSuccess:
        """
        Create one pass.

        Incomplete requests are rejected locally, before any network call.

        Raises:
            ValidationError: A required field is missing, or the API
                rejected the request
            AppError: Any other classified failure
        """
        self.validate(request)

        landmark = self.client.config.landmark_id
        response = await self.client.post(
            CREATE_PASS_PATH.format(landmark=landmark),
            request.to_payload(),
            raise_errors=True,
        )

        pass_id = self._extract_pass_id(response.data)
        if not pass_id:
            raise UnknownError("Pass creation succeeded but no pass ID was returned.")

        return CreationSuccess(
            pass_id=pass_id,
            barcode=request.barcode,
            customer_name=request.customer_name,
        )

    @staticmethod
    def validate(request: CreationRequest) -> None:
        """Raise ``ValidationError`` naming the first missing field."""
        missing = request.missing_fields()
        if not missing:
            return
        raise ValidationError(
            ErrorCode.INVALID_INPUT,
            get_missing_field_message(missing[0]),
            field=missing[0],
            field_errors={name: get_missing_field_message(name) for name in missing},
        )

    @staticmethod
    def _extract_pass_id(data) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        pass_id = data.get("passId") or data.get("id")
        if not pass_id and isinstance(data.get("data"), dict):
            pass_id = data["data"].get("passId") or data["data"].get("id")
        return str(pass_id) if pass_id else None
