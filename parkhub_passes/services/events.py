"""Event listing endpoint."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..config.constants import EVENTS_PATH
from ..http.client import AuthenticatedClient
from ..models.api import ApiResponse
from ..models.events import ParkHubEvent
from ..reliability.errors import UnknownError


class EventsApi:
    """Read access to ParkHub events."""

    def __init__(self, client: AuthenticatedClient):
        self.client = client

    async def get_events(
        self,
        landmark_id: Optional[str] = None,
        date_from: Optional[str] = None
    ) -> ApiResponse[List[ParkHubEvent]]:
        """
        List events for a landmark starting at ``date_from``.

        Args:
            landmark_id: Landmark to query (defaults to the configured one)
            date_from: ISO timestamp lower bound (defaults to now)

        Returns:
            Envelope with the parsed events, or a failed envelope
        """
        landmark = landmark_id or self.client.config.landmark_id
        if date_from is None:
            date_from = datetime.now(timezone.utc).isoformat()

        response = await self.client.get(
            EVENTS_PATH.format(landmark=landmark),
            params={"landMarkId": landmark, "dateFrom": date_from},
        )
        if not response.success:
            return response

        try:
            events = [ParkHubEvent.model_validate(item) for item in response.data or []]
        except (PydanticValidationError, TypeError) as exc:
            return ApiResponse.failure(
                UnknownError("Unexpected event data from ParkHub.", original_error=exc)
            )
        return ApiResponse[List[ParkHubEvent]](success=True, data=events)
