"""
Pass creation requests and pass records.

Requests accept operator input as-is; required fields are only checked
before dispatch (see ``CreationRequest.missing_fields``).
"""

from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class SpotType(str, Enum):
    """Parking spot categories accepted by ParkHub."""
    REGULAR = "Regular"
    VIP = "VIP"
    PREMIUM = "Premium"


class CreationRequest(BaseModel):
    """
    One "create a pass" request.

    Only ``barcode`` is required at construction so incomplete operator input
    can be represented; ``missing_fields()`` reports what must be filled in
    before the request can be sent.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    event_id: Optional[str] = None
    account_id: Optional[str] = None
    barcode: str
    customer_name: Optional[str] = None
    spot_type: Optional[SpotType] = None
    lot_id: Optional[str] = None

    # Wire order of the POST body
    REQUIRED_FIELDS: ClassVar[Tuple[str, ...]] = (
        "event_id", "account_id", "barcode", "customer_name", "spot_type", "lot_id"
    )

    @field_validator("event_id", "account_id", "barcode", "customer_name", "lot_id", mode="before")
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("spot_type", mode="before")
    def normalize_spot_type(cls, v):
        if v is None or isinstance(v, SpotType):
            return v
        text = str(v).strip()
        if not text:
            return None
        for member in SpotType:
            if member.value.lower() == text.lower():
                return member
        return text

    def missing_fields(self) -> List[str]:
        """camelCase names of required fields that are empty, in wire order."""
        return [
            to_camel(name)
            for name in self.REQUIRED_FIELDS
            if getattr(self, name) in (None, "")
        ]

    def to_payload(self) -> Dict[str, Any]:
        """POST body for pass creation."""
        return self.model_dump(by_alias=True, mode="json")


class ParkHubPass(BaseModel):
    """A pass record as returned by the API."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    event_id: Optional[str] = None
    account_id: Optional[str] = None
    barcode: Optional[str] = None
    customer_name: Optional[str] = None
    spot_type: Optional[str] = None
    lot_id: Optional[str] = None
    created_at: Optional[str] = None
    status: Optional[str] = None
    additional_details: Optional[Dict[str, Any]] = Field(default=None)
