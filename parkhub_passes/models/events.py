from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ParkHubEvent(BaseModel):
    """An event record as returned by the API."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: Optional[str] = None
    date: Optional[str] = None
    venue: Optional[str] = None
    status: Optional[str] = None
    additional_details: Optional[Dict[str, Any]] = None
