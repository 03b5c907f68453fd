"""Per-item outcomes and batch summaries."""

from typing import Any, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    computed_field,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from ..reliability.errors import AppError
from .passes import SpotType


class CreationSuccess(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    pass_id: str
    barcode: str
    customer_name: Optional[str] = None


class CreationFailure(BaseModel):
    """A request that did not produce a pass, with the classified reason."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        arbitrary_types_allowed=True,
    )

    barcode: str
    customer_name: Optional[str] = None
    error: AppError

    @field_validator("error", mode="before")
    def load_error(cls, v):
        if isinstance(v, dict):
            return AppError.from_dict(v)
        return v

    @field_serializer("error")
    def dump_error(self, error: AppError):
        return error.to_dict()


CreationOutcome = Union[CreationSuccess, CreationFailure]


class BatchSummary(BaseModel):
    """
    Reconciled result of one batch run.

    Immutable; a retry produces a new summary.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    event_id: Optional[str] = None
    successful: Tuple[CreationSuccess, ...] = ()
    failed: Tuple[CreationFailure, ...] = ()

    @computed_field(alias="totalSuccess")
    @property
    def total_success(self) -> int:
        return len(self.successful)

    @computed_field(alias="totalFailed")
    @property
    def total_failed(self) -> int:
        return len(self.failed)

    @computed_field
    @property
    def total(self) -> int:
        return self.total_success + self.total_failed

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_json_dict(cls, data: Any) -> "BatchSummary":
        """Load a saved summary; computed totals in the input are ignored."""
        return cls.model_validate(data)


class ReferenceDefaults(BaseModel):
    """Fallback values used when rebuilding retry requests."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    event_id: Optional[str] = None
    account_id: Optional[str] = None
    spot_type: Optional[SpotType] = None
    lot_id: Optional[str] = None
