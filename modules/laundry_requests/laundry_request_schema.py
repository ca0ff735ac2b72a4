from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RequestStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


# lifecycle order, used to spot backward moves
STATUS_SEQUENCE = [status.value for status in RequestStatus]


class TimeSlot(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class RequestDraft(BaseModel):
    """
    An unvalidated, unsaved pickup request.

    Field types are deliberately loose: whatever the customer typed is kept
    so the validation service can report it field by field. Drafts are
    immutable; use with_quantity / with_fields to derive a new one.
    """

    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    pickup_address: Optional[str] = None
    pickup_date: Optional[Union[str, date]] = None
    pickup_time_slot: Optional[str] = None
    special_instructions: Optional[str] = None
    quantities: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def with_quantity(self, service_id: str, quantity: Any) -> "RequestDraft":
        quantities = dict(self.quantities)
        quantities[str(service_id)] = quantity
        return self.model_copy(update={"quantities": quantities})

    def with_fields(self, **fields: Any) -> "RequestDraft":
        return self.model_copy(update=fields)

    def contact_fields(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"quantities"})


class RequestUpdateModel(BaseModel):
    status: Optional[RequestStatus] = None
    internal_notes: Optional[str] = Field(default=None, max_length=2000)


class BatchUpdateModel(BaseModel):
    request_ids: List[str] = Field(min_length=1)
    status: RequestStatus
    internal_notes: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("request_ids")
    @classmethod
    def strip_ids(cls, v: List[str]) -> List[str]:
        return [request_id.strip() for request_id in v if request_id and request_id.strip()]


class RequestFilters(BaseModel):
    status: str = "all"
    pickup_date: Optional[date] = None
    search: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        v = (v or "all").strip().lower()
        if v != "all" and v not in STATUS_SEQUENCE:
            raise ValueError(f"status must be 'all' or one of {', '.join(STATUS_SEQUENCE)}")
        return v
