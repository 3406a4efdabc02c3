import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

WillingnessToPay = Literal["yes_50_100", "yes_100_300", "yes_subscription", "undecided", "no"]


class FeedbackCreate(BaseModel):
    satisfaction_rating: int = Field(..., ge=1, le=5)
    efficiency_rating: int | None = Field(default=None, ge=1, le=5)
    willingness_to_pay: WillingnessToPay | None = None
    comments: str | None = None
    interview_available: bool = False


class FeedbackResponse(BaseModel):
    id: uuid.UUID
    report_id: uuid.UUID
    satisfaction_rating: int
    efficiency_rating: int | None
    willingness_to_pay: WillingnessToPay | None
    comments: str | None
    interview_available: bool
    created_at: datetime

    model_config = {"from_attributes": True}
