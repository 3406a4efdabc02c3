import uuid
from datetime import datetime

from pydantic import BaseModel


class ProfileResponse(BaseModel):
    user_id: uuid.UUID
    email: str | None
    display_name: str | None
    agreement_signed: bool
    agreement_signed_at: datetime | None
    roles: list[str] = []

    model_config = {"from_attributes": True}


class AnalyticsResponse(BaseModel):
    total_contracts: int
    completed_reports: int
    feedback_count: int
    avg_satisfaction: float
