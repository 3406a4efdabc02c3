import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

RiskLevel = Literal["high", "medium", "low"]


class ContractOverview(BaseModel):
    contract_type: str | None = None
    party_a: str | None = None
    party_b: str | None = None
    signing_date: str | None = None
    term: str | None = None

    model_config = {"extra": "forbid"}


class RiskClause(BaseModel):
    title: str = Field(..., max_length=500)
    level: RiskLevel
    description: str
    original_text: str | None = None

    model_config = {"extra": "forbid"}


class Suggestion(BaseModel):
    issue: str
    suggestion: str
    reason: str

    model_config = {"extra": "forbid"}


class ReviewReportUpsert(BaseModel):
    """Operator input for creating or replacing a contract's review report."""
    overall_risk_level: RiskLevel = "medium"
    summary: str | None = None
    contract_overview: ContractOverview = Field(default_factory=ContractOverview)
    risk_clauses: list[RiskClause] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)


class ReviewReportResponse(BaseModel):
    id: uuid.UUID
    contract_id: uuid.UUID
    operator_id: uuid.UUID
    overall_risk_level: RiskLevel
    summary: str | None
    contract_overview: ContractOverview
    risk_clauses: list[RiskClause]
    suggestions: list[Suggestion]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


SuggestionAction = Literal["accept", "reject", "discuss"]


class SuggestionResponseUpsert(BaseModel):
    action: SuggestionAction
    reason: str | None = None


class SuggestionResponseOut(BaseModel):
    id: uuid.UUID
    report_id: uuid.UUID
    suggestion_index: int
    action: SuggestionAction
    reason: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
