import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from clausewise.models.contract import ContractStatus, ContractType


class ContractUploadResponse(BaseModel):
    """Returned immediately after a successful upload."""
    id: uuid.UUID
    file_name: str
    contract_type: ContractType
    status: ContractStatus
    expires_at: datetime
    message: str = "Contract uploaded. An operator will review it shortly."

    model_config = {"from_attributes": True}


class ContractResponse(BaseModel):
    """Full contract details including review status and retention deadline."""
    id: uuid.UUID
    user_id: uuid.UUID
    file_name: str
    contract_type: ContractType
    status: ContractStatus
    uploaded_at: datetime
    expires_at: datetime
    file_deleted_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class ContractStatusUpdate(BaseModel):
    # expired is reachable only through the retention sweeper
    status: Literal["processing", "completed"]
