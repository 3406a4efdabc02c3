import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from clausewise.auth import CurrentUser
from clausewise.dependencies import get_session, require_admin, require_operator
from clausewise.exceptions import (
    ContractExpiredError,
    ContractNotFoundError,
    InvalidStatusTransitionError,
)
from clausewise.models.contract import ContractStatus
from clausewise.repositories.contract_repo import ContractRepository
from clausewise.repositories.feedback_repo import FeedbackRepository
from clausewise.repositories.report_repo import ReportRepository
from clausewise.routers.contracts import get_contract_service, get_report_service
from clausewise.schemas.contract import ContractResponse, ContractStatusUpdate
from clausewise.schemas.profile import AnalyticsResponse
from clausewise.schemas.report import ReviewReportResponse, ReviewReportUpsert
from clausewise.services.contract_service import ContractService
from clausewise.services.profile_service import AnalyticsService
from clausewise.services.report_service import ReportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Operator Queue"])


def get_analytics_service(session: AsyncSession = Depends(get_session)) -> AnalyticsService:
    return AnalyticsService(
        ContractRepository(session), ReportRepository(session), FeedbackRepository(session)
    )


@router.get("/contracts", response_model=list[ContractResponse])
async def list_queue(
    status: ContractStatus | None = None,
    operator: CurrentUser = Depends(require_operator),
    service: ContractService = Depends(get_contract_service),
):
    """All contracts, newest first, optionally filtered by status."""
    return await service.list_queue(status)


@router.patch("/contracts/{contract_id}/status", response_model=ContractResponse)
async def update_contract_status(
    contract_id: uuid.UUID,
    payload: ContractStatusUpdate,
    operator: CurrentUser = Depends(require_operator),
    service: ContractService = Depends(get_contract_service),
):
    """Move a contract forward in the review workflow."""
    logger.info(f"Status change requested: contract_id={contract_id} target={payload.status} by={operator.id}")
    try:
        return await service.advance_status(contract_id, payload.status)
    except ContractNotFoundError:
        raise HTTPException(status_code=404, detail=f"Contract {contract_id} not found.")
    except InvalidStatusTransitionError as e:
        logger.warning(f"Status change rejected: {e}")
        raise HTTPException(status_code=409, detail=str(e))


@router.put("/contracts/{contract_id}/report", response_model=ReviewReportResponse)
async def save_report(
    contract_id: uuid.UUID,
    payload: ReviewReportUpsert,
    operator: CurrentUser = Depends(require_operator),
    service: ReportService = Depends(get_report_service),
):
    """Create or replace the review report and mark the contract completed."""
    try:
        return await service.save_report(operator, contract_id, payload)
    except ContractNotFoundError:
        raise HTTPException(status_code=404, detail=f"Contract {contract_id} not found.")
    except ContractExpiredError as e:
        logger.warning(f"Report save rejected — contract expired: contract_id={contract_id}")
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/analytics", response_model=AnalyticsResponse)
async def analytics(
    admin: CurrentUser = Depends(require_admin),
    service: AnalyticsService = Depends(get_analytics_service),
):
    return await service.summary()
