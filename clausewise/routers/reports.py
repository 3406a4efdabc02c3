import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from clausewise.auth import CurrentUser
from clausewise.dependencies import get_current_user, get_session
from clausewise.exceptions import (
    FeedbackAlreadySubmittedError,
    FeedbackNotFoundError,
    ReportNotFoundError,
    SuggestionNotFoundError,
)
from clausewise.repositories.feedback_repo import FeedbackRepository
from clausewise.routers.contracts import get_report_service
from clausewise.schemas.feedback import FeedbackCreate, FeedbackResponse
from clausewise.schemas.report import SuggestionResponseOut, SuggestionResponseUpsert
from clausewise.services.feedback_service import FeedbackService
from clausewise.services.report_service import ReportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


def get_feedback_service(
    session: AsyncSession = Depends(get_session),
    reports: ReportService = Depends(get_report_service),
) -> FeedbackService:
    return FeedbackService(reports, FeedbackRepository(session))


@router.get("/{report_id}/responses", response_model=list[SuggestionResponseOut])
async def list_suggestion_responses(
    report_id: uuid.UUID,
    user: CurrentUser = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    """The caller's answers to the report's suggestions."""
    try:
        return await service.list_responses(user, report_id)
    except ReportNotFoundError:
        raise HTTPException(status_code=404, detail=f"Report {report_id} not found.")


@router.put("/{report_id}/suggestions/{index}/response", response_model=SuggestionResponseOut)
async def respond_to_suggestion(
    payload: SuggestionResponseUpsert,
    report_id: uuid.UUID,
    index: int = Path(..., ge=0),
    user: CurrentUser = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    """Accept, reject or ask to discuss one suggestion. Re-answering overwrites."""
    try:
        return await service.respond_to_suggestion(user, report_id, index, payload)
    except ReportNotFoundError:
        raise HTTPException(status_code=404, detail=f"Report {report_id} not found.")
    except SuggestionNotFoundError as e:
        logger.warning(f"Suggestion response rejected: {e}")
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{report_id}/feedback", response_model=FeedbackResponse, status_code=status.HTTP_201_CREATED)
async def submit_feedback(
    payload: FeedbackCreate,
    report_id: uuid.UUID,
    user: CurrentUser = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
):
    """Submit feedback on a report. Allowed once per user and report."""
    try:
        return await service.submit(user, report_id, payload)
    except ReportNotFoundError:
        raise HTTPException(status_code=404, detail=f"Report {report_id} not found.")
    except FeedbackAlreadySubmittedError:
        logger.warning(f"Duplicate feedback rejected: report_id={report_id} user_id={user.id}")
        raise HTTPException(status_code=409, detail="Feedback for this report was already submitted.")


@router.get("/{report_id}/feedback", response_model=FeedbackResponse)
async def get_feedback(
    report_id: uuid.UUID,
    user: CurrentUser = Depends(get_current_user),
    service: FeedbackService = Depends(get_feedback_service),
):
    try:
        return await service.get(user, report_id)
    except (ReportNotFoundError, FeedbackNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
