import logging
import uuid

from clausewise.auth import CurrentUser
from clausewise.exceptions import FeedbackAlreadySubmittedError, FeedbackNotFoundError
from clausewise.repositories.feedback_repo import FeedbackRepository
from clausewise.schemas.feedback import FeedbackCreate, FeedbackResponse
from clausewise.services.report_service import ReportService

logger = logging.getLogger(__name__)


class FeedbackService:
    """Write-once satisfaction feedback on a review report."""

    def __init__(self, reports: ReportService, repo: FeedbackRepository):
        self.reports = reports
        self.repo = repo

    async def submit(
        self, user: CurrentUser, report_id: uuid.UUID, payload: FeedbackCreate
    ) -> FeedbackResponse:
        await self.reports.get_owned_report(user, report_id)

        if await self.repo.get(report_id, user.id):
            raise FeedbackAlreadySubmittedError(str(report_id))

        # A concurrent duplicate still trips the unique constraint inside create()
        feedback = await self.repo.create(report_id, user.id, **payload.model_dump())
        logger.info(
            f"Feedback submitted for report {report_id}: satisfaction={payload.satisfaction_rating}"
        )
        return FeedbackResponse.model_validate(feedback)

    async def get(self, user: CurrentUser, report_id: uuid.UUID) -> FeedbackResponse:
        await self.reports.get_owned_report(user, report_id)
        feedback = await self.repo.get(report_id, user.id)
        if not feedback:
            raise FeedbackNotFoundError(str(report_id))
        return FeedbackResponse.model_validate(feedback)
