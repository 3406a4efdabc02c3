import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clausewise.exceptions import FeedbackAlreadySubmittedError
from clausewise.models.feedback import ReportFeedback


class FeedbackRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, report_id: uuid.UUID, user_id: uuid.UUID) -> ReportFeedback | None:
        result = await self.session.execute(
            select(ReportFeedback)
            .where(ReportFeedback.report_id == report_id)
            .where(ReportFeedback.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def create(self, report_id: uuid.UUID, user_id: uuid.UUID, **fields) -> ReportFeedback:
        """Insert feedback. The unique (report_id, user_id) constraint makes it write-once."""
        feedback = ReportFeedback(report_id=report_id, user_id=user_id, **fields)
        self.session.add(feedback)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise FeedbackAlreadySubmittedError(str(report_id)) from e
        await self.session.refresh(feedback)
        return feedback

    async def stats(self) -> tuple[int, float | None]:
        """Return (feedback count, mean satisfaction rating)."""
        result = await self.session.execute(
            select(func.count(ReportFeedback.id), func.avg(ReportFeedback.satisfaction_rating))
        )
        count, average = result.one()
        return count, float(average) if average is not None else None
