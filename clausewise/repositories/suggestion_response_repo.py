import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clausewise.models.suggestion_response import SuggestionResponse


class SuggestionResponseRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(
        self, report_id: uuid.UUID, suggestion_index: int, user_id: uuid.UUID
    ) -> SuggestionResponse | None:
        result = await self.session.execute(
            select(SuggestionResponse)
            .where(SuggestionResponse.report_id == report_id)
            .where(SuggestionResponse.suggestion_index == suggestion_index)
            .where(SuggestionResponse.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def list_for_user(
        self, report_id: uuid.UUID, user_id: uuid.UUID
    ) -> list[SuggestionResponse]:
        result = await self.session.execute(
            select(SuggestionResponse)
            .where(SuggestionResponse.report_id == report_id)
            .where(SuggestionResponse.user_id == user_id)
            .order_by(SuggestionResponse.suggestion_index)
        )
        return list(result.scalars().all())

    async def upsert(
        self,
        report_id: uuid.UUID,
        suggestion_index: int,
        user_id: uuid.UUID,
        action: str,
        reason: str | None,
    ) -> SuggestionResponse:
        """Insert or overwrite the user's response to one suggestion. Latest write wins."""
        response = await self.get(report_id, suggestion_index, user_id)
        if response is None:
            response = SuggestionResponse(
                report_id=report_id,
                suggestion_index=suggestion_index,
                user_id=user_id,
                action=action,
                reason=reason,
            )
            self.session.add(response)
        else:
            response.action = action
            response.reason = reason
        await self.session.flush()
        await self.session.refresh(response)
        return response
