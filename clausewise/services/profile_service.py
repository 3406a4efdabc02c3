import logging
from datetime import datetime, timezone

from clausewise.auth import CurrentUser
from clausewise.repositories.contract_repo import ContractRepository
from clausewise.repositories.feedback_repo import FeedbackRepository
from clausewise.repositories.profile_repo import ProfileRepository
from clausewise.repositories.report_repo import ReportRepository
from clausewise.schemas.profile import AnalyticsResponse, ProfileResponse

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, repo: ProfileRepository):
        self.repo = repo

    async def get_profile(self, user: CurrentUser) -> ProfileResponse:
        profile = await self.repo.get_or_create(user.id, user.email)
        return self._to_response(profile, user)

    async def sign_agreement(self, user: CurrentUser) -> ProfileResponse:
        """Record the service agreement signature. Re-signing keeps the first timestamp."""
        profile = await self.repo.get_or_create(user.id, user.email)
        if not profile.agreement_signed:
            profile.agreement_signed = True
            profile.agreement_signed_at = datetime.now(timezone.utc)
            await self.repo.session.flush()
            await self.repo.session.refresh(profile)
            logger.info(f"User {user.id} signed the service agreement")
        return self._to_response(profile, user)

    @staticmethod
    def _to_response(profile, user: CurrentUser) -> ProfileResponse:
        response = ProfileResponse.model_validate(profile)
        response.roles = sorted(user.roles)
        return response


class AnalyticsService:
    def __init__(
        self,
        contracts: ContractRepository,
        reports: ReportRepository,
        feedback: FeedbackRepository,
    ):
        self.contracts = contracts
        self.reports = reports
        self.feedback = feedback

    async def summary(self) -> AnalyticsResponse:
        feedback_count, average = await self.feedback.stats()
        return AnalyticsResponse(
            total_contracts=await self.contracts.count(),
            completed_reports=await self.reports.count(),
            feedback_count=feedback_count,
            avg_satisfaction=round(average, 1) if average is not None else 0.0,
        )
