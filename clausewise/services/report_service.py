import logging
import uuid

from clausewise.auth import CurrentUser
from clausewise.exceptions import (
    ContractExpiredError,
    ContractNotFoundError,
    ReportNotFoundError,
    SuggestionNotFoundError,
)
from clausewise.models.contract import ContractStatus
from clausewise.models.review_report import ReviewReport
from clausewise.repositories.contract_repo import ContractRepository
from clausewise.repositories.report_repo import ReportRepository
from clausewise.repositories.suggestion_response_repo import SuggestionResponseRepository
from clausewise.schemas.report import (
    ReviewReportResponse,
    ReviewReportUpsert,
    SuggestionResponseOut,
    SuggestionResponseUpsert,
)

logger = logging.getLogger(__name__)


class ReportService:
    def __init__(
        self,
        contracts: ContractRepository,
        reports: ReportRepository,
        responses: SuggestionResponseRepository,
    ):
        self.contracts = contracts
        self.reports = reports
        self.responses = responses

    async def save_report(
        self, operator: CurrentUser, contract_id: uuid.UUID, payload: ReviewReportUpsert
    ) -> ReviewReportResponse:
        """Create or replace a contract's report and mark the contract completed."""
        contract = await self.contracts.get_by_id(contract_id)
        if not contract:
            raise ContractNotFoundError(str(contract_id))
        if contract.status == ContractStatus.EXPIRED.value:
            raise ContractExpiredError(str(contract_id))

        # Status first: if the sweeper expired the row since the read, nothing is written
        if await self.contracts.set_status(contract_id, ContractStatus.COMPLETED.value) is None:
            logger.warning(f"Report save rejected, contract {contract_id} expired during the request")
            raise ContractExpiredError(str(contract_id))

        report = await self.reports.upsert(
            contract_id,
            operator_id=operator.id,
            overall_risk_level=payload.overall_risk_level,
            summary=payload.summary,
            contract_overview=payload.contract_overview.model_dump(),
            risk_clauses=[c.model_dump() for c in payload.risk_clauses],
            suggestions=[s.model_dump() for s in payload.suggestions],
        )

        logger.info(
            f"Report {report.id} saved for contract {contract_id} by operator {operator.id}: "
            f"{len(payload.risk_clauses)} clauses, {len(payload.suggestions)} suggestions"
        )
        return ReviewReportResponse.model_validate(report)

    async def get_report_for_contract(
        self, user: CurrentUser, contract_id: uuid.UUID
    ) -> ReviewReportResponse:
        contract = await self.contracts.get_by_id(contract_id)
        if not contract or (contract.user_id != user.id and not user.is_operator):
            raise ContractNotFoundError(str(contract_id))
        report = await self.reports.get_by_contract_id(contract_id)
        if not report:
            raise ReportNotFoundError(f"for contract {contract_id}")
        return ReviewReportResponse.model_validate(report)

    async def respond_to_suggestion(
        self,
        user: CurrentUser,
        report_id: uuid.UUID,
        index: int,
        payload: SuggestionResponseUpsert,
    ) -> SuggestionResponseOut:
        report = await self.get_owned_report(user, report_id)
        if index < 0 or index >= len(report.suggestions or []):
            raise SuggestionNotFoundError(str(report_id), index)

        response = await self.responses.upsert(
            report_id=report_id,
            suggestion_index=index,
            user_id=user.id,
            action=payload.action,
            reason=payload.reason,
        )
        logger.info(f"User {user.id} answered suggestion {index} of report {report_id}: {payload.action}")
        return SuggestionResponseOut.model_validate(response)

    async def list_responses(
        self, user: CurrentUser, report_id: uuid.UUID
    ) -> list[SuggestionResponseOut]:
        await self.get_owned_report(user, report_id)
        responses = await self.responses.list_for_user(report_id, user.id)
        return [SuggestionResponseOut.model_validate(r) for r in responses]

    async def get_owned_report(self, user: CurrentUser, report_id: uuid.UUID) -> ReviewReport:
        """Load a report whose contract belongs to the caller."""
        report = await self.reports.get_by_id(report_id)
        if not report:
            raise ReportNotFoundError(str(report_id))
        contract = await self.contracts.get_by_id(report.contract_id)
        if not contract or contract.user_id != user.id:
            raise ReportNotFoundError(str(report_id))
        return report
