import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from clausewise.models.review_report import ReviewReport


class ReportRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, report_id: uuid.UUID) -> ReviewReport | None:
        result = await self.session.execute(
            select(ReviewReport).where(ReviewReport.id == report_id)
        )
        return result.scalar_one_or_none()

    async def get_by_contract_id(self, contract_id: uuid.UUID) -> ReviewReport | None:
        result = await self.session.execute(
            select(ReviewReport).where(ReviewReport.contract_id == contract_id)
        )
        return result.scalar_one_or_none()

    async def upsert(self, contract_id: uuid.UUID, **fields) -> ReviewReport:
        """Create the contract's report or overwrite the existing one in place."""
        report = await self.get_by_contract_id(contract_id)
        if report is None:
            report = ReviewReport(contract_id=contract_id, **fields)
            self.session.add(report)
        else:
            for key, value in fields.items():
                setattr(report, key, value)
        await self.session.flush()
        await self.session.refresh(report)
        return report

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(ReviewReport))
        return result.scalar_one()
