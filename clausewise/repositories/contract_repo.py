import uuid
from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from clausewise.models.contract import Contract, ContractStatus


class ContractRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, **kwargs) -> Contract:
        contract = Contract(**kwargs)
        self.session.add(contract)
        await self.session.flush()
        await self.session.refresh(contract)
        return contract

    async def get_by_id(self, contract_id: uuid.UUID) -> Contract | None:
        result = await self.session.execute(
            select(Contract).where(Contract.id == contract_id)
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: uuid.UUID) -> list[Contract]:
        result = await self.session.execute(
            select(Contract)
            .where(Contract.user_id == user_id)
            .order_by(Contract.uploaded_at.desc())
        )
        return list(result.scalars().all())

    async def list_all(self, status: str | None = None) -> list[Contract]:
        query = select(Contract).order_by(Contract.uploaded_at.desc())
        if status:
            query = query.where(Contract.status == status)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Contract))
        return result.scalar_one()

    async def get_status(self, contract_id: uuid.UUID) -> str | None:
        result = await self.session.execute(
            select(Contract.status).where(Contract.id == contract_id)
        )
        return result.scalar_one_or_none()

    async def set_status(
        self, contract_id: uuid.UUID, status: str, expected: str | None = None
    ) -> Contract | None:
        """Operator status write that never overwrites expired.

        The guard runs in the UPDATE itself, so a sweep landing between the
        caller's read and this write wins. With `expected`, the row must still
        be in that status. Returns None when no row was updated.
        """
        query = (
            update(Contract)
            .where(Contract.id == contract_id)
            .where(Contract.status != ContractStatus.EXPIRED.value)
            .values(status=status)
            .execution_options(synchronize_session=False)
        )
        if expected is not None:
            query = query.where(Contract.status == expected)
        result = await self.session.execute(query)
        if result.rowcount == 0:
            return None

        contract = await self.get_by_id(contract_id)
        # status and updated_at were written in SQL; reload them
        await self.session.refresh(contract)
        return contract

    async def list_expired(self, now: datetime, limit: int) -> list[Contract]:
        """Contracts past their retention window that the sweeper has not expired yet.

        Oldest expiry first so a capped batch always drains the backlog in order.
        """
        result = await self.session.execute(
            select(Contract)
            .where(Contract.expires_at < now)
            .where(Contract.status != ContractStatus.EXPIRED.value)
            .order_by(Contract.expires_at)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_expired_with_files(self, limit: int) -> list[Contract]:
        """Expired contracts whose file deletion has not been confirmed.

        Least recently touched first; a failed retry bumps updated_at, so files
        that keep failing rotate behind the rest.
        """
        result = await self.session.execute(
            select(Contract)
            .where(Contract.status == ContractStatus.EXPIRED.value)
            .where(Contract.file_deleted_at.is_(None))
            .order_by(Contract.updated_at, Contract.id)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def mark_expired(self, contract_id: uuid.UUID, file_deleted_at: datetime | None) -> None:
        """Set status to expired by primary key. Safe to repeat."""
        values: dict = {"status": ContractStatus.EXPIRED.value}
        if file_deleted_at is not None:
            values["file_deleted_at"] = file_deleted_at
        await self.session.execute(
            update(Contract).where(Contract.id == contract_id).values(**values)
        )

    async def mark_file_deleted(self, contract_id: uuid.UUID, deleted_at: datetime) -> None:
        await self.session.execute(
            update(Contract)
            .where(Contract.id == contract_id)
            .values(file_deleted_at=deleted_at)
        )

    async def mark_file_retry_failed(self, contract_id: uuid.UUID, attempted_at: datetime) -> None:
        await self.session.execute(
            update(Contract)
            .where(Contract.id == contract_id)
            .values(updated_at=attempted_at)
        )
