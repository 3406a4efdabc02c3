import logging
import time
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from clausewise.exceptions import ExpiredContractFetchError, StorageError
from clausewise.repositories.contract_repo import ContractRepository
from clausewise.schemas.retention import SweepResult
from clausewise.services.storage.base import FileStorage

logger = logging.getLogger(__name__)


class RetentionService:
    """Deletes stored contract files once their retention window has passed.

    Each sweep selects contracts with expires_at in the past and a status other
    than expired, deletes the stored file and then marks the row expired. Rows
    are independent: a storage failure is logged and the status update still
    runs, a failed status update is logged and the row is left for the next run.

    There is no locking. Two overlapping sweeps may pick the same row; marking
    a row expired twice and deleting an absent file are both no-ops.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        storage: FileStorage,
        batch_size: int = 500,
        time_budget_seconds: float | None = None,
    ):
        self.session_factory = session_factory
        self.storage = storage
        self.batch_size = batch_size
        self.time_budget_seconds = time_budget_seconds

    async def sweep(self, now: datetime | None = None) -> SweepResult:
        now = now or datetime.now(timezone.utc)
        started = time.monotonic()

        try:
            async with self.session_factory() as session:
                expired = await ContractRepository(session).list_expired(now, self.batch_size)
                # Plain tuples so nothing lazy-loads after the session closes
                targets = [(c.id, c.file_path) for c in expired]
        except SQLAlchemyError as e:
            raise ExpiredContractFetchError(str(e)) from e

        logger.info(f"[retention] {len(targets)} expired contracts selected (cutoff={now.isoformat()})")

        result = SweepResult(message="", deleted=0)
        for contract_id, file_path in targets:
            if self._budget_spent(started):
                logger.warning(
                    f"[retention] Time budget of {self.time_budget_seconds}s spent, "
                    f"leaving remaining rows for the next run"
                )
                break

            file_deleted = await self._delete_file(contract_id, file_path)
            if not file_deleted:
                result.file_errors += 1

            try:
                async with self.session_factory() as session:
                    await ContractRepository(session).mark_expired(
                        contract_id, file_deleted_at=now if file_deleted else None
                    )
                    await session.commit()
            except SQLAlchemyError as e:
                logger.error(f"[retention] Failed to update contract {contract_id}: {e}")
                result.update_errors += 1
                continue

            result.deleted += 1

        result.files_retried = await self._retry_file_deletions(
            now, started, skip={contract_id for contract_id, _ in targets}
        )

        if targets:
            result.message = f"Cleaned up {result.deleted} expired contracts"
        else:
            result.message = "No expired contracts found"

        logger.info(
            f"[retention] Sweep done: deleted={result.deleted} file_errors={result.file_errors} "
            f"update_errors={result.update_errors} files_retried={result.files_retried}"
        )
        return result

    async def _delete_file(self, contract_id: uuid.UUID, file_path: str) -> bool:
        """Delete one stored file. Returns False on failure; a missing file counts as deleted."""
        try:
            await self.storage.delete(file_path)
        except StorageError as e:
            logger.error(f"[retention] Failed to delete file {file_path} (contract {contract_id}): {e}")
            return False
        return True

    async def _retry_file_deletions(
        self, now: datetime, started: float, skip: set[uuid.UUID]
    ) -> int:
        """Retry deletes for contracts marked expired by an earlier run whose file removal failed."""
        if self._budget_spent(started):
            return 0

        try:
            async with self.session_factory() as session:
                pending = await ContractRepository(session).list_expired_with_files(self.batch_size)
                targets = [(c.id, c.file_path) for c in pending if c.id not in skip]
        except SQLAlchemyError as e:
            logger.error(f"[retention] Could not list expired contracts with leftover files: {e}")
            return 0

        retried = 0
        for contract_id, file_path in targets:
            if self._budget_spent(started):
                break
            if not await self._delete_file(contract_id, file_path):
                await self._push_back(contract_id, now)
                continue
            try:
                async with self.session_factory() as session:
                    await ContractRepository(session).mark_file_deleted(contract_id, now)
                    await session.commit()
            except SQLAlchemyError as e:
                logger.error(f"[retention] Failed to record file deletion for contract {contract_id}: {e}")
                continue
            retried += 1

        if retried:
            logger.info(f"[retention] Removed {retried} leftover files of expired contracts")
        return retried

    async def _push_back(self, contract_id: uuid.UUID, now: datetime) -> None:
        """Move a still-failing leftover behind the others for the next retry pass."""
        try:
            async with self.session_factory() as session:
                await ContractRepository(session).mark_file_retry_failed(contract_id, now)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"[retention] Failed to record retry attempt for contract {contract_id}: {e}")

    def _budget_spent(self, started: float) -> bool:
        if self.time_budget_seconds is None:
            return False
        return time.monotonic() - started >= self.time_budget_seconds
