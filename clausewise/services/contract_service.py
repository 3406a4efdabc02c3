import logging
import time
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import PurePath

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError

from clausewise.auth import CurrentUser
from clausewise.exceptions import (
    AgreementNotSignedError,
    ContractExpiredError,
    ContractNotFoundError,
    FileTooLargeError,
    InvalidStatusTransitionError,
    UnsupportedFileTypeError,
)
from clausewise.models.contract import STATUS_ORDER, Contract, ContractStatus, ContractType
from clausewise.repositories.contract_repo import ContractRepository
from clausewise.repositories.profile_repo import ProfileRepository
from clausewise.schemas.contract import ContractResponse, ContractUploadResponse
from clausewise.services.storage.base import FileStorage

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


def check_transition(current: str, target: str) -> None:
    """Operator moves only go forward along pending -> processing -> completed."""
    if current == ContractStatus.EXPIRED.value:
        raise InvalidStatusTransitionError(current, target)
    order = [s.value for s in STATUS_ORDER]
    if order.index(target) <= order.index(current):
        raise InvalidStatusTransitionError(current, target)


class ContractService:
    def __init__(
        self,
        repo: ContractRepository,
        profiles: ProfileRepository,
        storage: FileStorage,
        retention_hours: int = 48,
        max_upload_mb: int = 20,
    ):
        self.repo = repo
        self.profiles = profiles
        self.storage = storage
        self.retention_hours = retention_hours
        self.max_upload_mb = max_upload_mb

    async def upload_contract(
        self, user: CurrentUser, file: UploadFile, contract_type: ContractType
    ) -> ContractUploadResponse:
        # 1. Agreement must be signed first
        profile = await self.profiles.get_or_create(user.id, user.email)
        if not profile.agreement_signed:
            raise AgreementNotSignedError(str(user.id))

        # 2. Validate type and size
        if file.content_type != PDF_CONTENT_TYPE:
            raise UnsupportedFileTypeError(file.content_type or "unknown")
        content = await file.read()
        if len(content) > self.max_upload_mb * 1024 * 1024:
            raise FileTooLargeError(len(content), self.max_upload_mb)
        if not content.startswith(b"%PDF"):
            raise UnsupportedFileTypeError("file content is not a PDF")

        # 3. Store the file under the owner's prefix
        file_name = PurePath(file.filename or "contract.pdf").name
        file_path = f"{user.id}/{int(time.time() * 1000)}_{file_name}"
        await self.storage.save(file_path, content, PDF_CONTENT_TYPE)

        # 4. Create DB record; drop the stored file if that fails
        uploaded_at = datetime.now(timezone.utc)
        try:
            contract = await self.repo.create(
                user_id=user.id,
                file_name=file_name,
                file_path=file_path,
                contract_type=contract_type.value,
                status=ContractStatus.PENDING.value,
                uploaded_at=uploaded_at,
                expires_at=uploaded_at + timedelta(hours=self.retention_hours),
            )
        except SQLAlchemyError:
            logger.error(f"Contract row insert failed, removing stored file {file_path}")
            await self.storage.delete(file_path)
            raise

        return ContractUploadResponse.model_validate(contract)

    async def list_contracts(self, user: CurrentUser) -> list[ContractResponse]:
        contracts = await self.repo.list_for_user(user.id)
        return [ContractResponse.model_validate(c) for c in contracts]

    async def get_contract(self, user: CurrentUser, contract_id: uuid.UUID) -> ContractResponse:
        contract = await self._get_visible(user, contract_id)
        return ContractResponse.model_validate(contract)

    async def read_file(self, user: CurrentUser, contract_id: uuid.UUID) -> tuple[str, bytes]:
        contract = await self._get_visible(user, contract_id)
        if contract.status == ContractStatus.EXPIRED.value:
            raise ContractExpiredError(str(contract_id))
        try:
            content = await self.storage.read(contract.file_path)
        except FileNotFoundError:
            # Removed from storage ahead of the status change
            raise ContractExpiredError(str(contract_id))
        return contract.file_name, content

    async def list_queue(self, status: ContractStatus | None = None) -> list[ContractResponse]:
        contracts = await self.repo.list_all(status.value if status else None)
        return [ContractResponse.model_validate(c) for c in contracts]

    async def advance_status(self, contract_id: uuid.UUID, target: str) -> ContractResponse:
        contract = await self.repo.get_by_id(contract_id)
        if not contract:
            raise ContractNotFoundError(str(contract_id))
        previous = contract.status
        check_transition(previous, target)
        contract = await self.repo.set_status(contract_id, target, expected=previous)
        if contract is None:
            # Changed since the read above: swept to expired or moved by another operator
            current = await self.repo.get_status(contract_id) or previous
            logger.warning(f"Contract {contract_id} changed to {current!r} before the status write")
            raise InvalidStatusTransitionError(current, target)
        logger.info(f"Contract {contract_id} moved from {previous!r} to {target!r}")
        return ContractResponse.model_validate(contract)

    async def _get_visible(self, user: CurrentUser, contract_id: uuid.UUID) -> Contract:
        contract = await self.repo.get_by_id(contract_id)
        # Other users' contracts look the same as missing ones
        if not contract or (contract.user_id != user.id and not user.is_operator):
            raise ContractNotFoundError(str(contract_id))
        return contract
