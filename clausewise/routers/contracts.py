import logging
import uuid
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from clausewise.auth import CurrentUser
from clausewise.config import Settings
from clausewise.dependencies import get_current_user, get_session, get_settings, get_storage
from clausewise.exceptions import (
    AgreementNotSignedError,
    ContractExpiredError,
    ContractNotFoundError,
    FileTooLargeError,
    ReportNotFoundError,
    UnsupportedFileTypeError,
)
from clausewise.models.contract import ContractType
from clausewise.repositories.contract_repo import ContractRepository
from clausewise.repositories.profile_repo import ProfileRepository
from clausewise.repositories.report_repo import ReportRepository
from clausewise.repositories.suggestion_response_repo import SuggestionResponseRepository
from clausewise.schemas.contract import ContractResponse, ContractUploadResponse
from clausewise.schemas.report import ReviewReportResponse
from clausewise.services.contract_service import ContractService
from clausewise.services.report_service import ReportService
from clausewise.services.storage.base import FileStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contracts", tags=["Contracts"])


def get_contract_service(
    session: AsyncSession = Depends(get_session),
    storage: FileStorage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
) -> ContractService:
    return ContractService(
        ContractRepository(session),
        ProfileRepository(session),
        storage,
        retention_hours=settings.CONTRACT_RETENTION_HOURS,
        max_upload_mb=settings.MAX_UPLOAD_SIZE_MB,
    )


def get_report_service(session: AsyncSession = Depends(get_session)) -> ReportService:
    return ReportService(
        ContractRepository(session),
        ReportRepository(session),
        SuggestionResponseRepository(session),
    )


@router.post("", response_model=ContractUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_contract(
    file: UploadFile = File(...),
    contract_type: ContractType = Form(...),
    user: CurrentUser = Depends(get_current_user),
    service: ContractService = Depends(get_contract_service),
):
    """Upload a PDF contract for review."""
    logger.info(f"Upload request received: filename={file.filename!r} contract_type={contract_type.value}")
    try:
        result = await service.upload_contract(user, file, contract_type)
        logger.info(f"Upload accepted: contract_id={result.id} expires_at={result.expires_at.isoformat()}")
        return result
    except AgreementNotSignedError as e:
        logger.warning(f"Upload rejected — agreement not signed: user_id={user.id}")
        raise HTTPException(status_code=403, detail=str(e))
    except UnsupportedFileTypeError as e:
        logger.warning(f"Upload rejected — unsupported file type: {file.content_type!r}")
        raise HTTPException(status_code=422, detail=str(e))
    except FileTooLargeError as e:
        logger.warning(f"Upload rejected — too large: {e.size_bytes} bytes")
        raise HTTPException(status_code=413, detail=str(e))


@router.get("", response_model=list[ContractResponse])
async def list_contracts(
    user: CurrentUser = Depends(get_current_user),
    service: ContractService = Depends(get_contract_service),
):
    """List the caller's contracts, newest first."""
    return await service.list_contracts(user)


@router.get("/{contract_id}", response_model=ContractResponse)
async def get_contract(
    contract_id: uuid.UUID,
    user: CurrentUser = Depends(get_current_user),
    service: ContractService = Depends(get_contract_service),
):
    """Get contract details, review status and retention deadline."""
    try:
        return await service.get_contract(user, contract_id)
    except ContractNotFoundError:
        logger.warning(f"Get contract — not found: contract_id={contract_id}")
        raise HTTPException(status_code=404, detail=f"Contract {contract_id} not found.")


@router.get("/{contract_id}/file")
async def download_contract_file(
    contract_id: uuid.UUID,
    user: CurrentUser = Depends(get_current_user),
    service: ContractService = Depends(get_contract_service),
):
    """Download the uploaded PDF while it is still retained."""
    try:
        file_name, content = await service.read_file(user, contract_id)
    except ContractNotFoundError:
        raise HTTPException(status_code=404, detail=f"Contract {contract_id} not found.")
    except ContractExpiredError as e:
        logger.info(f"File download for expired contract {contract_id}")
        raise HTTPException(status_code=410, detail=str(e))

    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(file_name)}"},
    )


@router.get("/{contract_id}/report", response_model=ReviewReportResponse)
async def get_contract_report(
    contract_id: uuid.UUID,
    user: CurrentUser = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    """Get the review report of a contract."""
    try:
        return await service.get_report_for_contract(user, contract_id)
    except ContractNotFoundError:
        raise HTTPException(status_code=404, detail=f"Contract {contract_id} not found.")
    except ReportNotFoundError:
        raise HTTPException(status_code=404, detail="The review report is not ready yet.")
