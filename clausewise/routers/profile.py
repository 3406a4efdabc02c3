from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clausewise.auth import CurrentUser
from clausewise.dependencies import get_current_user, get_session
from clausewise.repositories.profile_repo import ProfileRepository
from clausewise.schemas.profile import ProfileResponse
from clausewise.services.profile_service import ProfileService

router = APIRouter(prefix="/profile", tags=["Profile"])


def get_profile_service(session: AsyncSession = Depends(get_session)) -> ProfileService:
    return ProfileService(ProfileRepository(session))


@router.get("", response_model=ProfileResponse)
async def get_profile(
    user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    return await service.get_profile(user)


@router.post("/agreement", response_model=ProfileResponse)
async def sign_agreement(
    user: CurrentUser = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service),
):
    """Sign the service agreement. Required before the first upload."""
    return await service.sign_agreement(user)
