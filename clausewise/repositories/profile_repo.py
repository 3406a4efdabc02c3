import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clausewise.models.profile import Profile, UserRole


class ProfileRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: uuid.UUID) -> Profile | None:
        result = await self.session.execute(select(Profile).where(Profile.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_or_create(self, user_id: uuid.UUID, email: str | None = None) -> Profile:
        profile = await self.get_by_user_id(user_id)
        if profile is None:
            profile = Profile(user_id=user_id, email=email, agreement_signed=False)
            self.session.add(profile)
            await self.session.flush()
            await self.session.refresh(profile)
        return profile


class RoleRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_roles(self, user_id: uuid.UUID) -> set[str]:
        result = await self.session.execute(
            select(UserRole.role).where(UserRole.user_id == user_id)
        )
        return set(result.scalars().all())

    async def grant(self, user_id: uuid.UUID, role: str) -> None:
        if role not in await self.get_roles(user_id):
            self.session.add(UserRole(user_id=user_id, role=role))
            await self.session.flush()
