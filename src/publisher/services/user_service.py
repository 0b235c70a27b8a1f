"""User service — profiles."""

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from publisher.db.models import AccountStatus, User, Work, WorkStatus
from publisher.errors import NotFound
from publisher.schemas.user import ProfileRead, ProfileUpdate, PublicProfile


def _active_role_names(user: User) -> list[str]:
    return [r.role_type for r in user.roles if r.is_active]


class UserService:
    """Read and edit user profiles."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _load(self, user_id: uuid.UUID) -> User | None:
        result = await self.db.execute(
            select(User).where(User.id == user_id).options(selectinload(User.roles))
        )
        return result.scalars().first()

    async def get_profile(self, user_id: uuid.UUID) -> ProfileRead:
        """Own profile, including email and active roles."""
        user = await self._load(user_id)
        if not user:
            raise NotFound("User not found", error="User not found")
        return ProfileRead(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            pen_name=user.pen_name,
            country=user.country_code,
            bio=user.bio,
            profile_image=user.profile_image_url,
            verified=user.verified,
            roles=_active_role_names(user),
            created_at=user.created_at,
        )

    async def update_profile(
        self, user_id: uuid.UUID, body: ProfileUpdate
    ) -> ProfileRead:
        user = await self.db.get(User, user_id)
        if not user:
            raise NotFound("User not found", error="User not found")

        changes = body.model_dump(exclude_none=True)
        if "country" in changes:
            user.country_code = changes.pop("country").upper()
        for field, value in changes.items():
            setattr(user, field, value)

        await self.db.commit()
        # Drop the cached instance so the reload below sees the committed row.
        self.db.expunge(user)
        return await self.get_profile(user_id)

    async def get_public_profile(self, user_id: uuid.UUID) -> PublicProfile:
        """Public view of an active user, with their published work count."""
        user = await self._load(user_id)
        if not user or user.account_status != AccountStatus.ACTIVE.value:
            raise NotFound("User not found", error="User not found")

        work_count = await self.db.scalar(
            select(func.count(Work.id)).where(
                Work.author_id == user_id,
                Work.status == WorkStatus.PUBLISHED.value,
            )
        )
        return PublicProfile(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            pen_name=user.pen_name,
            country=user.country_code,
            bio=user.bio,
            profile_image=user.profile_image_url,
            verified=user.verified,
            roles=_active_role_names(user),
            work_count=work_count or 0,
        )
