"""User profile routes."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from publisher.auth.dependencies import CurrentIdentity, get_current_identity
from publisher.db.engine import get_db
from publisher.schemas.user import (
    ProfileEnvelope,
    ProfileUpdate,
    ProfileUpdated,
    PublicProfileEnvelope,
)
from publisher.services.user_service import UserService

router = APIRouter(prefix="/users")


def _svc(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


@router.get("/profile", response_model=ProfileEnvelope)
async def get_profile(
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: UserService = Depends(_svc),
):
    return ProfileEnvelope(user=await svc.get_profile(identity.user_id))


@router.put("/profile", response_model=ProfileUpdated)
async def update_profile(
    body: ProfileUpdate,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: UserService = Depends(_svc),
):
    profile = await svc.update_profile(identity.user_id, body)
    return ProfileUpdated(message="Profile updated successfully", user=profile)


@router.get("/{user_id}", response_model=PublicProfileEnvelope)
async def get_public_profile(user_id: uuid.UUID, svc: UserService = Depends(_svc)):
    """Public profile of any active user."""
    return PublicProfileEnvelope(user=await svc.get_public_profile(user_id))
