"""Translation API routes."""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from publisher.auth.dependencies import (
    CurrentIdentity,
    get_current_identity,
    require_roles,
)
from publisher.db.engine import get_db
from publisher.db.models import RoleKind
from publisher.schemas.work import (
    TranslationChanged,
    TranslationCreate,
    TranslationList,
    TranslationStatusUpdate,
)
from publisher.services.translation_service import TranslationService

router = APIRouter(prefix="/translations")


def _svc(db: AsyncSession = Depends(get_db)) -> TranslationService:
    return TranslationService(db)


@router.get("/work/{work_id}", response_model=TranslationList)
async def list_translations(work_id: uuid.UUID, svc: TranslationService = Depends(_svc)):
    """Finished translations of a work."""
    return TranslationList(translations=await svc.list_for_work(work_id))


@router.post("", response_model=TranslationChanged, status_code=201)
async def request_translation(
    body: TranslationCreate,
    identity: CurrentIdentity = Depends(
        require_roles(RoleKind.TRANSLATOR, RoleKind.AUTHOR)
    ),
    svc: TranslationService = Depends(_svc),
):
    translation = await svc.request(identity, body)
    return TranslationChanged(message="Translation request created", translation=translation)


@router.patch("/{translation_id}/status", response_model=TranslationChanged)
async def change_translation_status(
    translation_id: uuid.UUID,
    body: TranslationStatusUpdate,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: TranslationService = Depends(_svc),
):
    translation = await svc.change_status(
        translation_id, identity, body.status, notes=body.notes
    )
    return TranslationChanged(message="Translation status updated", translation=translation)
