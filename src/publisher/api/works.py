"""Work API routes.

Learn: the catalogue (list, detail) is public. Creating a work needs the
author role in the token; editing needs ownership of the row, which the
service checks against the freshly loaded work.
"""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from publisher.auth.dependencies import (
    CurrentIdentity,
    get_current_identity,
    require_roles,
)
from publisher.db.engine import get_db
from publisher.db.models import RoleKind
from publisher.schemas.work import (
    WorkChanged,
    WorkCreate,
    WorkEnvelope,
    WorkList,
    WorkPage,
    WorkUpdate,
)
from publisher.services.work_service import WorkService

router = APIRouter(prefix="/works")


def _svc(db: AsyncSession = Depends(get_db)) -> WorkService:
    return WorkService(db)


@router.get("", response_model=WorkPage)
async def list_works(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    genre: Optional[str] = None,
    language: Optional[str] = None,
    svc: WorkService = Depends(_svc),
):
    """Published works, newest first."""
    works = await svc.list_published(page=page, limit=limit, genre=genre, language=language)
    return WorkPage(works=works, page=page, limit=limit, total=len(works))


@router.post("", response_model=WorkChanged, status_code=201)
async def create_work(
    body: WorkCreate,
    identity: CurrentIdentity = Depends(require_roles(RoleKind.AUTHOR)),
    svc: WorkService = Depends(_svc),
):
    """Create a draft work owned by the caller."""
    work = await svc.create(identity, body)
    return WorkChanged(message="Work created successfully", work=work)


# Declared before /{work_id} so "my" is never parsed as an id.
@router.get("/my/all", response_model=WorkList)
async def my_works(
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: WorkService = Depends(_svc),
):
    return WorkList(works=await svc.list_by_author(identity.user_id))


@router.get("/{work_id}", response_model=WorkEnvelope)
async def get_work(work_id: uuid.UUID, svc: WorkService = Depends(_svc)):
    return WorkEnvelope(work=await svc.get_published(work_id))


@router.put("/{work_id}", response_model=WorkChanged)
async def update_work(
    work_id: uuid.UUID,
    body: WorkUpdate,
    identity: CurrentIdentity = Depends(get_current_identity),
    svc: WorkService = Depends(_svc),
):
    """Update a work. Only its author may do this, whatever their role."""
    work = await svc.update(work_id, identity, body)
    return WorkChanged(message="Work updated successfully", work=work)
