"""Work service — catalogue queries and author-owned edits.

Learn: reads of the public catalogue only ever see published works.
Edits go through the ownership check in auth.policy: the row is loaded
fresh, its author_id compared to the caller, and only then changed.
"""

import uuid
from decimal import Decimal
from typing import Optional

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from publisher.auth.dependencies import CurrentIdentity
from publisher.auth.policy import ensure_work_owner
from publisher.db.models import User, Work, WorkStatus, utcnow
from publisher.errors import NotFound
from publisher.schemas.work import WorkCreate, WorkRead, WorkUpdate

logger = structlog.get_logger()


def to_read(work: Work, author_name: Optional[str] = None) -> WorkRead:
    read = WorkRead.model_validate(work)
    read.author_name = author_name
    return read


class WorkService:
    """Business logic for works."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_published(
        self,
        page: int = 1,
        limit: int = 20,
        genre: Optional[str] = None,
        language: Optional[str] = None,
    ) -> list[WorkRead]:
        query = (
            select(Work, User.pen_name)
            .join(User, Work.author_id == User.id)
            .where(Work.status == WorkStatus.PUBLISHED.value)
        )
        if genre:
            query = query.where(Work.genre == genre)
        if language:
            query = query.where(Work.original_language == language)
        query = (
            query.order_by(Work.published_at.desc())
            .limit(limit)
            .offset((page - 1) * limit)
        )
        result = await self.db.execute(query)
        return [to_read(work, pen_name) for work, pen_name in result.all()]

    async def get_published(self, work_id: uuid.UUID) -> WorkRead:
        """Fetch a published work and count the view."""
        result = await self.db.execute(
            select(Work, User.pen_name)
            .join(User, Work.author_id == User.id)
            .where(Work.id == work_id, Work.status == WorkStatus.PUBLISHED.value)
        )
        row = result.first()
        if not row:
            raise NotFound("Work not found", error="Work not found")
        work, pen_name = row
        read = to_read(work, pen_name)

        await self.db.execute(
            update(Work)
            .where(Work.id == work_id)
            .values(view_count=Work.view_count + 1)
        )
        await self.db.commit()
        return read

    async def create(self, identity: CurrentIdentity, body: WorkCreate) -> WorkRead:
        work = Work(
            author_id=identity.user_id,
            title=body.title,
            description=body.description,
            original_language=body.original_language,
            content_type=body.content_type.value,
            genre=body.genre,
            tags=body.tags,
            price=Decimal(str(body.price)),
            is_free=body.is_free,
            status=WorkStatus.DRAFT.value,
        )
        self.db.add(work)
        await self.db.commit()
        await self.db.refresh(work)
        logger.info("works.created", work_id=str(work.id), author_id=str(work.author_id))
        return to_read(work)

    async def update(
        self, work_id: uuid.UUID, identity: CurrentIdentity, body: WorkUpdate
    ) -> WorkRead:
        """Partial update by the owning author only."""
        work = await self.db.get(Work, work_id)
        if not work:
            raise NotFound("Work not found", error="Work not found")
        ensure_work_owner(work, identity)

        changes = body.model_dump(exclude_none=True)
        if "price" in changes:
            changes["price"] = Decimal(str(changes["price"]))
        for field, value in changes.items():
            setattr(work, field, value)
        if work.status == WorkStatus.PUBLISHED.value and work.published_at is None:
            work.published_at = utcnow()

        await self.db.commit()
        await self.db.refresh(work)
        logger.info("works.updated", work_id=str(work.id), fields=sorted(changes))
        return to_read(work)

    async def list_by_author(self, author_id: uuid.UUID) -> list[WorkRead]:
        result = await self.db.execute(
            select(Work)
            .where(Work.author_id == author_id)
            .order_by(Work.created_at.desc())
        )
        return [to_read(work) for work in result.scalars().all()]
