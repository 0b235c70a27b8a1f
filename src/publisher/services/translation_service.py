"""Translation service — requests and their lifecycle.

Learn: a work has at most one translation per target language. The
existence check below gives a friendly error; the UNIQUE constraint on
(work_id, target_language) is what actually guarantees it when two
requests race.

Lifecycle:
    pending → in_progress → completed → approved | rejected
The translator drives the first two steps, the work's author the last.
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from publisher.auth.dependencies import CurrentIdentity
from publisher.auth.policy import ensure_translation_transition, ensure_work_owner
from publisher.db.models import (
    RoleKind,
    Translation,
    TranslationStatus,
    User,
    Work,
    WorkStatus,
    utcnow,
)
from publisher.errors import Conflict, NotFound, ValidationFailed
from publisher.schemas.work import TranslationCreate, TranslationRead

logger = structlog.get_logger()

_DUPLICATE_LANGUAGE = "Translation already exists for this language"

# Statuses visible on a work's public translation list.
_PUBLIC_STATUSES = (
    TranslationStatus.COMPLETED.value,
    TranslationStatus.APPROVED.value,
)


def to_read(translation: Translation, translator_name: Optional[str] = None) -> TranslationRead:
    read = TranslationRead.model_validate(translation)
    read.translator_name = translator_name
    return read


class TranslationService:
    """Business logic for translation requests."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_work(self, work_id: uuid.UUID) -> list[TranslationRead]:
        result = await self.db.execute(
            select(Translation, User.pen_name)
            .join(Work, Translation.work_id == Work.id)
            .outerjoin(User, Translation.translator_id == User.id)
            .where(
                Translation.work_id == work_id,
                Work.status == WorkStatus.PUBLISHED.value,
                Translation.status.in_(_PUBLIC_STATUSES),
            )
            .order_by(Translation.target_language)
        )
        return [to_read(t, pen_name) for t, pen_name in result.all()]

    async def request(
        self, identity: CurrentIdentity, body: TranslationCreate
    ) -> TranslationRead:
        """Open a translation request.

        A translator asking for a translation takes it on themselves.
        An author may only request translations of their own work; the
        request starts unassigned.
        Unpublished works are invisible to everyone but their author.
        """
        work = await self.db.get(Work, body.work_id)
        if not work or (
            work.status != WorkStatus.PUBLISHED.value
            and work.author_id != identity.user_id
        ):
            raise NotFound("Work not found", error="Work not found")

        if identity.role == RoleKind.TRANSLATOR.value:
            translator_id = identity.user_id
        else:
            ensure_work_owner(
                work, identity, "Only the author can request translations of this work"
            )
            translator_id = None

        if body.target_language == work.original_language:
            raise ValidationFailed("Target language matches the work's original language")

        existing = await self.db.execute(
            select(Translation.id).where(
                Translation.work_id == work.id,
                Translation.target_language == body.target_language,
            )
        )
        if existing.first() is not None:
            raise Conflict(_message_for(body.target_language), error=_DUPLICATE_LANGUAGE)

        translation = Translation(
            work_id=work.id,
            translator_id=translator_id,
            target_language=body.target_language,
            translation_type=body.translation_type.value,
            status=TranslationStatus.PENDING.value,
        )
        self.db.add(translation)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise Conflict(_message_for(body.target_language), error=_DUPLICATE_LANGUAGE)
        await self.db.refresh(translation)

        logger.info(
            "translations.requested",
            translation_id=str(translation.id),
            work_id=str(work.id),
            language=body.target_language,
        )
        return to_read(translation)

    async def change_status(
        self,
        translation_id: uuid.UUID,
        identity: CurrentIdentity,
        target: TranslationStatus,
        notes: Optional[str] = None,
    ) -> TranslationRead:
        translation = await self.db.get(Translation, translation_id)
        if not translation:
            raise NotFound("Translation not found", error="Translation not found")
        work = await self.db.get(Work, translation.work_id)
        if work.status != WorkStatus.PUBLISHED.value and identity.user_id not in (
            work.author_id,
            translation.translator_id,
        ):
            raise NotFound("Translation not found", error="Translation not found")

        ensure_translation_transition(translation, work, target, identity)

        previous = translation.status
        if translation.translator_id is None and target == TranslationStatus.IN_PROGRESS:
            translation.translator_id = identity.user_id  # claimed
        translation.status = target.value
        if target == TranslationStatus.COMPLETED:
            translation.completed_at = utcnow()
        elif target == TranslationStatus.APPROVED:
            translation.approved_at = utcnow()
        if notes is not None:
            translation.notes = notes

        await self.db.commit()
        await self.db.refresh(translation)
        logger.info(
            "translations.status_changed",
            translation_id=str(translation.id),
            from_status=previous,
            to_status=target.value,
        )
        return to_read(translation)


def _message_for(language: str) -> str:
    return f"A translation into '{language}' already exists for this work"
