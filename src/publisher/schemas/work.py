"""Pydantic schemas for works and translations."""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from publisher.db.models import (
    ContentType,
    TranslationStatus,
    TranslationType,
)
from publisher.schemas.common import CamelModel

# ─── Works ──────────────────────────────────────────────


class WorkCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = None
    original_language: str = Field(..., min_length=2, max_length=5)
    content_type: ContentType
    genre: Optional[str] = Field(None, max_length=100)
    tags: list[str] = Field(default_factory=list)
    price: float = Field(0, ge=0)
    is_free: bool = False


class WorkUpdate(CamelModel):
    """Partial update — omitted or null fields keep their current value.

    Authors may move a work between draft, published and archived.
    "suspended" is a moderation state and can't be set here.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    genre: Optional[str] = Field(None, max_length=100)
    tags: Optional[list[str]] = None
    price: Optional[float] = Field(None, ge=0)
    status: Optional[Literal["draft", "published", "archived"]] = None


class WorkRead(CamelModel):
    id: uuid.UUID
    author_id: uuid.UUID
    author_name: Optional[str] = None
    title: str
    description: Optional[str] = None
    original_language: str
    content_type: str
    genre: Optional[str] = None
    tags: list[str] = []
    cover_image_url: Optional[str] = None
    price: float
    is_free: bool
    status: str
    published_at: Optional[datetime] = None
    view_count: int
    rating_average: float
    rating_count: int
    created_at: datetime
    updated_at: datetime


class WorkEnvelope(CamelModel):
    work: WorkRead


class WorkChanged(CamelModel):
    message: str
    work: WorkRead


class WorkPage(CamelModel):
    works: list[WorkRead]
    page: int
    limit: int
    total: int


class WorkList(CamelModel):
    works: list[WorkRead]


# ─── Translations ───────────────────────────────────────


class TranslationCreate(CamelModel):
    work_id: uuid.UUID
    target_language: str = Field(..., min_length=2, max_length=5)
    translation_type: TranslationType


class TranslationStatusUpdate(CamelModel):
    status: TranslationStatus
    notes: Optional[str] = None


class TranslationRead(CamelModel):
    id: uuid.UUID
    work_id: uuid.UUID
    translator_id: Optional[uuid.UUID] = None
    translator_name: Optional[str] = None
    target_language: str
    translation_type: str
    status: str
    quality_score: Optional[float] = None
    notes: Optional[str] = None
    completed_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class TranslationChanged(CamelModel):
    message: str
    translation: TranslationRead


class TranslationList(CamelModel):
    translations: list[TranslationRead]
