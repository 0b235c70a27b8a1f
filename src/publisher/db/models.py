"""SQLAlchemy ORM models — single source of truth for the database schema.

Learn: Declarative ORM mapping with SQLAlchemy 2.0 style (Mapped[] + mapped_column).
Each class = one table. Alembic migrations are written against these models.

Key concepts:
- UUID primary keys, generated client-side so inserts don't need RETURNING
- Closed value sets (roles, statuses) are str enums validated in the
  schemas layer and stored as plain strings
- The generic Uuid / JSON types keep the schema portable between
  PostgreSQL and the SQLite database used by the tests
"""

import enum
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_uuid() -> uuid.UUID:
    return uuid.uuid4()


# ─── Closed value sets ───────────────────────────────────


class AccountStatus(str, enum.Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"
    DELETED = "deleted"


class RoleKind(str, enum.Enum):
    AUTHOR = "author"
    TRANSLATOR = "translator"
    EDITOR = "editor"
    READER = "reader"
    ADMIN = "admin"


class ContentType(str, enum.Enum):
    TEXT = "text"
    MANGA = "manga"
    ART = "art"


class WorkStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"
    SUSPENDED = "suspended"


class TranslationType(str, enum.Enum):
    AI = "ai"
    HUMAN = "human"
    HYBRID = "hybrid"


class TranslationStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    APPROVED = "approved"
    REJECTED = "rejected"


# ══════════════════════════════════════════════════════════════
# Accounts
# ══════════════════════════════════════════════════════════════


class User(Base):
    """A person with an account. Never hard-deleted.

    Learn: account_status moves to "suspended" or "deleted" instead of
    removing the row, so works and translations keep their owner.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    pen_name: Mapped[Optional[str]] = mapped_column(String(100))
    country_code: Mapped[Optional[str]] = mapped_column(String(2))
    profile_image_url: Mapped[Optional[str]] = mapped_column(Text)
    bio: Mapped[Optional[str]] = mapped_column(Text)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    account_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AccountStatus.ACTIVE.value
    )  # active, suspended, deleted
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
    last_login_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    # Relationships
    roles: Mapped[list["UserRole"]] = relationship(
        back_populates="user", order_by="UserRole.created_at"
    )


class UserRole(Base):
    """Role assignment — many-to-many between users and role kinds.

    Learn: each (user, role_type) pair exists at most once and is
    switched on/off with is_active rather than deleted.
    """

    __tablename__ = "user_roles"
    __table_args__ = (
        UniqueConstraint("user_id", "role_type", name="uq_user_roles_user_role"),
        Index("idx_user_roles_user_id", "user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role_type: Mapped[str] = mapped_column(String(20), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    user: Mapped["User"] = relationship(back_populates="roles")


# ══════════════════════════════════════════════════════════════
# Works and translations
# ══════════════════════════════════════════════════════════════


class Work(Base):
    """A creative submission owned by exactly one author."""

    __tablename__ = "works"
    __table_args__ = (
        Index("idx_works_author_id", "author_id"),
        Index("idx_works_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    author_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    original_language: Mapped[str] = mapped_column(String(5), nullable=False)
    content_type: Mapped[str] = mapped_column(String(10), nullable=False)
    genre: Mapped[Optional[str]] = mapped_column(String(100))
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    cover_image_url: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )
    is_free: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=WorkStatus.DRAFT.value
    )  # draft, published, archived, suspended
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    download_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rating_average: Mapped[Decimal] = mapped_column(
        Numeric(3, 2), nullable=False, default=Decimal("0.00")
    )
    rating_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    isbn: Mapped[Optional[str]] = mapped_column(String(20))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    author: Mapped["User"] = relationship()
    translations: Mapped[list["Translation"]] = relationship(back_populates="work")


class Translation(Base):
    """A translation of a work into one target language.

    Learn: UNIQUE(work_id, target_language) — a work has at most one
    translation per language. translator_id is NULL until a translator
    claims the request.
    """

    __tablename__ = "translations"
    __table_args__ = (
        UniqueConstraint(
            "work_id", "target_language", name="uq_translations_work_language"
        ),
        Index("idx_translations_work_id", "work_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=new_uuid)
    work_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("works.id", ondelete="CASCADE"), nullable=False
    )
    translator_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("users.id")
    )
    target_language: Mapped[str] = mapped_column(String(5), nullable=False)
    translation_type: Mapped[str] = mapped_column(String(10), nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TranslationStatus.PENDING.value
    )
    quality_score: Mapped[Optional[Decimal]] = mapped_column(Numeric(3, 2))
    translated_content: Mapped[Optional[str]] = mapped_column(Text)
    notes: Mapped[Optional[str]] = mapped_column(Text)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    work: Mapped["Work"] = relationship(back_populates="translations")
    translator: Mapped[Optional["User"]] = relationship()
