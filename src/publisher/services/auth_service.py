"""Auth service — registration and login.

Learn: Service layer separates business logic from HTTP routing.
API routes call services, services call the database. Errors are raised
as PublisherError subclasses and rendered by the app's handlers.

Registration is one unit of work: the user row and its role row are
written in the same transaction, so a failure leaves neither behind.
"""

import uuid
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from publisher.auth.jwt import Claims, TokenService
from publisher.auth.password import PasswordHasher
from publisher.db.models import AccountStatus, User, UserRole, utcnow
from publisher.errors import (
    AccountInactive,
    DuplicateAccount,
    Forbidden,
    InvalidCredentials,
)
from publisher.schemas.user import LoginRequest, RegisterRequest, UserSummary

logger = structlog.get_logger()


class AuthService:
    """Credential lifecycle: sign-up, sign-in, token issuance."""

    def __init__(self, db: AsyncSession, tokens: TokenService, hasher: PasswordHasher):
        self.db = db
        self.tokens = tokens
        self.hasher = hasher

    # ─── Register ───────────────────────────────────────

    async def register(self, body: RegisterRequest) -> tuple[UserSummary, str]:
        """Create an account with one role. Returns (user, token)."""
        if await self._email_taken(body.email):
            raise DuplicateAccount()

        password_hash = await self.hasher.hash_async(body.password)
        user = User(
            email=body.email,
            password_hash=password_hash,
            first_name=body.first_name,
            last_name=body.last_name,
            pen_name=body.pen_name,
            country_code=body.country.upper() if body.country else None,
        )

        try:
            self.db.add(user)
            await self.db.flush()
            self.db.add(UserRole(user_id=user.id, role_type=body.role))
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent sign-up for the same email.
            await self.db.rollback()
            logger.info("auth.register_conflict")
            raise DuplicateAccount()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

        logger.info("auth.registered", user_id=str(user.id), role=body.role)
        token = self.tokens.issue(
            Claims(user_id=str(user.id), email=user.email, role=body.role)
        )
        return _summary(user, body.role), token

    async def _email_taken(self, email: str) -> bool:
        result = await self.db.execute(select(User.id).where(User.email == email))
        return result.first() is not None

    # ─── Login ──────────────────────────────────────────

    async def login(self, body: LoginRequest) -> tuple[UserSummary, str]:
        """Check credentials and issue a token. Returns (user, token).

        Unknown email and wrong password fail identically. Account status
        is only checked once the password is known to be right.
        """
        result = await self.db.execute(select(User).where(User.email == body.email))
        user = result.scalars().first()

        if user is None:
            await self.hasher.burn_async(body.password)
            logger.info("auth.login_failed", reason="unknown_email")
            raise InvalidCredentials()

        if not await self.hasher.verify_async(body.password, user.password_hash):
            logger.info("auth.login_failed", reason="bad_password", user_id=str(user.id))
            raise InvalidCredentials()

        if user.account_status != AccountStatus.ACTIVE.value:
            logger.info("auth.login_inactive", user_id=str(user.id))
            raise AccountInactive()

        roles = await self.active_roles(user.id)
        if body.role is not None:
            if body.role not in roles:
                raise Forbidden("Role not assigned to this account")
            role = body.role
        else:
            role = roles[0] if roles else None

        summary = _summary(user, role)
        await self._touch_last_login(user)

        token = self.tokens.issue(
            Claims(user_id=str(summary.id), email=summary.email, role=role)
        )
        logger.info("auth.login", user_id=str(summary.id), role=role)
        return summary, token

    async def active_roles(self, user_id: uuid.UUID) -> list[str]:
        """Active role names, earliest-assigned first."""
        result = await self.db.execute(
            select(UserRole.role_type)
            .where(UserRole.user_id == user_id, UserRole.is_active.is_(True))
            .order_by(UserRole.created_at, UserRole.role_type)
        )
        return list(result.scalars().all())

    async def _touch_last_login(self, user: User) -> None:
        """Best effort — a failed timestamp write doesn't fail the login."""
        user_id = str(user.id)
        try:
            user.last_login_at = utcnow()
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.warning(
                "auth.last_login_update_failed", user_id=user_id, error=str(e)
            )


def _summary(user: User, role: Optional[str]) -> UserSummary:
    return UserSummary(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        pen_name=user.pen_name,
        role=role,
    )
