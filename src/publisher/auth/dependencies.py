"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract
and validate the current identity from the request.

- get_current_identity: the auth guard. Reads "Authorization: Bearer <token>",
  verifies it, and attaches the identity to request.state.
- require_roles(...): the role gate. Builds a dependency that runs the
  guard first, then checks the token's role against an allow-list.

The guard trusts the signed claim. Unless Settings.recheck_account_status
is on, it does no database lookup, so a suspended account keeps working
until its token expires.
"""

import uuid
from dataclasses import dataclass
from typing import Callable, Optional

import structlog
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from publisher.auth.jwt import Claims, TokenExpired, TokenInvalid, TokenService
from publisher.db.engine import get_db
from publisher.db.models import AccountStatus, RoleKind, User
from publisher.errors import AccountInactive, Forbidden, Unauthenticated

logger = structlog.get_logger()


@dataclass(frozen=True)
class CurrentIdentity:
    """The authenticated caller, as read from the token."""

    user_id: uuid.UUID
    email: str
    role: Optional[str]

    @classmethod
    def from_claims(cls, claims: Claims) -> "CurrentIdentity":
        try:
            user_id = uuid.UUID(claims.user_id)
        except (TypeError, ValueError):
            raise Unauthenticated(
                "The provided token is invalid", error="Invalid token"
            )
        return cls(user_id=user_id, email=claims.email, role=claims.role)


def get_token_service(request: Request) -> TokenService:
    return request.app.state.tokens


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise Unauthenticated()
    token = authorization[7:].strip()
    if not token:
        raise Unauthenticated()
    return token


async def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(None),
    tokens: TokenService = Depends(get_token_service),
    db: AsyncSession = Depends(get_db),
) -> CurrentIdentity:
    """Require a valid bearer token (401 otherwise)."""
    token = _bearer_token(authorization)

    try:
        claims = tokens.verify(token)
    except TokenExpired:
        raise Unauthenticated(
            "Your session has expired. Please login again", error="Token expired"
        )
    except TokenInvalid:
        raise Unauthenticated("The provided token is invalid", error="Invalid token")

    identity = CurrentIdentity.from_claims(claims)

    if request.app.state.settings.recheck_account_status:
        user = await db.get(User, identity.user_id)
        if user is None:
            raise Unauthenticated("The account no longer exists", error="Invalid token")
        # 403 rather than 401: the token itself is fine, the account is not.
        # Same answer login gives a suspended user with the right password.
        if user.account_status != AccountStatus.ACTIVE.value:
            logger.info("auth.inactive_token_rejected", user_id=str(user.id))
            raise AccountInactive()

    request.state.identity = identity
    return identity


def require_roles(*roles: RoleKind) -> Callable:
    """Build a dependency that only lets the listed roles through (403 otherwise).

    Usage:
        @router.post("/works")
        async def create(identity = Depends(require_roles(RoleKind.AUTHOR))): ...
    """
    allowed = {r.value for r in roles}

    async def _check(
        identity: CurrentIdentity = Depends(get_current_identity),
    ) -> CurrentIdentity:
        if identity.role not in allowed:
            raise Forbidden()
        return identity

    return _check
