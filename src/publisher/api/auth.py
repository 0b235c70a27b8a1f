"""Auth API — registration, login, current user.

Learn: Routes for the credential lifecycle:
- POST /auth/register → create an account with one role → user + token
- POST /auth/login → email/password → user + token
- GET /auth/me → current user's profile (requires Bearer token)
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from publisher.auth.dependencies import CurrentIdentity, get_current_identity
from publisher.db.engine import get_db
from publisher.schemas.user import (
    AuthResponse,
    LoginRequest,
    ProfileEnvelope,
    RegisterRequest,
)
from publisher.services.auth_service import AuthService
from publisher.services.user_service import UserService

router = APIRouter(prefix="/auth")


def _svc(request: Request, db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db, request.app.state.tokens, request.app.state.hasher)


# ─── Register ────────────────────────────────────────────


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(body: RegisterRequest, svc: AuthService = Depends(_svc)):
    """Create a new account and sign it in."""
    user, token = await svc.register(body)
    return AuthResponse(message="User registered successfully", user=user, token=token)


# ─── Login ───────────────────────────────────────────────


@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, svc: AuthService = Depends(_svc)):
    """Login with email and password → session token."""
    user, token = await svc.login(body)
    return AuthResponse(message="Login successful", user=user, token=token)


# ─── Current user ───────────────────────────────────────


@router.get("/me", response_model=ProfileEnvelope)
async def get_me(
    identity: CurrentIdentity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """Get the current authenticated user's profile."""
    return ProfileEnvelope(user=await UserService(db).get_profile(identity.user_id))
