"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: unlike a blanket dependencies=[...] on include_router, auth here
is declared per route: the catalogue reads are public, and each
protected handler asks for the guard (get_current_identity) or a role
gate (require_roles) in its own signature.
"""

from fastapi import APIRouter

from publisher.api.auth import router as auth_router
from publisher.api.health import router as health_router
from publisher.api.translations import router as translations_router
from publisher.api.users import router as users_router
from publisher.api.works import router as works_router

api_router = APIRouter(prefix="/api")

api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(users_router, tags=["users"])
api_router.include_router(works_router, tags=["works"])
api_router.include_router(translations_router, tags=["translations"])
