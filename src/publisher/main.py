"""FastAPI application factory.

Learn: App factory pattern — create_app() returns a configured FastAPI
instance. The Settings object passed in is the only configuration the
app sees: it builds the token service, the password hasher and the
database engine from it and parks them on app.state, where request
dependencies pick them up.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from publisher import __version__
from publisher.api import api_router
from publisher.auth.jwt import TokenService
from publisher.auth.password import PasswordHasher
from publisher.config import Settings, settings as default_settings
from publisher.db.engine import build_engine, build_session_factory
from publisher.errors import register_exception_handlers
from publisher.log import configure_logging
from publisher.middleware.request_id import RequestIdMiddleware
from publisher.middleware.security import SecurityHeadersMiddleware

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    config: Settings = app.state.settings
    logger.info(
        "publisher.starting",
        version=__version__,
        environment=config.environment,
        port=config.port,
    )

    yield

    logger.info("publisher.shutdown")
    await app.state.engine.dispose()


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """Build and return the FastAPI application."""
    config = config or default_settings
    configure_logging(config)

    app = FastAPI(
        title="Publisher API",
        description="Multi-role publishing platform — authors, translators, editors",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.tokens = TokenService.from_settings(config)
    app.state.hasher = PasswordHasher(rounds=config.bcrypt_rounds)
    app.state.engine = build_engine(config)
    app.state.session_factory = build_session_factory(app.state.engine)

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → RequestId → Security → handler
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "message": "Welcome to Publisher API",
            "version": __version__,
            "endpoints": {
                "health": "/api/health",
                "auth": "/api/auth",
                "users": "/api/users",
                "works": "/api/works",
                "translations": "/api/translations",
            },
        }

    return app


# Default app instance (used by uvicorn: publisher.main:app)
app = create_app()
