"""Application errors and their JSON rendering.

Learn: services raise these instead of HTTPException so the same code
works from the CLI and from tests without a request. create_app()
registers the handlers below; every error leaves the API as
{"error": <label>, "message": <text>}.
"""

from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger()


class PublisherError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    error = "Internal server error"
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        self.message = message or self.default_message
        if error:
            self.error = error
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.error, "message": self.message}


class ValidationFailed(PublisherError):
    status_code = 400
    error = "Validation failed"
    default_message = "The request body is invalid"


class DuplicateAccount(PublisherError):
    status_code = 400
    error = "User already exists"
    default_message = "An account with this email already exists"


class Conflict(PublisherError):
    status_code = 400
    error = "Conflict"
    default_message = "The resource already exists"


class InvalidCredentials(PublisherError):
    status_code = 401
    error = "Invalid credentials"
    default_message = "Email or password is incorrect"


class Unauthenticated(PublisherError):
    status_code = 401
    error = "Authentication required"
    default_message = "Please provide a valid token"


class AccountInactive(PublisherError):
    status_code = 403
    error = "Account inactive"
    default_message = "Your account has been suspended or deleted"


class Forbidden(PublisherError):
    status_code = 403
    error = "Forbidden"
    default_message = "You do not have permission to access this resource"


class NotFound(PublisherError):
    status_code = 404
    error = "Not found"
    default_message = "Resource not found"


class Internal(PublisherError):
    pass


# ─── Handlers ────────────────────────────────────────────


async def _publisher_error_handler(request: Request, exc: PublisherError):
    headers = None
    if isinstance(exc, Unauthenticated):
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.error("request.failed", path=request.url.path, error=exc.message)
    return JSONResponse(
        status_code=exc.status_code, content=exc.to_dict(), headers=headers
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ())[1:]),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    logger.info("request.invalid", path=request.url.path, errors=len(errors))
    body = ValidationFailed(
        "; ".join(f"{e['field']}: {e['message']}" for e in errors) or None
    ).to_dict()
    body["errors"] = errors
    return JSONResponse(status_code=400, content=body)


async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404 and exc.detail == "Not Found":
        content = {
            "error": "Not Found",
            "message": f"Cannot {request.method} {request.url.path}",
        }
    else:
        content = {"error": str(exc.detail), "message": str(exc.detail)}
    return JSONResponse(
        status_code=exc.status_code, content=content, headers=exc.headers
    )


async def _unhandled_error_handler(request: Request, exc: Exception):
    # The raw message is echoed to the caller; internal text is not sanitized.
    logger.exception("request.crashed", path=request.url.path)
    return JSONResponse(status_code=500, content=Internal(str(exc)).to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PublisherError, _publisher_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
