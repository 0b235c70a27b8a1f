"""Request ID middleware: one id per API call, on every log line it causes.

Learn: the id comes from the incoming X-Request-ID header (so a front-end
or proxy can pass its own) or is a fresh UUID. It is bound into
structlog's contextvars before the handler runs, so the events emitted
while serving the call (auth.login_failed, works.updated,
translations.status_changed, request.crashed) all carry the same
request_id. The id is echoed back in the X-Request-ID response header,
and a debug line records method, path and status once the response exists.
"""

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Generate and propagate a unique request ID."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        response: Response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        logger.debug(
            "request.completed",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
        )
        return response
