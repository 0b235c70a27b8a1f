"""structlog setup.

Learn: loggers are created with structlog.get_logger() at module level
and emit dotted event names ("auth.login_failed"). Context such as the
request id is bound through contextvars by RequestIdMiddleware, so it
shows up on every line without being passed around.
"""

import logging
import sys

import structlog

from publisher.config import Settings


def configure_logging(settings: Settings) -> None:
    """Configure structlog and the stdlib root logger once at startup."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if settings.log_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
