"""Logging setup and request logging middleware."""
import json
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from deviceregistry.config import Settings

logger = logging.getLogger("deviceregistry.requests")


class JsonFormatter(logging.Formatter):
    """Render each record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(settings: Settings) -> None:
    """Install a single stream handler on the ``deviceregistry`` logger tree."""
    root = logging.getLogger("deviceregistry")
    root.setLevel(settings.log_level.upper())

    if settings.log_structured:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(settings.log_format)

    # Re-importing the app (tests, reload) must not stack handlers
    for handler in root.handlers:
        if getattr(handler, "_deviceregistry", False):
            handler.setFormatter(formatter)
            return

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    handler._deviceregistry = True
    root.addHandler(handler)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status code and duration of every request."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Error while processing %s %s", request.method, request.url.path
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response
