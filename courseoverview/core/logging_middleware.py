import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """One log line per request, with the page type when the footer hook ran."""

    async def dispatch(self, request: Request, call_next):
        start = time.monotonic()

        response = await call_next(request)

        duration = time.monotonic() - start
        pagetype = getattr(request.state, "pagetype", None)
        if pagetype:
            logger.info(
                "%s %s [%s] -> %s (%.2fs)",
                request.method,
                request.url.path,
                pagetype,
                response.status_code,
                duration,
            )
        else:
            logger.info(
                "%s %s -> %s (%.2fs)",
                request.method,
                request.url.path,
                response.status_code,
                duration,
            )

        return response
