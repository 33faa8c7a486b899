"""
Logging middleware for FastAPI
Logs all HTTP requests with timing, status codes, and context
"""
import time
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from utils.logger import get_logger
from utils.log_context import generate_request_id, request_context

logger = get_logger(__name__)

# Path prefixes whose next segment is a sidebar item id
SIDEBAR_ITEM_PREFIXES = ("sidebar", "tables")


def extract_sidebar_item_id(path: str) -> Optional[int]:
    """Sidebar item id from /sidebar/{id}/... or /tables/{id}/..., if present"""
    parts = [part for part in path.split("/") if part]
    for idx, part in enumerate(parts[:-1]):
        if part in SIDEBAR_ITEM_PREFIXES and parts[idx + 1].isdigit():
            return int(parts[idx + 1])
    return None


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log all HTTP requests and responses with structured logging
    """

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        req_id = generate_request_id()
        sidebar_item_id = extract_sidebar_item_id(request.url.path)
        start_time = time.time()

        with request_context(request_id=req_id, sidebar_item_id=sidebar_item_id):
            logger.info(
                "Request started",
                method=request.method,
                path=request.url.path,
                query_params=dict(request.query_params) if request.query_params else None,
                client_host=request.client.host if request.client else None,
            )

            try:
                response = await call_next(request)
                duration_ms = int((time.time() - start_time) * 1000)

                logger.info(
                    "Request completed",
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=duration_ms,
                )

                response.headers["X-Request-ID"] = req_id
                return response

            except Exception as e:
                duration_ms = int((time.time() - start_time) * 1000)

                logger.error(
                    "Request failed",
                    method=request.method,
                    path=request.url.path,
                    duration_ms=duration_ms,
                    error=str(e),
                    exc_info=True
                )
                raise
