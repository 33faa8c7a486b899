"""
Logging context management for propagating contextual information across logs
Uses structlog contextvars for async-safe context propagation
"""
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

import structlog


def generate_request_id() -> str:
    """Generate a unique request ID"""
    return str(uuid.uuid4())[:8]


@contextmanager
def log_context(**kwargs: Any) -> Generator[None, None, None]:
    """
    Context manager for adding temporary context to logs

    Example:
        with log_context(sidebar_item_id=12):
            logger.info("Provisioning table")  # Will include sidebar_item_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)

    try:
        yield
    finally:
        structlog.contextvars.unbind_contextvars(*kwargs.keys())


@contextmanager
def request_context(
    request_id: Optional[str] = None,
    sidebar_item_id: Optional[int] = None
) -> Generator[str, None, None]:
    """
    Context manager for HTTP request tracking

    Args:
        request_id: Request ID (auto-generated if not provided)
        sidebar_item_id: Sidebar item addressed by the request, if any

    Yields:
        request_id: The request ID for this context
    """
    if request_id is None:
        request_id = generate_request_id()

    context: Dict[str, Any] = {"request_id": request_id}
    if sidebar_item_id is not None:
        context["sidebar_item_id"] = sidebar_item_id

    with log_context(**context):
        yield request_id
