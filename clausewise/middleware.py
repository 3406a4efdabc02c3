import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Request ID (or sweep run ID in the worker) for the current async task
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

_MAX_REQUEST_ID_LENGTH = 128


def set_request_id(value: str | None = None) -> str:
    """Bind an ID to the current context so every log line carries it."""
    request_id = value or str(uuid.uuid4())
    request_id_var.set(request_id)
    return request_id


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a unique request ID to every incoming request.

    Uses the caller's X-Request-ID when it is present and reasonably short
    (schedulers pass their own run IDs), otherwise generates a UUID. The ID is
    echoed back in the response headers.
    """

    async def dispatch(self, request: Request, call_next):
        incoming = request.headers.get("X-Request-ID")
        if incoming and len(incoming) > _MAX_REQUEST_ID_LENGTH:
            incoming = None
        request_id = set_request_id(incoming)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class RequestIDLogFilter(logging.Filter):
    """Inject the current request ID into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True
