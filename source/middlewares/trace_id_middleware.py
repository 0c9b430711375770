from contextvars import ContextVar
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

TRACE_ID_HEADER = "X-Trace-ID"

_trace_id: ContextVar[str] = ContextVar("trace_id", default="-")


def current_trace_id() -> str:
    return _trace_id.get()


class TraceIDMiddleware(BaseHTTPMiddleware):
    """Assigns every request a trace id and echoes it back in the response."""

    async def dispatch(self, request: Request, call_next):
        trace_id = request.headers.get(TRACE_ID_HEADER) or uuid4().hex
        token = _trace_id.set(trace_id)
        try:
            response = await call_next(request)
        finally:
            _trace_id.reset(token)
        response.headers[TRACE_ID_HEADER] = trace_id
        return response
