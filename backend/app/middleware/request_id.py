"""
Notekeep Backend: Request ID Middleware
=========================================

What:  Assigns an id to every request and echoes it in the X-Request-ID header.
How:   Reuses a client-supplied X-Request-ID or generates a short one, stores it
       in a ContextVar for loggers and error handlers, and in request.state
       for route code.
When:  Outermost custom middleware, so every later log line can include it.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one event loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Behavior:
        1. Take X-Request-ID from the request if the client sent one
        2. Otherwise generate 8 hex chars (enough to correlate log lines)
        3. Expose it through request_id_var and request.state.request_id
        4. Return it in the response's X-Request-ID header
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        response.headers[REQUEST_ID_HEADER] = rid
        return response
