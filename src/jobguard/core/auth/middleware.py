"""Request correlation middleware.

Every request gets a correlation ID, taken from the incoming header when
present. It threads together the log events and audit records produced
while handling one logical action.
"""

import uuid

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from jobguard.core.constants import (
    DEFAULT_CORRELATION_HEADER,
    MAX_CORRELATION_ID_LENGTH,
)


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Middleware that adds a correlation ID to each request.

    The correlation ID is added to:
    - request.state.request_id (and trace_id, used by the error handlers)
    - the response header
    - the structlog context
    """

    def __init__(
        self,
        app: ASGIApp,
        header_name: str = DEFAULT_CORRELATION_HEADER,
    ) -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        incoming = request.headers.get(self.header_name, "")[:MAX_CORRELATION_ID_LENGTH]
        request_id = incoming or str(uuid.uuid4())

        request.state.request_id = request_id
        request.state.trace_id = request_id

        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "actor_id", "role")

        response.headers[self.header_name] = request_id
        return response
