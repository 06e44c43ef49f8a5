"""Request ID propagation and access logging."""

import time
import uuid

import structlog
from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from formaflow.core.logging import get_logger, set_request_id

REQUEST_ID_HEADER = "X-Request-ID"

logger = get_logger(__name__)


class RequestIDMiddleware:
    """
    Tag every HTTP request with an ID and log its outcome.

    A caller-supplied X-Request-ID is reused, otherwise a UUID4 is generated.
    The ID goes into the logging context for the duration of the request and
    is echoed back on the response.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = Headers(scope=scope).get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        set_request_id(request_id)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(method=scope["method"], path=scope["path"])

        started = time.perf_counter()

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message).append(REQUEST_ID_HEADER, request_id)

                status_code = message["status"]
                log = logger.warning if status_code >= 500 else logger.info
                log(
                    "request.complete",
                    status_code=status_code,
                    duration_ms=round((time.perf_counter() - started) * 1000, 1),
                )

            await send(message)

        await self.app(scope, receive, send_with_request_id)
