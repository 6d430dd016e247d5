import logging
from typing import Callable

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from src.utils.exceptions import PayloadTooLargeError

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    """
    Reject request bodies over `max_body_bytes()` with 413 {"error": "request body too large"}.

    A declared Content-Length is checked up front. Bodies without one (chunked uploads)
    are counted as they are received, and reading stops once the limit is passed.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: Callable[[], int]):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = self.max_body_bytes()
        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > limit:
            logger.warning("Refused %s %s: Content-Length %s over %d", scope["method"], scope["path"], content_length, limit)
            await self._reject(scope, receive, send)
            return

        received = 0
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > limit:
                    logger.warning("Refused %s %s: streamed body over %d", scope["method"], scope["path"], limit)
                    # Raised inside FastAPI's body read, rendered by the AppError handler
                    raise PayloadTooLargeError()
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracking_send)
        except PayloadTooLargeError:
            # Body read outside a route (no handler ran), answer here if nothing was sent yet
            if response_started:
                raise
            await self._reject(scope, receive, send)

    @staticmethod
    async def _reject(scope: Scope, receive: Receive, send: Send) -> None:
        error = PayloadTooLargeError()
        response = JSONResponse(status_code=error.status_code, content=error.to_body())
        await response(scope, receive, send)
