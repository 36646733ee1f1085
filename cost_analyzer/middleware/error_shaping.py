"""
Safe error middleware.
Turns unhandled exceptions into a generic JSON 500 without leaking tracebacks.
"""
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """
    Catch-all for errors that escape route handlers.

    The traceback is logged server-side; the client only receives a
    generic message and the request id.
    """

    async def dispatch(self, request: Request, call_next: ASGIApp) -> Response:
        try:
            return await call_next(request)
        except Exception as error:
            request_id = getattr(request.state, "request_id", None)
            logger.error(
                f"Unhandled error on {request.url.path} (request_id={request_id}): {error}",
                exc_info=True
            )
            content = {
                "status": "error",
                "error": "internal_error",
                "message": "An unexpected error occurred. Please try again later.",
            }
            if request_id:
                content["request_id"] = request_id
            return JSONResponse(status_code=500, content=content)
