"""
Request size limiting middleware for FastAPI.
Protects the workload routes from oversized payloads.
"""
from typing import Any, Optional, Set
import json
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


MAX_REQUEST_BODY_SIZE = 1_048_576  # 1 MB in bytes
MAX_ENTRIES_PER_CATEGORY = 200

RESOURCE_CATEGORIES = (
    "compute",
    "storage",
    "database",
    "networking",
    "serverless",
    "managedServices",
)

# Routes accepting a workload body
PROTECTED_ENDPOINTS: Set[str] = {
    "/api/pricing",
    "/api/pricing/compare",
    "/api/recommendations",
}


def _too_large(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=413,
        content={
            "status": "error",
            "error": "request_too_large",
            "message": message,
        }
    )


class RequestSizeLimiterMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for request size limiting.

    Applies size limits to POSTs on the workload routes only.
    """

    async def dispatch(self, request: Request, call_next: ASGIApp):
        """
        Apply size limits if the route is protected.

        Args:
            request: Incoming request
            call_next: Next middleware or route handler

        Returns:
            Response object
        """
        path = request.url.path
        if request.method != "POST" or path not in PROTECTED_ENDPOINTS:
            return await call_next(request)

        try:
            content_length = request.headers.get("Content-Length")
            if content_length:
                try:
                    if int(content_length) > MAX_REQUEST_BODY_SIZE:
                        logger.info(
                            f"Request body size exceeded for {path}: "
                            f"{content_length} bytes (limit: {MAX_REQUEST_BODY_SIZE})"
                        )
                        return _too_large("Request body size exceeds allowed limit of 1 MB.")
                except ValueError:
                    # Invalid Content-Length header, measure the body instead
                    pass

            body_bytes = await request.body()
            if len(body_bytes) > MAX_REQUEST_BODY_SIZE:
                logger.info(
                    f"Request body size exceeded for {path}: "
                    f"{len(body_bytes)} bytes (limit: {MAX_REQUEST_BODY_SIZE})"
                )
                return _too_large("Request body size exceeds allowed limit of 1 MB.")

            if body_bytes:
                try:
                    validation_error = self._validate_workload(json.loads(body_bytes.decode("utf-8")))
                except (json.JSONDecodeError, UnicodeDecodeError):
                    # Malformed bodies are rejected by the route itself
                    validation_error = None

                if validation_error:
                    logger.info(f"Payload validation failed for {path}: {validation_error}")
                    return _too_large(validation_error)

            # Restore the consumed body for downstream handlers
            async def receive():
                return {"type": "http.request", "body": body_bytes, "more_body": False}

            request._receive = receive

        except Exception as error:
            # Fail closed
            logger.error(f"Error during size limiting for {path}: {error}", exc_info=True)
            return _too_large("Request validation failed.")

        return await call_next(request)

    @staticmethod
    def _validate_workload(body_json: Any) -> Optional[str]:
        """
        Check per-category entry counts of a workload body.

        Args:
            body_json: Parsed JSON body

        Returns:
            Error message if a category is too large, None otherwise
        """
        if not isinstance(body_json, dict):
            return None

        for category in RESOURCE_CATEGORIES:
            entries = body_json.get(category)
            if isinstance(entries, list) and len(entries) > MAX_ENTRIES_PER_CATEGORY:
                return (
                    f"Too many {category} entries: {len(entries)} "
                    f"(limit: {MAX_ENTRIES_PER_CATEGORY})"
                )
        return None
