"""
Rate limiting middleware for FastAPI.
Implements in-memory sliding-window rate limiting on the pricing and recommendation routes.
"""
from typing import Callable, Dict, List, Optional, Tuple
from collections import defaultdict
import logging
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp

from cost_analyzer.core.config import config

logger = logging.getLogger(__name__)


# Path prefixes subject to rate limiting
RATE_LIMITED_PREFIXES: Tuple[str, ...] = (
    "/api/pricing",
    "/api/recommendations",
)


class RateLimiter:
    """
    In-memory rate limiter using a sliding window.

    Stores timestamps of recent requests per client and route; expired
    timestamps are dropped on every check so memory stays bounded.
    """

    def __init__(self, window_seconds: int, clock: Callable[[], float] = time.monotonic):
        """
        Initialize rate limiter.

        Args:
            window_seconds: Length of the sliding window
            clock: Callable returning monotonic seconds
        """
        self.window_seconds = window_seconds
        self._clock = clock
        # client_id -> route -> request timestamps
        self._storage: Dict[str, Dict[str, List[float]]] = defaultdict(lambda: defaultdict(list))

    @staticmethod
    def client_id(request: Request) -> str:
        """
        Identify the client: first X-Forwarded-For hop, else the peer address.

        Args:
            request: Incoming request

        Returns:
            Client identifier string
        """
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return f"ip:{forwarded_for.split(',')[0].strip()}"
        return f"ip:{request.client.host if request.client else 'unknown'}"

    def _cleanup_expired(self, client_id: str, route: str) -> None:
        if client_id not in self._storage or route not in self._storage[client_id]:
            return

        cutoff = self._clock() - self.window_seconds
        remaining = [ts for ts in self._storage[client_id][route] if ts > cutoff]
        if remaining:
            self._storage[client_id][route] = remaining
            return

        del self._storage[client_id][route]
        if not self._storage[client_id]:
            del self._storage[client_id]

    def is_allowed(self, client_id: str, route: str, limit: int) -> bool:
        """
        Record a request if it fits under the limit.

        Args:
            client_id: Client identifier
            route: Rate-limited route
            limit: Maximum requests per window

        Returns:
            True if allowed, False if rate limited
        """
        self._cleanup_expired(client_id, route)
        timestamps = self._storage[client_id][route]
        if len(timestamps) >= limit:
            return False
        timestamps.append(self._clock())
        return True

    def get_remaining(self, client_id: str, route: str, limit: int) -> int:
        """Remaining requests for a client and route in the current window."""
        self._cleanup_expired(client_id, route)
        return max(0, limit - len(self._storage.get(client_id, {}).get(route, [])))

    def reset(self) -> None:
        """Forget every recorded request."""
        self._storage.clear()


def _limited_route(path: str) -> Optional[str]:
    for prefix in RATE_LIMITED_PREFIXES:
        if path == prefix or path.startswith(prefix + "/"):
            return prefix
    return None


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for rate limiting.

    Applies the configured per-client limit to the pricing and
    recommendation routes; other routes pass through untouched.
    """

    def __init__(
        self,
        app: ASGIApp,
        limit: Optional[int] = None,
        window_seconds: Optional[int] = None,
        limiter: Optional[RateLimiter] = None,
    ):
        super().__init__(app)
        self.limit = limit if limit is not None else config.RATE_LIMIT_PER_WINDOW
        window = window_seconds if window_seconds is not None else config.RATE_LIMIT_WINDOW_SECONDS
        self.limiter = limiter or RateLimiter(window)

    async def dispatch(self, request: Request, call_next: ASGIApp):
        """
        Apply rate limiting if the route is covered.

        Args:
            request: Incoming request
            call_next: Next middleware or route handler

        Returns:
            Response object
        """
        route = _limited_route(request.url.path)

        if route is not None:
            try:
                client_id = self.limiter.client_id(request)
                if not self.limiter.is_allowed(client_id, route, self.limit):
                    logger.info(
                        f"Rate limit exceeded for {route} "
                        f"(limit: {self.limit}/{self.limiter.window_seconds}s)"
                    )
                    return JSONResponse(
                        status_code=429,
                        content={
                            "status": "error",
                            "error": "rate_limited",
                            "message": "Too many requests. Please try again later.",
                            "retry_after": self.limiter.window_seconds,
                        },
                        headers={"Retry-After": str(self.limiter.window_seconds)},
                    )
            except Exception as error:
                # Fail closed
                logger.error(f"Rate limiter error: {error}", exc_info=True)
                return JSONResponse(
                    status_code=503,
                    content={
                        "status": "error",
                        "error": "rate_limit_error",
                        "message": "Rate limiting service unavailable. Please try again later.",
                    }
                )

        return await call_next(request)
