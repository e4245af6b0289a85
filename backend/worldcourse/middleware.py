"""In-memory rate limiting for the credential endpoints."""
import asyncio
import logging
import time
from collections import defaultdict, deque
from typing import Deque, Dict, Iterable

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from .errors import error_body

logger = logging.getLogger(__name__)

CREDENTIAL_PATHS = (
    "/api/login",
    "/api/register",
    "/api/forgot-password",
    "/api/reset-password",
)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Sliding-window limiter keyed by client IP and path.

    Only requests to ``paths`` are counted, which caps brute-force attempts
    against login and password recovery without throttling the rest of the API.
    """

    def __init__(
        self,
        app,
        *,
        requests: int = 20,
        window_seconds: int = 60,
        paths: Iterable[str] = CREDENTIAL_PATHS,
        enabled: bool = True,
    ):
        super().__init__(app)
        self.requests = max(1, requests)
        self.window = max(1, window_seconds)
        self.paths = frozenset(paths)
        self.enabled = enabled
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._state_lock = asyncio.Lock()
        self._last_cleanup = time.monotonic()

    @staticmethod
    def _client_key(request: Request) -> str:
        client = request.client
        host = client.host if client else "unknown"
        return f"{host}:{request.url.path}"

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self.enabled or request.url.path not in self.paths:
            return await call_next(request)

        key = self._client_key(request)
        now = time.monotonic()
        earliest = now - self.window

        async with self._state_lock:
            self._maybe_cleanup(now)
            timestamps = self._hits[key]
            while timestamps and timestamps[0] < earliest:
                timestamps.popleft()

            if len(timestamps) >= self.requests:
                retry_after = max(1, int(timestamps[0] + self.window - now))
                logger.warning(f"Rate limit exceeded for {key}")
                return JSONResponse(
                    error_body("Too many requests. Please try again later."),
                    status_code=429,
                    headers={"Retry-After": str(retry_after)},
                )
            timestamps.append(now)

        return await call_next(request)

    def _maybe_cleanup(self, now: float) -> None:
        """Forget clients that have been quiet for two windows."""
        if now - self._last_cleanup < self.window:
            return
        cutoff = now - self.window * 2
        for key in [k for k, ts in self._hits.items() if not ts or ts[-1] < cutoff]:
            self._hits.pop(key, None)
        self._last_cleanup = now
