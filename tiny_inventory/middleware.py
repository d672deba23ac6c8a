"""HTTP middleware and request guards.

- RequestContextMiddleware: assigns X-Request-ID and logs one line per request
- SlidingWindowRateLimiter: per-client request quota for the JSON API
"""

import asyncio
import logging
import math
import time
from collections import deque
from uuid import uuid4

from fastapi import HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("uvicorn.error")

REQUEST_ID_HEADER = "X-Request-ID"

# Paths that are too noisy to log on every hit
QUIET_PATHS = ("/health", "/docs", "/redoc", "/openapi.json", "/static")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Propagate or generate a request id and log the request outcome."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000

        response.headers[REQUEST_ID_HEADER] = request_id
        if not request.url.path.startswith(QUIET_PATHS):
            logger.info(
                "[http] %s %s -> %s in %.1fms request_id=%s",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
                request_id,
            )
        return response


class SlidingWindowRateLimiter:
    """Per-client request quota over a sliding window, kept in process memory.

    Each client maps to the timestamps of its requests inside the current
    window. Clients whose window has emptied are swept once the map grows
    past `max_clients`.
    """

    def __init__(self, times: int, seconds: int, max_clients: int = 10_000) -> None:
        self.times = times
        self.seconds = seconds
        self.max_clients = max_clients
        self._windows: dict[str, deque[float]] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def client_key(request: Request) -> str:
        return request.client.host if request.client else "unknown"

    def _sweep(self, window_start: float) -> None:
        idle = [key for key, hits in self._windows.items() if not hits or hits[-1] <= window_start]
        for key in idle:
            del self._windows[key]

    async def hit(self, key: str) -> None:
        """Count one request from key.

        Raises:
            HTTPException 429: If key has used its quota for the window.
        """
        now = time.monotonic()
        window_start = now - self.seconds
        async with self._lock:
            if key not in self._windows and len(self._windows) >= self.max_clients:
                self._sweep(window_start)

            hits = self._windows.setdefault(key, deque())
            while hits and hits[0] <= window_start:
                hits.popleft()

            if len(hits) >= self.times:
                retry_after = max(1, math.ceil(hits[0] - window_start))
                raise HTTPException(
                    status_code=429,
                    detail="Too Many Requests",
                    headers={"Retry-After": str(retry_after)},
                )
            hits.append(now)

    async def reset(self) -> None:
        async with self._lock:
            self._windows.clear()


async def enforce_rate_limit(request: Request) -> None:
    """Router dependency applying the app's limiter, if one is configured."""
    limiter: SlidingWindowRateLimiter | None = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        return
    await limiter.hit(limiter.client_key(request))
