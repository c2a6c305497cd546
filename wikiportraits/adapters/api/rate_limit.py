# wikiportraits/adapters/api/rate_limit.py
import time
from collections import deque
from threading import Lock
from typing import Deque, Dict, Optional

import structlog
from fastapi import HTTPException, Request, Response, status

from wikiportraits.shared.config import settings

logger = structlog.get_logger()

RATE_LIMIT_MESSAGE = "Too many requests. Please try again later."
SWEEP_EVERY = 1000


class SlidingWindowLimiter:
    """
    In-memory sliding-window limiter keyed by ``{route}:{client ip}``.
    Per-process only; each worker counts on its own.
    """

    def __init__(self, window_seconds: float = 60.0):
        self.window_seconds = window_seconds
        self._hits: Dict[str, Deque[float]] = {}
        self._lock = Lock()
        self._checks = 0

    def check(self, key: str, limit: int, now: Optional[float] = None) -> int:
        """
        Records a hit and returns the remaining allowance.

        Returns -1 (and records nothing) when the key is over its limit.
        """
        now = time.monotonic() if now is None else now
        with self._lock:
            self._checks += 1
            if self._checks % SWEEP_EVERY == 0:
                self._sweep(now)

            hits = self._hits.setdefault(key, deque())
            while hits and now - hits[0] >= self.window_seconds:
                hits.popleft()

            if len(hits) >= limit:
                return -1

            hits.append(now)
            return limit - len(hits)

    def _sweep(self, now: float) -> None:
        """Drops keys whose window is empty. Caller holds the lock."""
        for key in list(self._hits):
            hits = self._hits[key]
            while hits and now - hits[0] >= self.window_seconds:
                hits.popleft()
            if not hits:
                del self._hits[key]

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


limiter = SlidingWindowLimiter(window_seconds=settings.RATE_LIMIT_WINDOW_SEC)


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.client.host if request.client else "unknown"


def rate_limit(route_name: str, limit: int):
    """
    Dependency factory:

        @router.post("/upload", dependencies=[Depends(rate_limit("commons-upload", settings.RATE_LIMIT_WRITE))])
    """

    async def dependency(request: Request, response: Response) -> None:
        key = f"{route_name}:{client_ip(request)}"
        remaining = limiter.check(key, limit)

        if remaining < 0:
            logger.warning("rate_limit_exceeded", key=key, limit=limit)
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail=RATE_LIMIT_MESSAGE,
                headers={
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                    "Retry-After": str(settings.RATE_LIMIT_WINDOW_SEC),
                },
            )

        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)

    return dependency
