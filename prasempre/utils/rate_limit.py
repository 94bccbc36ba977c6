"""
Per-client-IP sliding window rate limiting
Guards billing-session creation against abuse
"""

import os
import time
from collections import deque
from typing import Callable, Deque, Dict, Optional, Tuple

from fastapi import HTTPException, Request


def get_client_ip(request: Request) -> str:
    """Best guess at the caller's IP behind proxies"""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()

    for header in ("x-real-ip", "cf-connecting-ip"):
        value = request.headers.get(header)
        if value:
            return value.strip()

    return request.client.host if request.client else "unknown"


class SlidingWindowRateLimiter:
    """
    Allows `limit` hits per key in any trailing `window_seconds`

    State is in-process memory; each worker keeps its own window. Keys whose
    window has fully passed are swept at most once per window.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: int,
        scope: str = "default",
        clock: Callable[[], float] = time.monotonic,
    ):
        self.limit = limit
        self.window_seconds = window_seconds
        self.scope = scope
        self.clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep = clock()

    def hit(self, key: str) -> Tuple[bool, int, int]:
        """
        Record a request for `key` if it fits in the window

        Returns:
            (is_allowed, remaining, reset_in_seconds)
        """
        now = self.clock()
        if now - self._last_sweep >= self.window_seconds:
            self._sweep(now)
        hits = self._hits.setdefault(f"{self.scope}:{key}", deque())

        while hits and hits[0] <= now - self.window_seconds:
            hits.popleft()

        if len(hits) >= self.limit:
            reset_in = max(1, int(hits[0] + self.window_seconds - now + 0.999))
            return False, 0, reset_in

        hits.append(now)
        reset_in = max(1, int(hits[0] + self.window_seconds - now + 0.999))
        return True, self.limit - len(hits), reset_in

    def _sweep(self, now: float) -> None:
        cutoff = now - self.window_seconds
        for name in [name for name, hits in self._hits.items() if not hits or hits[-1] <= cutoff]:
            del self._hits[name]
        self._last_sweep = now

    def reset(self) -> None:
        self._hits.clear()
        self._last_sweep = self.clock()

    async def __call__(self, request: Request) -> None:
        """FastAPI dependency: raise 429 with a Retry-After hint when over the limit"""
        client_ip = get_client_ip(request)
        is_allowed, remaining, reset_in = self.hit(client_ip)

        request.state.rate_limit_remaining = remaining
        request.state.rate_limit_reset = reset_in

        if not is_allowed:
            raise HTTPException(
                status_code=429,
                detail="Muitas requisições. Tente novamente mais tarde.",
                headers={
                    "Retry-After": str(reset_in),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(reset_in),
                },
            )


def rate_limit_headers(request: Request) -> Dict[str, str]:
    """Headers describing the caller's remaining budget, if a limiter ran"""
    remaining: Optional[int] = getattr(request.state, "rate_limit_remaining", None)
    reset_in: Optional[int] = getattr(request.state, "rate_limit_reset", None)
    if remaining is None or reset_in is None:
        return {}
    return {"X-RateLimit-Remaining": str(remaining), "X-RateLimit-Reset": str(reset_in)}


billing_rate_limiter = SlidingWindowRateLimiter(
    limit=int(os.getenv("BILLING_RATE_LIMIT", "5")),
    window_seconds=int(os.getenv("BILLING_RATE_WINDOW_SECONDS", "3600")),
    scope="create-billing",
)
