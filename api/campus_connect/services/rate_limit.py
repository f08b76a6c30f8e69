import logging
import threading
import time
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Any

from fastapi import Depends, HTTPException, Request

from ..auth.deps import get_current_user

logger = logging.getLogger(__name__)


@dataclass
class RateDecision:
    allowed: bool
    retry_after_seconds: int


class SlidingWindowLimiter:
    """Per-key sliding window kept in process memory."""

    def __init__(self) -> None:
        self._hits: dict[str, deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()

    def check(self, key: str, limit: int, window_seconds: int, now: float | None = None) -> RateDecision:
        now = time.monotonic() if now is None else now
        with self._lock:
            hits = self._hits[key]
            while hits and hits[0] <= now - window_seconds:
                hits.popleft()
            if len(hits) >= limit:
                return RateDecision(allowed=False, retry_after_seconds=max(1, int(hits[0] + window_seconds - now)))
            hits.append(now)
            return RateDecision(allowed=True, retry_after_seconds=0)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


limiter = SlidingWindowLimiter()


def _caller_key(request: Request) -> str:
    auth = request.headers.get("authorization", "").strip()
    if auth.lower().startswith("bearer "):
        return f"token:{auth[7:39]}"
    forwarded = request.headers.get("x-forwarded-for", "").strip()
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def _enforce(route_key: str, caller: str, limit: int, window_seconds: int) -> None:
    decision = limiter.check(f"{route_key}:{caller}", limit=limit, window_seconds=window_seconds)
    if decision.allowed:
        return
    logger.warning("[RATE_LIMIT] route=%s caller=%s retry_after=%s", route_key, caller, decision.retry_after_seconds)
    raise HTTPException(
        status_code=429,
        detail=f"Too many requests. Retry in {decision.retry_after_seconds}s",
        headers={"Retry-After": str(decision.retry_after_seconds)},
    )


def rate_limit_dependency(route_key: str, limit: int, window_seconds: int):
    """Limit for anonymous routes, keyed by bearer prefix or client address."""

    def _dep(request: Request) -> None:
        _enforce(route_key, _caller_key(request), limit, window_seconds)

    return Depends(_dep)


def user_rate_limit_dependency(route_key: str, limit: int, window_seconds: int):
    """Limit for signed-in routes, keyed by account id.

    Cookie and bearer sessions of the same account share one budget.
    """

    def _dep(current_user: dict[str, Any] = Depends(get_current_user)) -> None:
        _enforce(route_key, f"user:{current_user['id']}", limit, window_seconds)

    return Depends(_dep)
