"""FastAPI dependencies: secret store access, settings, per-IP rate limiting."""

import math
import time
from collections import deque
from threading import Lock
from typing import Annotated, Callable, Deque

from fastapi import Depends, Request

from whisperlink.core.config import Settings
from whisperlink.core.errors import RateLimitError
from whisperlink.services.secret_store import SecretStore


class SlidingWindowRateLimiter:
    """In-memory rate limit: subject -> timestamps of recent requests."""

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock
        self._hits: dict[str, Deque[float]] = {}
        self._lock = Lock()
        self._last_prune = clock()

    def check(self, subject: str) -> None:
        """Record one request for ``subject`` or raise RateLimitError."""
        now = self._clock()
        window_start = now - self.window_seconds
        with self._lock:
            if now - self._last_prune >= self.window_seconds:
                self._prune(window_start)
                self._last_prune = now
            hits = self._hits.setdefault(subject, deque())
            while hits and hits[0] <= window_start:
                hits.popleft()
            if len(hits) >= self.limit:
                retry_after = max(1, math.ceil(hits[0] + self.window_seconds - now))
                raise RateLimitError(retry_after_seconds=retry_after)
            hits.append(now)

    def _prune(self, window_start: float) -> None:
        # Once per window: drop subjects with no hit inside it
        for key in [k for k, v in self._hits.items() if not v or v[-1] <= window_start]:
            del self._hits[key]

    @property
    def tracked_subjects(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


def client_ip(request: Request) -> str:
    # Peer address only; X-Forwarded-For is client-controlled
    return request.client.host if request.client else "unknown"


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_secret_store(request: Request) -> SecretStore:
    """Return the process-wide store created during application startup."""
    return request.app.state.secret_store


def enforce_rate_limit(request: Request) -> None:
    limiter: SlidingWindowRateLimiter = request.app.state.rate_limiter
    limiter.check(client_ip(request))


SettingsDep = Annotated[Settings, Depends(get_app_settings)]
StoreDep = Annotated[SecretStore, Depends(get_secret_store)]
