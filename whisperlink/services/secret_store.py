"""Ephemeral in-memory secret store with exactly-once reads.

Every mutation happens under one lock, so a read cannot interleave with
another read or with a sweep of the same id: check-expiry-and-remove is a
single critical section. Operations are O(1) dict accesses except
``sweep``, which is O(n) in the number of stored entries.
"""

from __future__ import annotations

import time
import uuid
from threading import Lock
from typing import Callable, Optional

from whisperlink.models.entities import SecretEntry, SweepReport

DEFAULT_TTL_SECONDS = 24 * 60 * 60.0

Clock = Callable[[], float]


def generate_secret_id() -> str:
    """Random UUID4 text: 122 random bits from ``os.urandom``."""
    return str(uuid.uuid4())


class SecretStore:
    """Single-consumption key-value store with time-based expiry."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Clock = time.time,
        id_factory: Callable[[], str] = generate_secret_id,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl = ttl_seconds
        self._clock = clock
        self._id_factory = id_factory
        self._entries: dict[str, SecretEntry] = {}
        self._lock = Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def now(self) -> float:
        return self._clock()

    def put(self, payload: str) -> tuple[str, float]:
        """Store ``payload`` and return ``(id, expires_at)``.

        The payload is stored verbatim; validation is the caller's job.
        """
        with self._lock:
            secret_id = self._id_factory()
            while secret_id in self._entries:
                secret_id = self._id_factory()
            expires_at = self._clock() + self._ttl
            self._entries[secret_id] = SecretEntry(
                id=secret_id,
                payload=payload,
                expires_at=expires_at,
            )
        return secret_id, expires_at

    def take_if_valid(self, secret_id: str) -> Optional[str]:
        """Remove and return the payload for ``secret_id``.

        Returns None when the id is unknown, already taken or expired; the
        three cases are not distinguished. An expired entry is removed here
        even if no sweep has run yet.
        """
        with self._lock:
            entry = self._entries.pop(secret_id, None)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                return None
            return entry.payload

    def sweep(self, now: Optional[float] = None) -> int:
        """Remove every entry with ``expires_at <= now``; return how many."""
        return self.sweep_report(now).removed

    def sweep_report(self, now: Optional[float] = None) -> SweepReport:
        """Sweep and return the removed count with the size left behind."""
        with self._lock:
            if now is None:
                now = self._clock()
            expired = [sid for sid, e in self._entries.items() if e.is_expired(now)]
            for sid in expired:
                del self._entries[sid]
            return SweepReport(removed=len(expired), remaining=len(self._entries), swept_at=now)

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> int:
        """Drop every entry; return how many were dropped."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, secret_id: object) -> bool:
        with self._lock:
            return secret_id in self._entries

    def __repr__(self) -> str:
        return f"SecretStore(ttl_seconds={self._ttl}, size={self.size()})"
