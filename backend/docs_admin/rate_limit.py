"""Login throttle: sliding window with hard lockout, keyed by client identity.

State lives in a per-process store, so limits are best-effort and apply to a
single instance only.  Every mutation replaces the whole entry, and nothing
awaits between reading an entry and writing it back, so no lock is needed on
the event loop.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace
from typing import Protocol

from .config import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThrottleEntry:
    """Failure history for one identity key. Timestamps are epoch seconds."""

    attempts: int
    window_started_at: float
    locked_until: float
    last_seen_at: float


class CheckResult:
    """Result of a throttle check or failure record."""

    __slots__ = ("blocked", "retry_after")

    def __init__(self, *, blocked: bool, retry_after: int = 0) -> None:
        self.blocked = blocked
        self.retry_after = retry_after

    def __repr__(self) -> str:
        return f"CheckResult(blocked={self.blocked}, retry_after={self.retry_after})"


class ThrottleStore(Protocol):
    def get(self, key: str) -> ThrottleEntry | None: ...

    def set(self, key: str, entry: ThrottleEntry) -> None: ...

    def delete(self, key: str) -> None: ...

    def items(self) -> Iterator[tuple[str, ThrottleEntry]]: ...


class InMemoryThrottleStore:
    """Dict-backed store. Swap for a shared cache to throttle across instances."""

    def __init__(self) -> None:
        self._entries: dict[str, ThrottleEntry] = {}

    def get(self, key: str) -> ThrottleEntry | None:
        return self._entries.get(key)

    def set(self, key: str, entry: ThrottleEntry) -> None:
        self._entries[key] = entry

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def items(self) -> Iterator[tuple[str, ThrottleEntry]]:
        # Snapshot so callers may delete while iterating
        return iter(list(self._entries.items()))

    def __len__(self) -> int:
        return len(self._entries)


class LoginThrottle:
    def __init__(
        self,
        store: ThrottleStore | None = None,
        clock: Callable[[], float] | None = None,
        window_seconds: int | None = None,
        max_attempts: int | None = None,
        lockout_seconds: int | None = None,
        cleanup_interval: int | None = None,
    ) -> None:
        self.store = store if store is not None else InMemoryThrottleStore()
        self._clock = clock or time.time
        self._window = window_seconds if window_seconds is not None else config.login_window_seconds
        self._max_attempts = max_attempts if max_attempts is not None else config.login_max_attempts
        self._lockout = lockout_seconds if lockout_seconds is not None else config.login_lockout_seconds
        self._cleanup_interval = cleanup_interval if cleanup_interval is not None else config.login_cleanup_interval
        if min(self._window, self._max_attempts, self._lockout, self._cleanup_interval) <= 0:
            raise ValueError("login throttle settings must be positive")
        # Entries idle this long with no active lockout are swept.
        self._retain = 2 * self._lockout
        self._writes = 0

    def _window_expired(self, entry: ThrottleEntry, now: float) -> bool:
        return now - entry.window_started_at > self._window

    def _maybe_cleanup(self, now: float) -> None:
        self._writes += 1
        if self._writes % self._cleanup_interval != 0:
            return

        removed = 0
        for key, entry in self.store.items():
            if now - entry.last_seen_at > self._retain and now > entry.locked_until:
                self.store.delete(key)
                removed += 1
        if removed:
            logger.debug("Swept %d stale login throttle entries", removed)

    def check_throttle(self, key: str) -> CheckResult:
        """Check whether *key* may attempt a login right now.

        Rolls the window over when it has expired.  Blocked results carry
        the whole seconds left on the lockout, at least 1.
        """
        now = self._clock()
        entry = self.store.get(key)
        if entry is None:
            return CheckResult(blocked=False)

        entry = replace(entry, last_seen_at=now)
        self.store.set(key, entry)
        self._maybe_cleanup(now)

        if entry.locked_until > now:
            return CheckResult(
                blocked=True,
                retry_after=max(1, math.ceil(entry.locked_until - now)),
            )

        if self._window_expired(entry, now):
            self.store.set(
                key,
                ThrottleEntry(attempts=0, window_started_at=now, locked_until=0.0, last_seen_at=now),
            )

        return CheckResult(blocked=False)

    def record_failure(self, key: str) -> CheckResult:
        """Record a failed login for *key*; lock it out once the threshold is hit."""
        now = self._clock()
        existing = self.store.get(key)

        if existing is None or self._window_expired(existing, now):
            entry = ThrottleEntry(attempts=1, window_started_at=now, locked_until=0.0, last_seen_at=now)
        else:
            entry = replace(existing, attempts=existing.attempts + 1, last_seen_at=now)

        if entry.attempts >= self._max_attempts:
            entry = replace(entry, locked_until=now + self._lockout)
            self.store.set(key, entry)
            self._maybe_cleanup(now)
            logger.warning(
                "Login locked for %ds after %d failed attempts from %s",
                self._lockout,
                entry.attempts,
                key,
            )
            return CheckResult(blocked=True, retry_after=math.ceil(self._lockout))

        self.store.set(key, entry)
        self._maybe_cleanup(now)
        return CheckResult(blocked=False)

    def clear_failures(self, key: str) -> None:
        """Forget all failures for *key* (successful login)."""
        self.store.delete(key)


# Module-level singleton, one per process
_limiter: LoginThrottle | None = None


def get_limiter() -> LoginThrottle:
    global _limiter
    if _limiter is None:
        _limiter = LoginThrottle()
    return _limiter
