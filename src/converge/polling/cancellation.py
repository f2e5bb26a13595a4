"""Polling – explicit cancellation signal with an optional deadline.

A :class:`CancellationToken` is handed to every wait. The poll loop reads it
before each fetch and sleeps on it between fetches, so a cancellation or an
expired deadline is observed within one poll interval.
"""
from __future__ import annotations

import asyncio
import dataclasses
import threading
from datetime import datetime, timedelta

from converge.kernel.errors import DeadlineExceededError, WaitCancelledError
from converge.kernel.time import Clock, SystemClock


@dataclasses.dataclass(frozen=True)
class Deadline:
    """An absolute deadline derived from a timeout."""
    expires_at: datetime
    clock: Clock = dataclasses.field(default_factory=SystemClock, compare=False, repr=False)

    @classmethod
    def after(cls, seconds: float, clock: Clock | None = None) -> "Deadline":
        clock = clock or SystemClock()
        return cls(expires_at=clock.now() + timedelta(seconds=seconds), clock=clock)

    @property
    def remaining_seconds(self) -> float:
        return max(0.0, (self.expires_at - self.clock.now()).total_seconds())

    @property
    def is_expired(self) -> bool:
        return self.clock.now() >= self.expires_at


class CancellationToken:
    """Cooperative cancellation: an external abort plus an optional deadline.

    Thread-safe; :meth:`cancel` may be called from any thread while another
    thread is blocked in :meth:`wait`.
    """

    def __init__(self, deadline: Deadline | None = None) -> None:
        self._deadline = deadline
        self._event = threading.Event()
        self._reason: str | None = None

    @classmethod
    def with_timeout(cls, seconds: float, clock: Clock | None = None) -> "CancellationToken":
        return cls(Deadline.after(seconds, clock=clock))

    @classmethod
    def never(cls) -> "CancellationToken":
        return cls()

    @property
    def deadline(self) -> Deadline | None:
        return self._deadline

    def cancel(self, reason: str = "cancelled by caller") -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    @property
    def is_cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and self._deadline.is_expired

    @property
    def reason(self) -> str | None:
        if self._event.is_set():
            return self._reason
        if self._deadline is not None and self._deadline.is_expired:
            return "deadline exceeded"
        return None

    @property
    def remaining_seconds(self) -> float | None:
        """Seconds until the deadline, ``None`` when there is no deadline."""
        if self._deadline is None:
            return None
        return self._deadline.remaining_seconds

    def bound(self, timeout: float) -> float:
        """Clamp *timeout* so a wait never outlives the deadline."""
        remaining = self.remaining_seconds
        if remaining is None:
            return max(timeout, 0.0)
        return max(min(timeout, remaining), 0.0)

    def wait(self, timeout: float) -> bool:
        """Block up to *timeout* seconds; return ``True`` if cancelled meanwhile."""
        self._event.wait(self.bound(timeout))
        return self.is_cancelled

    async def wait_async(self, timeout: float, *, slice_seconds: float = 0.05) -> bool:
        """Awaitable :meth:`wait`; sleeps in short slices so :meth:`cancel` cuts it short."""
        loop = asyncio.get_running_loop()
        until = loop.time() + self.bound(timeout)
        while not self._event.is_set():
            left = until - loop.time()
            if left <= 0:
                break
            await asyncio.sleep(min(slice_seconds, left))
        return self.is_cancelled

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise WaitCancelledError(self._reason or "cancelled")
        if self._deadline is not None and self._deadline.is_expired:
            raise DeadlineExceededError(
                "deadline exceeded",
                detail={"expires_at": self._deadline.expires_at.isoformat()},
            )


__all__ = ["CancellationToken", "Deadline"]
