"""Convergence errors: what a poll loop can end with."""

from __future__ import annotations

from typing import Any

from converge.kernel.errors.base import BaseError


class RetryableError(BaseError):
    """The awaited condition has not materialised yet.

    Raised or returned by assertions and fetchers to request another poll.
    It never escapes :func:`~converge.polling.engine.wait_for`.
    """

    default_code = "retryable"

    def __init__(self, reason: str = "condition not met yet", **kwargs: Any) -> None:
        super().__init__(reason, **kwargs)
        self.reason = reason


class ConvergenceError(BaseError):
    """A poll loop ended without observing the expected state."""

    default_code = "convergence_error"


class FatalRemoteError(ConvergenceError):
    """The remote operation reached a terminal state other than success."""

    default_code = "fatal_remote"


class ActionFailedError(FatalRemoteError):
    """A triggered remote action finished in a failure status."""

    default_code = "action_failed"

    def __init__(
        self,
        action_id: str,
        status: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        text = f"action {action_id!r} finished with status {status!r}"
        if message:
            text = f"{text}: {message}"
        super().__init__(text, **kwargs)
        self.action_id = action_id
        self.status = status
        self.detail.setdefault("action_id", action_id)
        self.detail.setdefault("status", status)


class UnknownStatusError(FatalRemoteError):
    """The remote reported a status string this library does not know."""

    default_code = "unknown_status"

    def __init__(self, status: str, **kwargs: Any) -> None:
        super().__init__(f"unrecognised remote status {status!r}", **kwargs)
        self.status = status
        self.detail.setdefault("status", status)


class FatalTransportError(ConvergenceError):
    """A collaborator call failed with an error not whitelisted as transient."""

    default_code = "fatal_transport"


class WaitCancelledError(ConvergenceError):
    """The caller's cancellation signal fired before convergence."""

    default_code = "cancelled"


class DeadlineExceededError(WaitCancelledError):
    """The caller's deadline passed before convergence."""

    default_code = "deadline_exceeded"


__all__ = [
    "ActionFailedError",
    "ConvergenceError",
    "DeadlineExceededError",
    "FatalRemoteError",
    "FatalTransportError",
    "RetryableError",
    "UnknownStatusError",
    "WaitCancelledError",
]
