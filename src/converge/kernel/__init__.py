"""Kernel – framework-agnostic building blocks: errors and time."""

from converge.kernel.errors import (
    ActionFailedError,
    BaseError,
    ConvergenceError,
    DeadlineExceededError,
    FatalRemoteError,
    FatalTransportError,
    ReconcileError,
    RetryableError,
    UnknownStatusError,
    WaitCancelledError,
)

__all__ = [
    "ActionFailedError",
    "BaseError",
    "ConvergenceError",
    "DeadlineExceededError",
    "FatalRemoteError",
    "FatalTransportError",
    "ReconcileError",
    "RetryableError",
    "UnknownStatusError",
    "WaitCancelledError",
]
