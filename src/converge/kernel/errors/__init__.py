"""Kernel error hierarchy: public re-export surface.

Hierarchy::

    BaseError
    ├── RetryableError             (convergence.py)
    ├── ConvergenceError           (convergence.py)
    │   ├── FatalRemoteError
    │   │   ├── ActionFailedError
    │   │   └── UnknownStatusError
    │   ├── FatalTransportError
    │   └── WaitCancelledError
    │       └── DeadlineExceededError
    └── ReconcileError             (reconcile.py)
"""

from converge.kernel.errors.base import BaseError
from converge.kernel.errors.convergence import (
    ActionFailedError,
    ConvergenceError,
    DeadlineExceededError,
    FatalRemoteError,
    FatalTransportError,
    RetryableError,
    UnknownStatusError,
    WaitCancelledError,
)
from converge.kernel.errors.reconcile import GRANT, REVOKE, ReconcileError

__all__ = [
    "GRANT",
    "REVOKE",
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
