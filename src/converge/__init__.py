"""
converge – poll remote operations to a terminal state and reconcile access sets.

Import path convention::

    from converge.polling import CancellationToken, WaitConfig, wait_for
    from converge.actions import ActionRunner, await_completion
    from converge.access import AccessReconciler, reconcile
    from converge.kernel.errors import FatalRemoteError, ReconcileError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
