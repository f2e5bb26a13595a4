"""Actions – trigger remote operations and wait for them to settle."""
from converge.actions.convergence import assert_action_completed, await_completion
from converge.actions.models import Action, ActionHandle, ActionResult, ActionStatus
from converge.actions.runner import ActionRunner, ActionsClient

__all__ = [
    "Action",
    "ActionHandle",
    "ActionResult",
    "ActionRunner",
    "ActionStatus",
    "ActionsClient",
    "assert_action_completed",
    "await_completion",
]
