"""Actions – wait for a triggered remote action to reach a terminal status.

State machine::

    enqueued -> pending -> running -> completed
                                  \\-> failed | error | cancelled | aborted

``pending`` and ``running`` keep the poll going; ``completed`` is the only
accepting state. Failure statuses and any unrecognised status end the wait
with a :class:`~converge.kernel.errors.FatalRemoteError` subclass, so API
drift shows up as :class:`UnknownStatusError` instead of a silent success or
an endless loop.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence

from converge.actions.models import FAILURE_STATUSES, ActionHandle, ActionResult, ActionStatus
from converge.kernel.errors import ActionFailedError, RetryableError, UnknownStatusError
from converge.polling import AssertOutcome, CancellationToken, PollInterval, WaitConfig, wait_for
from converge.polling.engine import RetryMarker


def assert_action_completed(result: ActionResult) -> AssertOutcome:
    if result.error is not None:
        return AssertOutcome.fatal(
            ActionFailedError(result.id, result.status, str(result.error), cause=result.error)
        )
    status = result.parsed_status
    if status is None:
        return AssertOutcome.fatal(UnknownStatusError(result.status, detail={"action_id": result.id}))
    if status in (ActionStatus.PENDING, ActionStatus.RUNNING):
        return AssertOutcome.retry(f"action {result.id} is {status.value}")
    if status is ActionStatus.COMPLETED:
        return AssertOutcome.accept()
    if status in FAILURE_STATUSES:
        return AssertOutcome.fatal(ActionFailedError(result.id, status.value, result.message or None))
    # a member added to ActionStatus without a rule lands here
    return AssertOutcome.fatal(UnknownStatusError(result.status, detail={"action_id": result.id}))


def await_completion(
    handle: ActionHandle,
    fetch: Callable[[ActionHandle], ActionResult],
    *,
    interval: PollInterval | float = 1.0,
    token: CancellationToken | None = None,
    retryable: Sequence[RetryMarker] = (RetryableError,),
    max_attempts: int | None = None,
) -> ActionResult:
    """Block until the action behind *handle* completes.

    *fetch* is called with *handle* on every poll. ``RetryableError`` raised
    by *fetch* is whitelisted by default (for "action not visible yet").
    """
    return wait_for(
        WaitConfig(
            fetch=fetch,
            input=handle,
            assertions=(assert_action_completed,),
            retryable=tuple(retryable),
            interval=interval,
            token=token or CancellationToken.never(),
            max_attempts=max_attempts,
            name=f"action:{handle.model}/{handle.id}",
        )
    )


__all__ = ["assert_action_completed", "await_completion"]
