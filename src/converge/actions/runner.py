"""Actions – enqueue an action once, then block until it settles."""
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from converge.actions.convergence import await_completion
from converge.actions.models import Action, ActionHandle, ActionResult
from converge.kernel.errors import FatalTransportError, RetryableError
from converge.observability.logging import get_logger
from converge.polling import CancellationToken

if TYPE_CHECKING:
    from converge.config import ConvergeSettings

logger = get_logger(__name__)


class ActionsClient(Protocol):
    """Port implemented by the control-plane API client."""

    def enqueue(self, model: str, action: Action) -> str:
        """Enqueue *action* in *model* and return the remote action id."""
        ...

    def result(self, handle: ActionHandle) -> ActionResult:
        """Read the current state of one action.

        Raise :class:`RetryableError` while the action is not visible yet.
        """
        ...


class ActionRunner:
    """Trigger a remote action and wait for its terminal status."""

    def __init__(self, client: ActionsClient, settings: "ConvergeSettings | None" = None) -> None:
        if settings is None:
            from converge.config import ConvergeSettings

            settings = ConvergeSettings()
        self._client = client
        self._settings = settings

    def enqueue(self, model: str, action: Action) -> ActionHandle:
        try:
            action_id = self._client.enqueue(model, action)
        except Exception as exc:
            logger.warning("action.enqueue_failed", model=model, action=action.name, error=repr(exc))
            raise FatalTransportError(
                f"could not enqueue action {action.name!r}: {exc}",
                detail={"model": model, "action": action.name, "receiver": action.receiver},
                cause=exc,
            ) from exc
        if not action_id:
            raise FatalTransportError(
                f"enqueue of action {action.name!r} returned no id",
                detail={"model": model, "action": action.name},
            )
        logger.info("action.enqueued", model=model, action=action.name, action_id=action_id)
        return ActionHandle(id=action_id, model=model)

    def run(self, model: str, action: Action, token: CancellationToken | None = None) -> ActionResult:
        handle = self.enqueue(model, action)
        settings = self._settings
        result = await_completion(
            handle,
            self._client.result,
            interval=settings.interval(),
            token=token or settings.token(),
            retryable=(RetryableError,),
            max_attempts=settings.max_attempts or None,
        )
        logger.info("action.completed", model=model, action=action.name, action_id=handle.id)
        return result


__all__ = ["ActionRunner", "ActionsClient"]
