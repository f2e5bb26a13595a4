"""Actions – value types for triggered remote operations."""
from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any


class ActionStatus(str, Enum):
    """Statuses a remote action moves through."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    ERROR = "error"
    CANCELLED = "cancelled"
    ABORTED = "aborted"

    @classmethod
    def parse(cls, raw: str | None) -> "ActionStatus | None":
        """Map a wire status string to a member; ``None`` when unrecognised."""
        if raw is None:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None

    @property
    def settled(self) -> bool:
        return self not in (ActionStatus.PENDING, ActionStatus.RUNNING)


FAILURE_STATUSES = frozenset(
    {ActionStatus.FAILED, ActionStatus.ERROR, ActionStatus.CANCELLED, ActionStatus.ABORTED}
)


@dataclasses.dataclass(frozen=True)
class Action:
    """An operation to enqueue on a unit."""

    receiver: str
    name: str
    parameters: dict[str, Any] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class ActionHandle:
    """Lookup key for an enqueued action. Carries no mutable state."""

    id: str
    model: str

    def resource_id(self, action_name: str) -> str:
        return f"{self.model}/{action_name}/{self.id}"


@dataclasses.dataclass(frozen=True)
class ActionResult:
    """One observation of a remote action.

    ``status`` is kept as the raw wire string so unknown values survive
    until the convergence assertion reports them.
    """

    id: str
    status: str
    output: dict[str, Any] = dataclasses.field(default_factory=dict)
    message: str = ""
    error: BaseException | None = None

    @property
    def parsed_status(self) -> ActionStatus | None:
        return ActionStatus.parse(self.status)

    def output_strings(self) -> dict[str, str]:
        """Flatten the output map to strings, as the resource layer stores it."""
        return {key: str(value) for key, value in self.output.items()}


__all__ = ["FAILURE_STATUSES", "Action", "ActionHandle", "ActionResult", "ActionStatus"]
