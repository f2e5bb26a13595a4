"""Access – apply a membership diff through grant and revoke collaborators.

At most two collaborator calls per reconciliation: one grant batch, then one
revoke batch. A grant failure stops before revoking. A revoke failure is
reported after the grant already landed; nothing is rolled back. Serialising
concurrent reconciliations of one target is the caller's job.
"""
from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping, Sequence
from enum import Enum
from typing import Any, Generic, TypeVar

from converge.access.diff import ReconcilePlan, diff
from converge.kernel.errors import GRANT, REVOKE, ReconcileError
from converge.observability.logging import get_logger

M = TypeVar("M", bound=Hashable)

Mutator = Callable[[frozenset[Any]], Any]

logger = get_logger(__name__)


class AccessCategory(str, Enum):
    USER = "user"
    ROLE = "role"
    SERVICE_ACCOUNT = "service-account"
    GROUP = "group"
    APPLICATION = "application"


def _sorted(members: frozenset[Any]) -> list[str]:
    return sorted(map(str, members))


def reconcile(
    previous: Iterable[M],
    desired: Iterable[M],
    grant: Mutator,
    revoke: Mutator,
    *,
    category: str | None = None,
) -> ReconcilePlan[M]:
    """Move remote membership from *previous* to *desired*; return the applied plan."""
    plan = diff(previous, desired)
    log = logger.bind(category=category) if category else logger
    if plan.is_empty:
        log.debug("reconcile.noop")
        return plan

    if plan.to_add:
        log.info("reconcile.grant", members=_sorted(plan.to_add))
        try:
            grant(plan.to_add)
        except Exception as exc:
            log.warning("reconcile.failed", leg=GRANT, error=repr(exc))
            raise ReconcileError(
                GRANT,
                plan.to_add,
                f"unable to grant access: {exc}",
                detail={"category": category} if category else None,
                cause=exc,
            ) from exc

    if plan.to_remove:
        log.info("reconcile.revoke", members=_sorted(plan.to_remove))
        try:
            revoke(plan.to_remove)
        except Exception as exc:
            log.warning("reconcile.failed", leg=REVOKE, error=repr(exc))
            detail: dict[str, Any] = {"granted": _sorted(plan.to_add)}
            if category:
                detail["category"] = category
            raise ReconcileError(
                REVOKE,
                plan.to_remove,
                f"unable to revoke access: {exc}",
                detail=detail,
                cause=exc,
            ) from exc

    return plan


class AccessReconciler(Generic[M]):
    """Reconciler bound to one category's grant/revoke collaborators."""

    def __init__(self, grant: Mutator, revoke: Mutator, category: AccessCategory | str | None = None) -> None:
        self._grant = grant
        self._revoke = revoke
        self.category = category.value if isinstance(category, AccessCategory) else category

    def plan(self, previous: Iterable[M], desired: Iterable[M]) -> ReconcilePlan[M]:
        return diff(previous, desired)

    def apply(self, previous: Iterable[M], desired: Iterable[M]) -> ReconcilePlan[M]:
        return reconcile(previous, desired, self._grant, self._revoke, category=self.category)


class CategorizedReconciler:
    """Reconcile several access categories, one after another.

    Categories run in the order given to the constructor and the first
    failing category stops the rest. A category missing from *previous* or
    *desired* counts as an empty set.
    """

    def __init__(self, reconcilers: Mapping[AccessCategory, AccessReconciler[Any]]) -> None:
        self._order: Sequence[AccessCategory] = tuple(reconcilers)
        self._reconcilers = dict(reconcilers)

    def apply(
        self,
        previous: Mapping[AccessCategory, Iterable[Any]],
        desired: Mapping[AccessCategory, Iterable[Any]],
    ) -> dict[AccessCategory, ReconcilePlan[Any]]:
        unknown = (set(previous) | set(desired)) - set(self._reconcilers)
        if unknown:
            names = sorted(str(getattr(c, "value", c)) for c in unknown)
            raise ValueError(f"no reconciler for categories: {names}")
        applied: dict[AccessCategory, ReconcilePlan[Any]] = {}
        for category in self._order:
            try:
                applied[category] = self._reconcilers[category].apply(
                    previous.get(category, ()),
                    desired.get(category, ()),
                )
            except ReconcileError as err:
                err.detail.setdefault("category", category.value)
                raise
        return applied


__all__ = ["AccessCategory", "AccessReconciler", "CategorizedReconciler", "Mutator", "reconcile"]
