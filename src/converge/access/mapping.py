"""Access – keyed reconciliation for annotation-style string maps.

The remote deletes a key when it is set to the empty string, so a single
``apply`` call carries both the new values and the removals.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from typing import Any

from converge.observability.logging import get_logger

UNSET = ""

logger = get_logger(__name__)


@dataclasses.dataclass(frozen=True)
class MappingPlan:
    to_set: Mapping[str, str] = dataclasses.field(default_factory=dict)
    to_unset: frozenset[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.to_set and not self.to_unset

    def changes(self) -> dict[str, str]:
        """Single payload: new or changed values plus ``UNSET`` for removed keys."""
        payload = dict(self.to_set)
        payload.update({key: UNSET for key in self.to_unset})
        return payload


def diff_mapping(previous: Mapping[str, str] | None, desired: Mapping[str, str] | None) -> MappingPlan:
    before = dict(previous or {})
    after = dict(desired or {})
    to_set = {key: value for key, value in after.items() if before.get(key) != value}
    to_unset = frozenset(key for key in before if key not in after)
    return MappingPlan(to_set=to_set, to_unset=to_unset)


def reconcile_mapping(
    previous: Mapping[str, str] | None,
    desired: Mapping[str, str] | None,
    apply: Callable[[dict[str, str]], Any],
) -> MappingPlan:
    plan = diff_mapping(previous, desired)
    if plan.is_empty:
        logger.debug("reconcile.mapping.noop")
        return plan
    logger.info("reconcile.mapping", set=sorted(plan.to_set), unset=sorted(plan.to_unset))
    apply(plan.changes())
    return plan


__all__ = ["UNSET", "MappingPlan", "diff_mapping", "reconcile_mapping"]
