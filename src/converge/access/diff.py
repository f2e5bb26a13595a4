"""Access – membership set difference."""
from __future__ import annotations

import dataclasses
from collections.abc import Hashable, Iterable
from typing import Generic, TypeVar

M = TypeVar("M", bound=Hashable)


@dataclasses.dataclass(frozen=True)
class ReconcilePlan(Generic[M]):
    """Grants and revocations needed to move *previous* to *desired*.

    ``to_add`` and ``to_remove`` are always disjoint.
    """

    to_add: frozenset[M] = frozenset()
    to_remove: frozenset[M] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


def diff(previous: Iterable[M], desired: Iterable[M]) -> ReconcilePlan[M]:
    """``to_add = desired - previous``, ``to_remove = previous - desired``.

    Members are compared by exact equality; callers normalise them first.
    """
    before = frozenset(previous)
    after = frozenset(desired)
    return ReconcilePlan(to_add=after - before, to_remove=before - after)


__all__ = ["ReconcilePlan", "diff"]
