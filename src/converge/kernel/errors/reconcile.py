"""Reconciliation errors: a grant or revoke leg was rejected."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from converge.kernel.errors.base import BaseError

GRANT = "grant"
REVOKE = "revoke"


class ReconcileError(BaseError):
    """One leg of a reconciliation failed.

    ``leg`` is ``"grant"`` or ``"revoke"``. When the revoke leg fails the
    grant leg has already changed remote state; nothing is rolled back.
    """

    default_code = "reconcile_failed"

    def __init__(
        self,
        leg: str,
        members: Iterable[Any],
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.leg = leg
        self.members = frozenset(members)
        super().__init__(message or f"unable to {leg} access for {sorted(map(str, self.members))}", **kwargs)
        self.detail.setdefault("leg", leg)
        self.detail.setdefault("members", sorted(map(str, self.members)))

    @property
    def partially_applied(self) -> bool:
        """True when an earlier leg already mutated remote state."""
        return bool(self.detail.get("granted"))


__all__ = ["GRANT", "REVOKE", "ReconcileError"]
