"""Access – minimal grant/revoke deltas between membership sets."""
from converge.access.diff import ReconcilePlan, diff
from converge.access.mapping import MappingPlan, diff_mapping, reconcile_mapping
from converge.access.reconciler import (
    AccessCategory,
    AccessReconciler,
    CategorizedReconciler,
    reconcile,
)

__all__ = [
    "AccessCategory",
    "AccessReconciler",
    "CategorizedReconciler",
    "MappingPlan",
    "ReconcilePlan",
    "diff",
    "diff_mapping",
    "reconcile",
    "reconcile_mapping",
]
