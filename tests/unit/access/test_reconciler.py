"""Unit tests for membership diffing and access reconciliation."""

from __future__ import annotations

import itertools
from typing import Any

import pytest

from converge.access import (
    AccessCategory,
    AccessReconciler,
    CategorizedReconciler,
    ReconcilePlan,
    diff,
    reconcile,
)
from converge.kernel.errors import GRANT, REVOKE, ReconcileError


class Recorder:
    """Grant/revoke collaborator that records batches and can be told to fail."""

    def __init__(self, fail: Exception | None = None) -> None:
        self.calls: list[frozenset[Any]] = []
        self.fail = fail

    def __call__(self, members: frozenset[Any]) -> None:
        self.calls.append(members)
        if self.fail is not None:
            raise self.fail


SAMPLES = [
    set(),
    {"alice"},
    {"alice", "bob"},
    {"bob", "carol"},
    {"alice", "bob", "carol", "dave"},
]


# ---------------------------------------------------------------------------
# diff
# ---------------------------------------------------------------------------


class TestDiff:
    def test_scenario_swap_one_member(self) -> None:
        plan = diff({"alice", "bob"}, {"bob", "carol"})
        assert plan.to_add == {"carol"}
        assert plan.to_remove == {"alice"}

    def test_equal_sets_give_empty_plan(self) -> None:
        assert diff(["b", "a"], ["a", "b", "a"]).is_empty

    def test_order_and_duplicates_ignored(self) -> None:
        assert diff(["a", "a", "b"], ("b", "c")) == diff({"b", "a"}, ["c", "b", "c"])

    def test_no_normalisation(self) -> None:
        plan = diff({"Alice"}, {"alice"})
        assert plan.to_add == {"alice"}
        assert plan.to_remove == {"Alice"}

    @pytest.mark.parametrize("previous,desired", list(itertools.product(SAMPLES, repeat=2)))
    def test_difference_properties(self, previous: set[str], desired: set[str]) -> None:
        plan = diff(previous, desired)
        assert plan.to_add.isdisjoint(plan.to_remove)
        assert plan.to_add == desired - previous
        assert plan.to_remove == previous - desired
        assert (set(previous) | plan.to_add) - plan.to_remove == desired
        assert plan.is_empty == (previous == desired)

    def test_plan_default_is_empty(self) -> None:
        assert ReconcilePlan().is_empty


# ---------------------------------------------------------------------------
# reconcile
# ---------------------------------------------------------------------------


class TestReconcile:
    def test_scenario_grant_then_revoke_single_batches(self) -> None:
        order: list[str] = []
        grant, revoke = Recorder(), Recorder()

        def tracked_grant(members: frozenset[str]) -> None:
            order.append(GRANT)
            grant(members)

        def tracked_revoke(members: frozenset[str]) -> None:
            order.append(REVOKE)
            revoke(members)

        plan = reconcile({"alice", "bob"}, {"bob", "carol"}, tracked_grant, tracked_revoke)
        assert grant.calls == [frozenset({"carol"})]
        assert revoke.calls == [frozenset({"alice"})]
        assert order == [GRANT, REVOKE]
        assert plan.to_add == {"carol"}

    def test_batches_every_member_in_one_call(self) -> None:
        grant, revoke = Recorder(), Recorder()
        reconcile(set(), {"a", "b", "c"}, grant, revoke)
        assert grant.calls == [frozenset({"a", "b", "c"})]
        assert revoke.calls == []

    @pytest.mark.parametrize("previous,desired", list(itertools.product(SAMPLES, repeat=2)))
    def test_noop_iff_sets_equal(self, previous: set[str], desired: set[str]) -> None:
        grant, revoke = Recorder(), Recorder()
        reconcile(previous, desired, grant, revoke)
        calls = len(grant.calls) + len(revoke.calls)
        assert (calls == 0) == (previous == desired)
        assert len(grant.calls) <= 1 and len(revoke.calls) <= 1

    def test_reapplying_desired_is_noop(self) -> None:
        grant, revoke = Recorder(), Recorder()
        reconcile({"alice"}, {"bob"}, grant, revoke)
        grant.calls.clear()
        revoke.calls.clear()
        reconcile({"bob"}, {"bob"}, grant, revoke)
        assert grant.calls == [] and revoke.calls == []

    def test_grant_failure_skips_revoke(self) -> None:
        grant = Recorder(fail=RuntimeError("quota exceeded"))
        revoke = Recorder()
        with pytest.raises(ReconcileError) as exc_info:
            reconcile({"alice", "bob"}, {"bob", "carol"}, grant, revoke)
        err = exc_info.value
        assert err.leg == GRANT
        assert err.members == {"carol"}
        assert isinstance(err.cause, RuntimeError)
        assert revoke.calls == []
        assert not err.partially_applied

    def test_revoke_failure_reports_revoke_leg_after_grant(self) -> None:
        grant = Recorder()
        revoke = Recorder(fail=PermissionError("cannot remove last key"))
        with pytest.raises(ReconcileError) as exc_info:
            reconcile({"alice", "bob"}, {"bob", "carol"}, grant, revoke)
        err = exc_info.value
        assert err.leg == REVOKE
        assert err.members == {"alice"}
        assert grant.calls == [frozenset({"carol"})]
        assert err.partially_applied
        assert err.detail["granted"] == ["carol"]

    def test_revoke_only_failure_not_partial(self) -> None:
        with pytest.raises(ReconcileError) as exc_info:
            reconcile({"a"}, set(), Recorder(), Recorder(fail=RuntimeError("x")))
        assert not exc_info.value.partially_applied

    def test_error_serialises(self) -> None:
        with pytest.raises(ReconcileError) as exc_info:
            reconcile(set(), {"x"}, Recorder(fail=RuntimeError("no")), Recorder(), category="user")
        payload = exc_info.value.to_dict()
        assert payload["code"] == "reconcile_failed"
        assert payload["detail"]["leg"] == "grant"
        assert payload["detail"]["category"] == "user"


# ---------------------------------------------------------------------------
# AccessReconciler / CategorizedReconciler
# ---------------------------------------------------------------------------


class TestAccessReconciler:
    def test_plan_has_no_side_effects(self) -> None:
        grant, revoke = Recorder(), Recorder()
        reconciler: AccessReconciler[str] = AccessReconciler(grant, revoke, AccessCategory.ROLE)
        plan = reconciler.plan({"a"}, {"b"})
        assert plan.to_add == {"b"}
        assert grant.calls == [] and revoke.calls == []
        assert reconciler.category == "role"

    def test_apply(self) -> None:
        grant, revoke = Recorder(), Recorder()
        AccessReconciler(grant, revoke).apply({"a"}, {"b"})
        assert grant.calls == [frozenset({"b"})]
        assert revoke.calls == [frozenset({"a"})]


class TestCategorizedReconciler:
    def _build(self, **fail: Exception) -> tuple[CategorizedReconciler, dict[str, Recorder]]:
        recorders = {
            name: Recorder(fail=fail.get(name))
            for name in ("user_grant", "user_revoke", "role_grant", "role_revoke")
        }
        reconciler = CategorizedReconciler({
            AccessCategory.USER: AccessReconciler(recorders["user_grant"], recorders["user_revoke"]),
            AccessCategory.ROLE: AccessReconciler(recorders["role_grant"], recorders["role_revoke"]),
        })
        return reconciler, recorders

    def test_missing_categories_are_empty(self) -> None:
        reconciler, rec = self._build()
        plans = reconciler.apply({}, {AccessCategory.ROLE: {"admin"}})
        assert plans[AccessCategory.USER].is_empty
        assert rec["role_grant"].calls == [frozenset({"admin"})]
        assert rec["user_grant"].calls == []

    def test_first_failure_stops_later_categories(self) -> None:
        reconciler, rec = self._build(user_grant=RuntimeError("bad user"))
        with pytest.raises(ReconcileError) as exc_info:
            reconciler.apply({}, {AccessCategory.USER: {"u"}, AccessCategory.ROLE: {"r"}})
        assert exc_info.value.detail["category"] == "user"
        assert rec["role_grant"].calls == []

    def test_unknown_category_rejected(self) -> None:
        reconciler, _ = self._build()
        with pytest.raises(ValueError):
            reconciler.apply({}, {AccessCategory.GROUP: {"g"}})

    def test_unknown_plain_string_category_rejected(self) -> None:
        reconciler, _ = self._build()
        with pytest.raises(ValueError, match="team"):
            reconciler.apply({"team": {"t"}}, {})
