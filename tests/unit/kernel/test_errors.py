"""Unit tests for the kernel error hierarchy."""

from __future__ import annotations

import json

import pytest

from converge.config import ConfigError, InvalidSettingValueError, MissingRequiredSettingError
from converge.kernel.errors import (
    ActionFailedError,
    BaseError,
    ConvergenceError,
    DeadlineExceededError,
    FatalRemoteError,
    FatalTransportError,
    ReconcileError,
    RetryableError,
    UnknownStatusError,
    WaitCancelledError,
)


class TestBaseError:
    def test_message_and_default_code(self) -> None:
        err = BaseError("something went wrong")
        assert err.message == "something went wrong"
        assert err.code == "base_error"

    def test_custom_code(self) -> None:
        assert BaseError("m", code="custom").code == "custom"

    def test_to_dict_basic(self) -> None:
        err = BaseError("m", code="my_code", detail={"key": "val"})
        assert err.to_dict() == {"code": "my_code", "message": "m", "detail": {"key": "val"}}

    def test_cause_is_chained(self) -> None:
        cause = ValueError("original")
        err = BaseError("wrapper", cause=cause)
        assert err.__cause__ is cause
        assert "original" in err.to_dict()["cause"]

    def test_str_is_json(self) -> None:
        payload = json.loads(str(BaseError("m", detail={"n": 1})))
        assert payload["detail"] == {"n": 1}

    def test_repr(self) -> None:
        assert repr(BaseError("m")) == "BaseError(code='base_error', message='m')"


class TestTaxonomy:
    @pytest.mark.parametrize(
        "cls,parent",
        [
            (FatalRemoteError, ConvergenceError),
            (ActionFailedError, FatalRemoteError),
            (UnknownStatusError, FatalRemoteError),
            (FatalTransportError, ConvergenceError),
            (WaitCancelledError, ConvergenceError),
            (DeadlineExceededError, WaitCancelledError),
            (ConfigError, BaseError),
            (MissingRequiredSettingError, ConfigError),
            (InvalidSettingValueError, ConfigError),
        ],
    )
    def test_parentage(self, cls: type, parent: type) -> None:
        assert issubclass(cls, parent)

    def test_retryable_is_not_a_convergence_error(self) -> None:
        assert not issubclass(RetryableError, ConvergenceError)
        assert not issubclass(ReconcileError, ConvergenceError)

    def test_codes_are_distinct(self) -> None:
        classes = [
            RetryableError, ConvergenceError, FatalRemoteError, ActionFailedError,
            UnknownStatusError, FatalTransportError, WaitCancelledError,
            DeadlineExceededError, ReconcileError,
        ]
        codes = [cls.default_code for cls in classes]
        assert len(set(codes)) == len(codes)


class TestSpecificErrors:
    def test_retryable_reason(self) -> None:
        err = RetryableError("still pending")
        assert err.reason == "still pending"
        assert RetryableError().reason == "condition not met yet"

    def test_action_failed_detail(self) -> None:
        err = ActionFailedError("7", "failed", "exit code 1")
        assert err.detail == {"action_id": "7", "status": "failed"}
        assert err.message == "action '7' finished with status 'failed': exit code 1"

    def test_unknown_status(self) -> None:
        err = UnknownStatusError("paused", detail={"action_id": "9"})
        assert err.status == "paused"
        assert err.detail == {"action_id": "9", "status": "paused"}

    def test_reconcile_error_members_sorted_in_detail(self) -> None:
        err = ReconcileError("grant", {"b", "a"})
        assert err.leg == "grant"
        assert err.detail["members"] == ["a", "b"]
        assert "grant" in err.message
