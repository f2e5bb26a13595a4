"""Polling – per-iteration classification of fetch errors and assertion results."""
from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from enum import Enum
from typing import Any

from converge.kernel.errors import RetryableError


class Outcome(str, Enum):
    ACCEPT = "accept"
    RETRY = "retry"
    FATAL = "fatal"


@dataclasses.dataclass(frozen=True)
class AssertOutcome:
    """Verdict of one assertion against one fetched value.

    ``reason`` explains a retry; ``cause`` is the exception behind a fatal
    verdict.
    """

    outcome: Outcome
    reason: str | None = None
    cause: BaseException | None = None

    @classmethod
    def accept(cls) -> "AssertOutcome":
        return _ACCEPTED

    @classmethod
    def retry(cls, reason: str) -> "AssertOutcome":
        return cls(Outcome.RETRY, reason=reason)

    @classmethod
    def fatal(cls, cause: BaseException | str) -> "AssertOutcome":
        if isinstance(cause, str):
            cause = RuntimeError(cause)
        return cls(Outcome.FATAL, reason=str(cause), cause=cause)

    @property
    def accepted(self) -> bool:
        return self.outcome is Outcome.ACCEPT

    @property
    def retryable(self) -> bool:
        return self.outcome is Outcome.RETRY


_ACCEPTED = AssertOutcome(Outcome.ACCEPT)


def classify_assertion(result: Any) -> AssertOutcome:
    """Normalise whatever an assertion produced into an :class:`AssertOutcome`.

    ``None`` accepts, a :class:`RetryableError` retries and any other
    exception is fatal. Assertions may either return or raise these.
    """
    if result is None:
        return _ACCEPTED
    if isinstance(result, AssertOutcome):
        return result
    if isinstance(result, RetryableError):
        return AssertOutcome.retry(result.reason)
    if isinstance(result, BaseException):
        return AssertOutcome.fatal(result)
    raise TypeError(f"assertion returned unsupported value {result!r}")


class ErrorClassifier:
    """Decide whether a fetch failure is transient.

    *retryable* holds markers: exception classes (matched with
    ``isinstance``) or exception instances (matched by identity, for
    sentinel errors shared with the collaborator). Anything not listed is
    fatal, so an empty classifier treats every fetch error as fatal.
    """

    def __init__(self, retryable: Iterable[type[BaseException] | BaseException] = ()) -> None:
        types: list[type[BaseException]] = []
        sentinels: list[BaseException] = []
        for marker in retryable:
            if isinstance(marker, type) and issubclass(marker, BaseException):
                types.append(marker)
            elif isinstance(marker, BaseException):
                sentinels.append(marker)
            else:
                raise TypeError(f"retryable marker must be an exception type or instance, got {marker!r}")
        self._types = tuple(types)
        self._sentinels = tuple(sentinels)

    def is_retryable(self, exc: BaseException) -> bool:
        if self._types and isinstance(exc, self._types):
            return True
        return any(exc is sentinel for sentinel in self._sentinels)

    def classify(self, exc: BaseException) -> AssertOutcome:
        if self.is_retryable(exc):
            reason = exc.reason if isinstance(exc, RetryableError) else str(exc) or type(exc).__name__
            return AssertOutcome.retry(reason)
        return AssertOutcome.fatal(exc)


__all__ = ["AssertOutcome", "ErrorClassifier", "Outcome", "classify_assertion"]
