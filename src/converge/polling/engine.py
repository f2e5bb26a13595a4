"""Polling – WaitConfig and the poll-until-condition loop.

Turns a one-shot, possibly stale read into a convergence loop::

    value = wait_for(WaitConfig(
        fetch=client.action_result,
        input=handle,
        assertions=(assert_action_completed,),
        retryable=(ActionNotVisibleError,),
        interval=2.0,
        token=CancellationToken.with_timeout(300),
    ))

Each iteration checks the token, fetches, then runs the assertions in order.
A retry verdict sleeps on the token and loops; a fatal verdict or a
non-whitelisted fetch error ends the wait at once.
"""
from __future__ import annotations

import dataclasses
import inspect
from collections.abc import Callable, Sequence
from typing import Any, Generic, TypeVar

from converge.kernel.errors import (
    ConvergenceError,
    FatalRemoteError,
    FatalTransportError,
)
from converge.observability.logging import get_logger
from converge.polling.cancellation import CancellationToken
from converge.polling.classifier import AssertOutcome, ErrorClassifier, Outcome, classify_assertion
from converge.polling.interval import FixedInterval, PollInterval, as_interval

K = TypeVar("K")
T = TypeVar("T")

Assertion = Callable[[Any], Any]
RetryMarker = type[BaseException] | BaseException

logger = get_logger(__name__)


@dataclasses.dataclass(frozen=True)
class WaitConfig(Generic[K, T]):
    """Everything one wait needs; built fresh for every call."""

    fetch: Callable[[K], T]
    input: K
    assertions: Sequence[Assertion] = ()
    retryable: Sequence[RetryMarker] = ()
    interval: PollInterval | float = dataclasses.field(default_factory=FixedInterval)
    token: CancellationToken = dataclasses.field(default_factory=CancellationToken.never)
    max_attempts: int | None = None
    name: str = "wait"

    def __post_init__(self) -> None:
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")


def _run_assertions(assertions: Sequence[Assertion], value: Any) -> AssertOutcome:
    for assertion in assertions:
        try:
            verdict = classify_assertion(assertion(value))
        except Exception as exc:  # noqa: BLE001 - raised verdicts are classified too
            verdict = classify_assertion(exc)
        if not verdict.accepted:
            return verdict
    return AssertOutcome.accept()


async def _run_assertions_async(assertions: Sequence[Assertion], value: Any) -> AssertOutcome:
    for assertion in assertions:
        try:
            result = assertion(value)
            if inspect.isawaitable(result):
                result = await result
            verdict = classify_assertion(result)
        except Exception as exc:  # noqa: BLE001
            verdict = classify_assertion(exc)
        if not verdict.accepted:
            return verdict
    return AssertOutcome.accept()


class _Episode:
    """Loop bookkeeping shared by the sync and async drivers."""

    def __init__(self, cfg: WaitConfig[Any, Any]) -> None:
        self.cfg = cfg
        self.classifier = ErrorClassifier(cfg.retryable)
        self.interval = as_interval(cfg.interval)
        self.attempt = 0
        self.retry_kind = "remote"
        self.log = logger.bind(wait=cfg.name)

    def begin(self) -> None:
        token = self.cfg.token
        if token.is_cancelled:
            self.log.warning("poll.cancelled", attempt=self.attempt, reason=token.reason)
            token.raise_if_cancelled()
        self.attempt += 1

    def fetch_failed(self, exc: Exception) -> AssertOutcome:
        verdict = self.classifier.classify(exc)
        self.retry_kind = "transport"
        if not verdict.retryable:
            self.log.warning("poll.fatal", attempt=self.attempt, kind="transport", error=repr(exc))
            raise FatalTransportError(
                f"{self.cfg.name}: fetch failed: {exc}",
                detail={"attempt": self.attempt},
                cause=exc,
            ) from exc
        return verdict

    def settle(self, verdict: AssertOutcome) -> None:
        """Raise for a fatal verdict or an exhausted attempt budget."""
        if verdict.outcome is Outcome.FATAL:
            cause = verdict.cause
            self.log.warning("poll.fatal", attempt=self.attempt, kind="remote", error=repr(cause))
            if isinstance(cause, ConvergenceError):
                raise cause
            raise FatalRemoteError(
                f"{self.cfg.name}: {verdict.reason}",
                detail={"attempt": self.attempt},
                cause=cause,
            ) from cause
        limit = self.cfg.max_attempts
        if limit is not None and self.attempt >= limit:
            self.log.warning(
                "poll.exhausted", attempt=self.attempt, kind=self.retry_kind, reason=verdict.reason
            )
            raise FatalRemoteError(
                f"{self.cfg.name}: still not settled after {self.attempt} attempts: {verdict.reason}",
                detail={"attempt": self.attempt, "reason": verdict.reason, "retry_kind": self.retry_kind},
            )

    def next_delay(self, verdict: AssertOutcome) -> float:
        delay = self.interval.delay(self.attempt)
        self.log.debug("poll.retry", attempt=self.attempt, reason=verdict.reason, delay=delay)
        return delay

    def accepted(self) -> None:
        self.log.debug("poll.accepted", attempt=self.attempt)


def wait_for(cfg: WaitConfig[K, T]) -> T:
    """Poll ``cfg.fetch(cfg.input)`` until every assertion accepts the value.

    Raises :class:`FatalTransportError` when the fetch fails with an error not
    listed in ``cfg.retryable``, :class:`FatalRemoteError` (or the
    :class:`ConvergenceError` an assertion produced) when an assertion
    reports a terminal failure, and :class:`WaitCancelledError` /
    :class:`DeadlineExceededError` when ``cfg.token`` fires first.
    """
    episode = _Episode(cfg)
    while True:
        episode.begin()
        try:
            value = cfg.fetch(cfg.input)
        except Exception as exc:  # noqa: BLE001 - classified below
            verdict = episode.fetch_failed(exc)
        else:
            verdict = _run_assertions(cfg.assertions, value)
            episode.retry_kind = "remote"
            if verdict.accepted:
                episode.accepted()
                return value
        episode.settle(verdict)
        cfg.token.wait(episode.next_delay(verdict))


async def wait_for_async(cfg: WaitConfig[K, Any]) -> Any:
    """Asyncio flavour of :func:`wait_for`.

    ``cfg.fetch`` and the assertions may be coroutine functions. The sleep
    between fetches ends early on the token's deadline or an explicit
    :meth:`CancellationToken.cancel`.
    """
    episode = _Episode(cfg)
    while True:
        episode.begin()
        try:
            value = cfg.fetch(cfg.input)
            if inspect.isawaitable(value):
                value = await value
        except Exception as exc:  # noqa: BLE001
            verdict = episode.fetch_failed(exc)
        else:
            verdict = await _run_assertions_async(cfg.assertions, value)
            episode.retry_kind = "remote"
            if verdict.accepted:
                episode.accepted()
                return value
        episode.settle(verdict)
        await cfg.token.wait_async(episode.next_delay(verdict))


class PollEngine:
    """Holds polling defaults and builds a fresh :class:`WaitConfig` per call."""

    def __init__(
        self,
        interval: PollInterval | float = 1.0,
        retryable: Sequence[RetryMarker] = (),
        max_attempts: int | None = None,
    ) -> None:
        self.interval = as_interval(interval)
        self.retryable = tuple(retryable)
        self.max_attempts = max_attempts

    def config(
        self,
        fetch: Callable[[K], T],
        input: K,  # noqa: A002
        *assertions: Assertion,
        token: CancellationToken | None = None,
        retryable: Sequence[RetryMarker] = (),
        name: str = "wait",
    ) -> WaitConfig[K, T]:
        return WaitConfig(
            fetch=fetch,
            input=input,
            assertions=assertions,
            retryable=self.retryable + tuple(retryable),
            interval=self.interval,
            token=token or CancellationToken.never(),
            max_attempts=self.max_attempts,
            name=name,
        )

    def wait(
        self,
        fetch: Callable[[K], T],
        input: K,  # noqa: A002
        *assertions: Assertion,
        token: CancellationToken | None = None,
        retryable: Sequence[RetryMarker] = (),
        name: str = "wait",
    ) -> T:
        return wait_for(self.config(fetch, input, *assertions, token=token, retryable=retryable, name=name))

    async def wait_async(
        self,
        fetch: Callable[[K], Any],
        input: K,  # noqa: A002
        *assertions: Assertion,
        token: CancellationToken | None = None,
        retryable: Sequence[RetryMarker] = (),
        name: str = "wait",
    ) -> Any:
        cfg = self.config(fetch, input, *assertions, token=token, retryable=retryable, name=name)
        return await wait_for_async(cfg)


__all__ = ["Assertion", "PollEngine", "WaitConfig", "wait_for", "wait_for_async"]
