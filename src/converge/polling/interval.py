"""Polling – cadence between fetches."""
from __future__ import annotations

import abc


class PollInterval(abc.ABC):
    """Compute the wait (seconds) after the *attempt*-th unsettled fetch."""

    @abc.abstractmethod
    def delay(self, attempt: int) -> float: ...


class FixedInterval(PollInterval):
    """Same wait between every fetch."""

    def __init__(self, seconds: float = 1.0) -> None:
        if seconds < 0:
            raise ValueError(f"poll interval must be >= 0, got {seconds}")
        self.seconds = seconds

    def delay(self, attempt: int) -> float:  # noqa: ARG002
        return self.seconds

    def __repr__(self) -> str:
        return f"FixedInterval({self.seconds})"


class ExponentialInterval(PollInterval):
    """Wait grows as ``base * 2^(attempt - 1)``, capped at *max_seconds*."""

    def __init__(self, base: float = 0.5, max_seconds: float = 30.0) -> None:
        if base < 0 or max_seconds < 0:
            raise ValueError("poll interval bounds must be >= 0")
        self.base = base
        self.max_seconds = max_seconds

    def delay(self, attempt: int) -> float:
        return min(self.base * (2 ** max(attempt - 1, 0)), self.max_seconds)


def as_interval(value: PollInterval | float | int) -> PollInterval:
    """Wrap a bare number of seconds in a :class:`FixedInterval`."""
    if isinstance(value, PollInterval):
        return value
    return FixedInterval(float(value))


__all__ = ["ExponentialInterval", "FixedInterval", "PollInterval", "as_interval"]
