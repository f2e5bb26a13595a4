"""Config settings – ConvergeSettings."""
from __future__ import annotations

import dataclasses
import logging
from typing import ClassVar

from converge.config.settings.base import Settings
from converge.config.validation import InvalidSettingValueError
from converge.observability.logging import JsonLoggerFactory
from converge.polling import CancellationToken, ExponentialInterval, FixedInterval, PollEngine, PollInterval


@dataclasses.dataclass
class ConvergeSettings(Settings):
    """Polling and logging defaults, read from ``CONVERGE_*`` variables.

    ``timeout`` and ``max_attempts`` of ``0`` mean "no limit". A
    ``max_poll_interval`` above ``poll_interval`` switches to exponential
    growth between polls.
    """

    _prefix: ClassVar[str] = "CONVERGE"

    poll_interval: float = 1.0
    max_poll_interval: float = 0.0
    timeout: float = 0.0
    max_attempts: int = 0
    log_level: str = "INFO"
    json_logs: bool = True

    def _validate(self) -> None:
        if self.poll_interval < 0:
            raise InvalidSettingValueError("poll_interval", self.poll_interval, "must be >= 0")
        if self.max_poll_interval < 0:
            raise InvalidSettingValueError("max_poll_interval", self.max_poll_interval, "must be >= 0")
        if self.timeout < 0:
            raise InvalidSettingValueError("timeout", self.timeout, "must be >= 0")
        if self.max_attempts < 0:
            raise InvalidSettingValueError("max_attempts", self.max_attempts, "must be >= 0")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise InvalidSettingValueError("log_level", self.log_level, "unknown log level")

    def interval(self) -> PollInterval:
        if self.max_poll_interval > self.poll_interval:
            return ExponentialInterval(base=self.poll_interval, max_seconds=self.max_poll_interval)
        return FixedInterval(self.poll_interval)

    def token(self) -> CancellationToken:
        """Fresh token per wait; deadline-bound when ``timeout`` is set."""
        if self.timeout > 0:
            return CancellationToken.with_timeout(self.timeout)
        return CancellationToken.never()

    def engine(self) -> PollEngine:
        return PollEngine(interval=self.interval(), max_attempts=self.max_attempts or None)

    def configure_logging(self) -> None:
        JsonLoggerFactory.configure(self.log_level, json=self.json_logs)


__all__ = ["ConvergeSettings"]
