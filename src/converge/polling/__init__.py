"""Polling – turn a one-shot read into a bounded convergence loop."""
from converge.polling.cancellation import CancellationToken, Deadline
from converge.polling.classifier import AssertOutcome, ErrorClassifier, Outcome, classify_assertion
from converge.polling.engine import PollEngine, WaitConfig, wait_for, wait_for_async
from converge.polling.interval import ExponentialInterval, FixedInterval, PollInterval

__all__ = [
    "AssertOutcome",
    "CancellationToken",
    "Deadline",
    "ErrorClassifier",
    "ExponentialInterval",
    "FixedInterval",
    "Outcome",
    "PollEngine",
    "PollInterval",
    "WaitConfig",
    "classify_assertion",
    "wait_for",
    "wait_for_async",
]
