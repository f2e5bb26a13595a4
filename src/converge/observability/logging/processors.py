"""Observability – get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog

from converge.observability.logging.protocol import Logger


def get_logger(name: str | None = None, **initial_values: Any) -> Logger:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger: Logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["get_logger"]
