"""Observability – structured logging ports and helpers."""
from converge.observability.logging.protocol import Logger
from converge.observability.logging.factory import JsonLoggerFactory
from converge.observability.logging.processors import get_logger

__all__ = ["JsonLoggerFactory", "Logger", "get_logger"]
