"""Centralized logging configuration for the Workshop Hub."""

import json
import logging
from typing import Any


# Configure logger
logger = logging.getLogger("workshop_hub")
handler = logging.StreamHandler()
formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
handler.setFormatter(formatter)
logger.addHandler(handler)
logger.setLevel(logging.INFO)


def log_event(
    component: str,
    operation: str,
    event: str,
    details: dict[str, Any] | None = None,
) -> None:
    """
    Log a structured archive event.

    Args:
        component (str): Emitting component (e.g. "record_store").
        operation (str): Operation name (e.g. "add", "load").
        event (str): Event description.
        details (dict[str, Any] | None): Additional event details.
    """
    payload = {
        "component": component,
        "operation": operation,
        "event": event,
        "details": details or {},
    }
    logger.info(json.dumps(payload, default=str))


def log_error(
    component: str,
    operation: str,
    error: Exception,
    context: dict[str, Any] | None = None,
) -> None:
    """
    Log an error with context.

    Args:
        component (str): Emitting component.
        operation (str): Operation where the error occurred.
        error (Exception): The exception that was raised.
        context (dict[str, Any] | None): Additional context about the error.
    """
    payload = {
        "component": component,
        "operation": operation,
        "error_type": type(error).__name__,
        "error_message": str(error),
        "context": context or {},
    }
    logger.error(json.dumps(payload, default=str))


def set_log_level(level: str) -> None:
    """
    Set the logging level.

    Args:
        level (str): Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    logger.setLevel(numeric_level)
