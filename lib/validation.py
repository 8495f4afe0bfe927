"""Validation helpers shared across services and entrypoints."""

from __future__ import annotations

import math
from typing import Any

from utils.errors import ValidationError


def validate_report_text(text: str, *, max_length: int = 50000) -> str:
    """
    Validate raw report text before sending it to the extraction model.

    Args:
        text: Raw report, meeting notes or agenda pasted by the user.
        max_length: Cap on the number of characters forwarded to the model.

    Returns:
        Text trimmed of surrounding whitespace.

    Raises:
        ValidationError: If the text is empty or exceeds the configured limit.
    """
    if not isinstance(text, str):
        raise ValidationError("Report text must be a string.")

    cleaned = text.strip()
    if not cleaned:
        raise ValidationError("Report text cannot be empty.")

    if len(cleaned) > max_length:
        raise ValidationError(f"Report text exceeds {max_length} characters.")

    return cleaned


def coerce_number(value: Any) -> float:
    """Parse ``value`` as a number; anything that is not a number becomes 0."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return 0.0
        try:
            number = float(stripped)
        except ValueError:
            return 0.0
    else:
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def coerce_count(value: Any) -> int:
    """Coerce to a non-negative integer count."""
    return max(0, int(coerce_number(value)))
