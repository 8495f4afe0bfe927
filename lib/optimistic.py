"""Optimistic local mutation with rollback on remote failure."""
from __future__ import annotations

from typing import Callable, TypeVar

T = TypeVar("T")

Undo = Callable[[], None]


def optimistic_mutation(apply_local: Callable[[], Undo], remote_call: Callable[[], T]) -> T:
    """
    Apply a change locally, then confirm it remotely.

    Args:
        apply_local: Applies the local change and returns the inverse, captured
            before the change was made.
        remote_call: The remote write confirming the change.

    Returns:
        Whatever ``remote_call`` returns.

    Raises:
        Exception: The remote failure, re-raised after the inverse has run.
    """
    undo = apply_local()
    try:
        return remote_call()
    except Exception:
        undo()
        raise
