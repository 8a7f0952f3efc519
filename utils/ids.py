"""Identifier generation."""

import uuid
from typing import Callable

IdFactory = Callable[[], str]


def generate_id() -> str:
    """Return a new random identifier for invoices, items and files."""
    return uuid.uuid4().hex


def sequential_ids(prefix: str = "id") -> IdFactory:
    """
    Build a deterministic id factory, handy for reproducible output.

    Args:
        prefix: String prepended to each counter value

    Returns:
        Callable yielding "<prefix>-1", "<prefix>-2", ...
    """
    counter = 0

    def _next() -> str:
        nonlocal counter
        counter += 1
        return f"{prefix}-{counter}"

    return _next
