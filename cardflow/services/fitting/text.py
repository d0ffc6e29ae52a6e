"""Text slot writing and greedy font shrinking."""

from __future__ import annotations

import logging

from cardflow.services.document.model import TextLayer

LOGGER = logging.getLogger(__name__)


def set_content(slot: TextLayer, text: str) -> None:
    slot.contents = text


def fit_width(
    slot: TextLayer,
    max_width: float,
    initial_size: float,
    min_size: float,
    step: float = 0.5,
) -> float:
    """Shrink the font from ``initial_size`` until the text fits ``max_width``.

    The size drops by ``step`` while the measured width exceeds ``max_width``
    and the size is still above ``min_size``. Width is re-read from the slot
    after every change. Returns the final size.
    """

    slot.size = initial_size
    while slot.bounds.width > max_width and slot.size > min_size:
        slot.size -= step
    LOGGER.debug("fitting.text slot=%s size=%s width=%.1f", slot.name, slot.size, slot.bounds.width)
    return slot.size


__all__ = ["fit_width", "set_content"]
