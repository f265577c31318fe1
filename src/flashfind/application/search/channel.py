"""
Transient handoff channel.

Voice search records in one component and consumes results in another, so the
identifier list crosses that boundary through a single-slot channel: the
capture side ``put``s once, the consuming side ``take``s once.

Example:
    >>> board = HandoffBoard()
    >>> board.slot(VOICE_RESULTS_KEY).put(["a.jpg", "b.jpg"])
    >>> board.slot(VOICE_RESULTS_KEY).take()
    ['a.jpg', 'b.jpg']
    >>> board.slot(VOICE_RESULTS_KEY).take() is None
    True
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

VOICE_RESULTS_KEY = "voiceSearchResults"

_EMPTY = object()

T = TypeVar("T")


class HandoffSlot(Generic[T]):
    """Single-assignment cell with a consume-once read."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._value: Any = _EMPTY

    @property
    def is_empty(self) -> bool:
        return self._value is _EMPTY

    def put(self, value: T) -> None:
        """Store ``value``. An unconsumed previous value is replaced."""
        if not self.is_empty:
            logger.warning(f"Handoff slot {self.name!r} overwritten before it was consumed")
        self._value = value

    def take(self) -> T | None:
        """Return the stored value and clear the slot; None when empty."""
        if self.is_empty:
            return None
        value, self._value = self._value, _EMPTY
        return value


class HandoffBoard:
    """Registry of named handoff slots shared between components."""

    def __init__(self) -> None:
        self._slots: dict[str, HandoffSlot[Any]] = {}

    def slot(self, name: str) -> HandoffSlot[Any]:
        if name not in self._slots:
            self._slots[name] = HandoffSlot(name)
        return self._slots[name]

    def voice_results(self) -> HandoffSlot[list[str]]:
        return self.slot(VOICE_RESULTS_KEY)
