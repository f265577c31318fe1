"""
Search Entities - state of the multi-modal search.

Key Entities:
    - SearchMode: the active query modality
    - SearchPhase: orchestrator state machine
    - ResolutionOutcome: how the visible results were produced
    - SearchState: immutable snapshot handed to the presentation layer
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .image import ImageEntity


class SearchMode(str, Enum):
    """Query modality. Exactly one is active at a time."""

    LOCAL = "local"
    SEMANTIC = "semantic"
    IMAGE_PROBE = "image_probe"
    VOICE = "voice"

    @property
    def is_reactive(self) -> bool:
        """Reactive modes re-filter on every query change; SEMANTIC waits for submit."""
        return self is not SearchMode.SEMANTIC


class SearchPhase(Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"  # recoverable; results hold the local fallback


class ResolutionOutcome(Enum):
    """
    Provenance of the current result set.

    EMPTY_RESULT and RECONCILIATION_MISS are valid outcomes, not errors.
    """

    FULL_COLLECTION = "full_collection"
    LOCAL = "local"
    REMOTE = "remote"
    EMPTY_RESULT = "empty_result"
    RECONCILIATION_MISS = "reconciliation_miss"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class SearchState:
    """Snapshot of the orchestrator's derived view state."""

    query: str = ""
    mode: SearchMode = SearchMode.LOCAL
    is_resolving: bool = False
    results: tuple[ImageEntity, ...] = ()
    phase: SearchPhase = SearchPhase.IDLE
    outcome: ResolutionOutcome = ResolutionOutcome.FULL_COLLECTION
    suggestions: tuple[str, ...] = ()

    @property
    def result_ids(self) -> list[int]:
        return [entity.id for entity in self.results]
