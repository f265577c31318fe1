"""
Domain Entities

Core business objects for the gallery and its search.
"""

from __future__ import annotations

from .image import ImageEntity, MediaFile
from .search import ResolutionOutcome, SearchMode, SearchPhase, SearchState
from .timeline import GalleryStatistics, TimelineGroup

__all__ = [
    # Image entities
    "ImageEntity",
    "MediaFile",
    # Search state
    "SearchMode",
    "SearchPhase",
    "ResolutionOutcome",
    "SearchState",
    # Timeline entities
    "TimelineGroup",
    "GalleryStatistics",
]
