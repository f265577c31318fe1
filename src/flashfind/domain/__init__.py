"""
Domain Layer - Core Business Objects

Contains:
- entities: ImageEntity, search state, timeline groups
"""

from .entities import (
    GalleryStatistics,
    ImageEntity,
    MediaFile,
    ResolutionOutcome,
    SearchMode,
    SearchPhase,
    SearchState,
    TimelineGroup,
)

__all__ = [
    "ImageEntity",
    "MediaFile",
    "SearchMode",
    "SearchPhase",
    "ResolutionOutcome",
    "SearchState",
    "TimelineGroup",
    "GalleryStatistics",
]
