"""
Timeline Entities - grouped and summarized views of the gallery.

Key Entities:
    - TimelineGroup: images uploaded on one calendar day
    - GalleryStatistics: counters shown on the statistics page
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

from .image import ImageEntity


@dataclass(frozen=True)
class TimelineGroup:
    """Images uploaded on a single day, newest first."""

    day: date
    formatted_date: str
    images: tuple[ImageEntity, ...] = ()

    @property
    def count(self) -> int:
        return len(self.images)


@dataclass(frozen=True)
class GalleryStatistics:
    total_images: int = 0
    total_tags: int = 0
    recent_uploads: int = 0  # last 24 hours
    avg_tags_per_image: float = 0.0
    top_tags: list[tuple[str, int]] = field(default_factory=list)
    categories: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_images": self.total_images,
            "total_tags": self.total_tags,
            "recent_uploads": self.recent_uploads,
            "avg_tags_per_image": self.avg_tags_per_image,
            "top_tags": [{"tag": tag, "count": count} for tag, count in self.top_tags],
            "categories": dict(self.categories),
        }
