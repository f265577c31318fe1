"""
Timeline grouping and gallery statistics.

Derived, read-only views over a sequence of images: the day-by-day timeline
and the counters of the statistics page.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING

from flashfind.domain.entities.timeline import GalleryStatistics, TimelineGroup

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from flashfind.domain.entities.image import ImageEntity

RECENT_WINDOW = timedelta(hours=24)
TOP_TAGS = 10


def format_day(day: date) -> str:
    """``October 19, 2026``"""
    return f"{day.strftime('%B')} {day.day}, {day.year}"


def group_by_day(images: Iterable[ImageEntity]) -> list[TimelineGroup]:
    """Group images by local upload day; newest day first, newest image first."""
    buckets: dict[date, list[ImageEntity]] = defaultdict(list)
    for image in images:
        buckets[image.uploaded_at.astimezone().date()].append(image)

    return [
        TimelineGroup(
            day=day,
            formatted_date=format_day(day),
            images=tuple(sorted(buckets[day], key=lambda img: img.uploaded_at, reverse=True)),
        )
        for day in sorted(buckets, reverse=True)
    ]


def compute_statistics(images: Sequence[ImageEntity], now: datetime | None = None) -> GalleryStatistics:
    now = now or datetime.now(UTC)
    cutoff = now - RECENT_WINDOW

    tag_counts: Counter[str] = Counter()
    categories: Counter[str] = Counter()
    recent = 0
    for image in images:
        tag_counts.update(image.tags)
        if image.category:
            categories[image.category] += 1
        if image.uploaded_at > cutoff:
            recent += 1

    total_tags = sum(len(image.tags) for image in images)
    return GalleryStatistics(
        total_images=len(images),
        total_tags=total_tags,
        recent_uploads=recent,
        avg_tags_per_image=round(total_tags / len(images), 1) if images else 0.0,
        # ties broken alphabetically for a stable listing
        top_tags=sorted(tag_counts.items(), key=lambda item: (-item[1], item[0]))[:TOP_TAGS],
        categories=dict(categories),
    )
