"""
Domain Entity: ImageEntity

One gallery item as held by the local collection.
Pure domain entity. Ids and tags are assigned by the Collection Store.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class ImageEntity:
    """
    A gallery image.

    ``resource_name`` is the join key against the remote catalog.
    Metadata changes produce a new instance (see ``with_metadata``);
    ``tags`` and ``uploaded_at`` never change after creation.
    """

    id: int
    resource_name: str
    location_ref: str
    tags: frozenset[str] = frozenset()
    uploaded_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    description: str | None = None
    category: str | None = None

    def with_metadata(self, description: str | None, category: str | None) -> ImageEntity:
        """Whole-value replacement of the mutable metadata."""
        return dataclasses.replace(self, description=description, category=category)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "resource_name": self.resource_name,
            "location_ref": self.location_ref,
            "tags": sorted(self.tags),
            "uploaded_at": self.uploaded_at.isoformat(),
            "description": self.description,
            "category": self.category,
        }


@dataclass(frozen=True)
class MediaFile:
    """Binary payload sent to the catalog (upload, image probe, voice clip)."""

    name: str
    content: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.content)

    def as_multipart(self) -> tuple[str, bytes, str]:
        """httpx ``files=`` tuple."""
        return (self.name, self.content, self.content_type)
