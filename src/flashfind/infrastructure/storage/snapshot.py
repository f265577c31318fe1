"""
Collection snapshot persistence.

Stores the gallery collection as JSON so it survives restarts. Process-local
ids are not persisted; the Collection Store assigns fresh ones on load.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable

    from flashfind.domain.entities.image import ImageEntity

logger = logging.getLogger(__name__)

SNAPSHOT_FILENAME = "collection.json"


@dataclass(frozen=True)
class SnapshotEntry:
    """Persisted form of an ImageEntity. Ids and tags are re-derived on load."""

    resource_name: str
    location_ref: str
    uploaded_at: datetime
    description: str | None = None
    category: str | None = None

    @classmethod
    def from_entity(cls, entity: ImageEntity) -> SnapshotEntry:
        return cls(
            resource_name=entity.resource_name,
            location_ref=entity.location_ref,
            uploaded_at=entity.uploaded_at,
            description=entity.description,
            category=entity.category,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "resourceName": self.resource_name,
            "url": self.location_ref,
            "uploadDate": self.uploaded_at.isoformat(),
            "description": self.description,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnapshotEntry:
        return cls(
            resource_name=data["resourceName"],
            location_ref=data.get("url") or "",
            uploaded_at=datetime.fromisoformat(data["uploadDate"]),
            description=data.get("description"),
            category=data.get("category"),
        )


class CollectionSnapshot:
    """
    JSON-file persistence for the collection.

    If ``data_dir`` is None the snapshot is memory-only (nothing is written).
    """

    def __init__(self, data_dir: str | Path | None = None):
        self.data_dir = Path(data_dir).expanduser() if data_dir else None
        if self.data_dir:
            self.data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path | None:
        return self.data_dir / SNAPSHOT_FILENAME if self.data_dir else None

    def load(self) -> list[SnapshotEntry]:
        """Load persisted entries. Corrupt files are logged and ignored."""
        path = self.path
        if path is None or not path.exists():
            return []
        try:
            with open(path, encoding="utf-8") as f:
                raw = json.load(f)
            entries = [SnapshotEntry.from_dict(item) for item in raw]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Failed to load collection snapshot {path}: {e}")
            return []
        logger.info(f"Loaded {len(entries)} images from {path}")
        return entries

    def save(self, entities: Iterable[ImageEntity]) -> None:
        path = self.path
        if path is None:
            return
        data = [SnapshotEntry.from_entity(entity).to_dict() for entity in entities]
        try:
            tmp = path.with_suffix(".tmp")
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            tmp.replace(path)
        except OSError as e:
            logger.warning(f"Failed to save collection snapshot {path}: {e}")
