"""
Application Service: Collection Store

The single owner of the gallery collection. Everything else reads snapshots.

Mutation policy:
- add:     optimistic. The entity is appended at once and the catalog upload
           runs in the background; an upload failure is logged, not undone.
- remove:  confirmed. The catalog delete must succeed before the entity
           leaves the collection; failures are raised to the caller.
- update:  confirmed, like remove. The catalog must accept the new
           description/category before the entity changes.
- hydrate: pulls catalog records not yet known locally.

Listeners registered with ``subscribe`` are called synchronously after every
change.
"""

from __future__ import annotations

import itertools
import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING
from urllib.parse import quote

from flashfind.application.search.tags import extract_tags
from flashfind.domain.entities.image import ImageEntity, MediaFile
from flashfind.shared.async_utils import BackgroundTasks
from flashfind.shared.exceptions import InvalidParameterError, NotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable

    from flashfind.infrastructure.catalog.client import CatalogClient
    from flashfind.infrastructure.storage.snapshot import CollectionSnapshot

logger = logging.getLogger(__name__)

SUPPORTED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})
MAX_UPLOAD_BYTES = 10 * 1024 * 1024

_UNSET = object()


class CollectionStore:
    """Authoritative in-memory gallery collection with persistence."""

    def __init__(
        self,
        catalog: CatalogClient,
        snapshot: CollectionSnapshot | None = None,
        *,
        image_base_url: str | None = None,
    ):
        """
        Args:
            catalog: Catalog client used for upload/update/delete/list
            snapshot: Optional persistence; restored immediately
            image_base_url: Prefix for location refs of catalog images
        """
        self._catalog = catalog
        self._snapshot = snapshot
        self.image_base_url = image_base_url.rstrip("/") if image_base_url else None
        self._ids = itertools.count(1)
        self._entities: list[ImageEntity] = []
        self._listeners: list[Callable[[], None]] = []
        self._uploads = BackgroundTasks()
        self._restore()

    # =========================================================================
    # Read access
    # =========================================================================

    def list(self) -> tuple[ImageEntity, ...]:
        """Current collection snapshot, in insertion order."""
        return tuple(self._entities)

    def get(self, image_id: int) -> ImageEntity | None:
        for entity in self._entities:
            if entity.id == image_id:
                return entity
        return None

    def __len__(self) -> int:
        return len(self._entities)

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Register a change listener; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # =========================================================================
    # Mutations
    # =========================================================================

    async def add(
        self,
        resource: MediaFile,
        description: str | None = None,
        category: str | None = None,
    ) -> ImageEntity:
        """
        Add an uploaded image.

        Raises:
            InvalidParameterError: Unsupported type or file over 10 MiB.
        """
        self._validate(resource)
        entity = self._create(
            resource.name,
            self._location_for(resource.name),
            description=description,
            category=category,
        )
        self._entities.append(entity)
        logger.info(f"Added image #{entity.id} {entity.resource_name} ({len(entity.tags)} tags)")
        self._changed()

        metadata = {
            "description": description,
            "category": category,
            "createdAt": entity.uploaded_at.isoformat(),
        }
        self._uploads.spawn(self._notify_catalog(resource, metadata), name=f"upload:{resource.name}")
        return entity

    async def remove(self, image_id: int) -> bool:
        """
        Delete an image from the catalog, then from the collection.

        Returns:
            True once removed; False if no such image is held locally.

        Raises:
            RemoteRejected: The catalog answered with a non-2xx status.
            TransportFailure: The catalog could not be reached in time.
        """
        entity = self.get(image_id)
        if entity is None:
            logger.warning(f"Remove requested for unknown image #{image_id}")
            return False

        response = await self._catalog.delete(entity.resource_name)
        if not 200 <= response.status < 300:
            logger.warning(f"Catalog refused delete of {entity.resource_name}: {response.error}")
            raise response.error

        self._entities = [e for e in self._entities if e.id != image_id]
        logger.info(f"Removed image #{image_id} {entity.resource_name}")
        self._changed()
        return True

    async def update(
        self,
        image_id: int,
        *,
        description: str | None | object = _UNSET,
        category: str | None | object = _UNSET,
    ) -> ImageEntity:
        """
        Replace description and/or category of an image.

        The catalog must accept the new metadata before the local entity
        changes.

        Raises:
            NotFoundError: No image with this id.
            RemoteRejected: The catalog answered with a non-2xx status.
            TransportFailure: The catalog could not be reached in time.
        """
        current = self.get(image_id)
        if current is None:
            raise NotFoundError("Image", str(image_id))
        description = current.description if description is _UNSET else description
        category = current.category if category is _UNSET else category

        response = await self._catalog.update(
            current.resource_name,
            {"description": description, "category": category},
        )
        if not 200 <= response.status < 300:
            logger.warning(f"Catalog refused update of {current.resource_name}: {response.error}")
            raise response.error

        if self.get(image_id) is None:
            # removed while the catalog call was pending
            raise NotFoundError("Image", str(image_id))
        updated = current.with_metadata(description, category)
        self._entities = [updated if e.id == image_id else e for e in self._entities]
        logger.info(f"Updated metadata of image #{image_id} {current.resource_name}")
        self._changed()
        return updated

    async def hydrate(self) -> list[ImageEntity]:
        """
        Add catalog records whose resource name is not held yet.

        Raises:
            RemoteRejected / TransportFailure / ParseError from the catalog.
        """
        response = await self._catalog.list_catalog()
        records = response.unwrap() or []

        known = {e.resource_name for e in self._entities}
        added: list[ImageEntity] = []
        for record in records:
            if record.resource_name in known:
                continue
            known.add(record.resource_name)
            entity = self._create(
                record.resource_name,
                record.location_ref or self._location_for(record.resource_name),
                description=record.description,
                category=record.category,
                uploaded_at=record.created_at,
            )
            added.append(entity)

        if added:
            self._entities.extend(added)
            self._changed()
        logger.info(f"Hydrated {len(added)} new images from catalog ({len(records)} records)")
        return added

    async def wait_for_uploads(self) -> None:
        """Wait until background catalog uploads have finished."""
        if self._uploads:
            logger.info(f"Waiting for {len(self._uploads)} catalog uploads")
        await self._uploads.drain()

    # =========================================================================
    # Internals
    # =========================================================================

    def _create(
        self,
        resource_name: str,
        location_ref: str,
        *,
        description: str | None = None,
        category: str | None = None,
        uploaded_at: datetime | None = None,
    ) -> ImageEntity:
        return ImageEntity(
            id=next(self._ids),
            resource_name=resource_name,
            location_ref=location_ref,
            tags=extract_tags(resource_name),
            uploaded_at=uploaded_at or datetime.now(UTC),
            description=description,
            category=category,
        )

    def _location_for(self, resource_name: str) -> str:
        if self.image_base_url:
            return f"{self.image_base_url}/{quote(resource_name)}"
        return resource_name

    @staticmethod
    def _validate(resource: MediaFile) -> None:
        if resource.content_type not in SUPPORTED_IMAGE_TYPES:
            raise InvalidParameterError(
                "file",
                resource.name,
                "a JPEG, PNG, GIF or WebP image",
            )
        if resource.size > MAX_UPLOAD_BYTES:
            raise InvalidParameterError("file", resource.name, "an image of at most 10 MB")

    async def _notify_catalog(self, resource: MediaFile, metadata: dict[str, str | None]) -> None:
        response = await self._catalog.upload(resource, metadata)
        if not response.ok:
            logger.warning(f"Catalog upload of {resource.name} failed: {response.error}")

    def _restore(self) -> None:
        if self._snapshot is None:
            return
        for entry in self._snapshot.load():
            self._entities.append(
                self._create(
                    entry.resource_name,
                    entry.location_ref or self._location_for(entry.resource_name),
                    description=entry.description,
                    category=entry.category,
                    uploaded_at=entry.uploaded_at,
                )
            )

    def _changed(self) -> None:
        if self._snapshot is not None:
            self._snapshot.save(self._entities)
        for listener in list(self._listeners):
            listener()
