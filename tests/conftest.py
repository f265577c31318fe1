"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

import tempfile
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from flashfind.application.collection import CollectionStore
from flashfind.application.search import HandoffBoard, RemoteSearchGateway, SearchOrchestrator, extract_tags
from flashfind.domain.entities.image import ImageEntity, MediaFile
from flashfind.infrastructure.catalog import ApiResponse, CatalogRecord

SEED_NAMES = ["sunset-beach.jpg", "mountain-lake.png", "city-night.jpg"]

# ============================================================
# Environment Fixtures
# ============================================================


@pytest.fixture
def temp_dir():
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# ============================================================
# Entity Factories
# ============================================================


@pytest.fixture
def make_image():
    """Factory for ImageEntity with tags derived from the name."""

    def _make(image_id: int, name: str, **kwargs) -> ImageEntity:
        kwargs.setdefault("uploaded_at", datetime(2026, 10, 19, 12, 0, tzinfo=UTC))
        return ImageEntity(
            id=image_id,
            resource_name=name,
            location_ref=f"/app/img/{name}",
            tags=extract_tags(name),
            **kwargs,
        )

    return _make


@pytest.fixture
def jpeg_file():
    return MediaFile(name="forest-trail.jpg", content=b"\xff\xd8\xff\xe0fake", content_type="image/jpeg")


# ============================================================
# Mock Catalog
# ============================================================


@pytest.fixture
def mock_catalog():
    """CatalogClient stand-in; every call succeeds with an empty payload."""
    catalog = AsyncMock()
    catalog.list_catalog.return_value = ApiResponse(status=200, data=[])
    catalog.upload.return_value = ApiResponse(status=201, data={"status": "ok"})
    catalog.delete.return_value = ApiResponse(status=200, data=None)
    catalog.update.return_value = ApiResponse(status=200, data={"updated": True})
    catalog.search_text.return_value = ApiResponse(status=200, data={"imageUrls": []})
    catalog.search_image.return_value = ApiResponse(status=200, data={"text": []})
    catalog.search_audio.return_value = ApiResponse(status=200, data={"query": "", "imageUrls": []})
    return catalog


@pytest.fixture
async def store(mock_catalog):
    """Collection store seeded with three images (ids 1, 2, 3)."""
    mock_catalog.list_catalog.return_value = ApiResponse(
        status=200,
        data=[CatalogRecord(resource_name=name) for name in SEED_NAMES],
    )
    collection = CollectionStore(mock_catalog)
    await collection.hydrate()
    return collection


@pytest.fixture
def board():
    return HandoffBoard()


@pytest.fixture
def gateway(mock_catalog, board):
    return RemoteSearchGateway(mock_catalog, board, default_timeout=1.0)


@pytest.fixture
def orchestrator(store, gateway, board):
    return SearchOrchestrator(store, gateway, board, search_timeout=1.0)
