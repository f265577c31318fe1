"""
FlashFind - Multi-Modal Gallery Search

A personal image gallery that resolves searches locally (tags and file
names) or remotely (semantic text, image probe, voice) and reconciles remote
identifiers against the local collection.

Usage:
    from flashfind import ApplicationContainer, SearchMode

    container = ApplicationContainer()
    container.config.from_dict({"catalog_url": "http://localhost:8000"})

    orchestrator = container.orchestrator()
    await orchestrator.set_mode(SearchMode.SEMANTIC)
    await orchestrator.set_query("sunset on the beach")
    state = await orchestrator.submit()
"""

from .application.collection import CollectionStore
from .application.search import (
    RemoteSearchGateway,
    SearchOrchestrator,
    extract_tags,
    match_local,
    reconcile,
)
from .container import ApplicationContainer
from .domain.entities import ImageEntity, MediaFile, SearchMode, SearchState
from .infrastructure.catalog import CatalogClient

__version__ = "0.1.0"

__all__ = [
    "ApplicationContainer",
    "CatalogClient",
    "CollectionStore",
    "ImageEntity",
    "MediaFile",
    "RemoteSearchGateway",
    "SearchMode",
    "SearchOrchestrator",
    "SearchState",
    "extract_tags",
    "match_local",
    "reconcile",
]
