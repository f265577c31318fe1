"""
Application DI Container (dependency-injector).

Centralizes service creation and lifecycle management.

Usage::

    from flashfind.container import ApplicationContainer

    container = ApplicationContainer()
    container.config.from_dict({
        "catalog_url": "http://localhost:8000",
        "data_dir": "~/.flashfind",
    })

    orchestrator = container.orchestrator()
    store = container.collection_store()

    # In tests, override any provider:
    container.catalog_client.override(providers.Object(mock_catalog))
"""

from __future__ import annotations

import logging

from dependency_injector import containers, providers

logger = logging.getLogger(__name__)

DEFAULTS = {
    "catalog_url": "http://localhost:8000",
    "image_base_url": None,
    "timeout": 30.0,
    "search_timeout": 10.0,
    "search_limit": 20,
    "data_dir": None,
}


def _create_catalog_client(catalog_url: str, timeout: float) -> object:
    """Lazy factory for CatalogClient (avoids top-level import)."""
    from flashfind.infrastructure.catalog import CatalogClient

    return CatalogClient(base_url=catalog_url or DEFAULTS["catalog_url"], timeout=timeout or DEFAULTS["timeout"])


def _create_snapshot(data_dir: str | None) -> object:
    from flashfind.infrastructure.storage import CollectionSnapshot

    return CollectionSnapshot(data_dir)


def _create_collection_store(catalog: object, snapshot: object, catalog_url: str, image_base_url: str | None) -> object:
    """Lazy factory for CollectionStore."""
    from flashfind.application.collection import CollectionStore

    base = image_base_url or f"{(catalog_url or DEFAULTS['catalog_url']).rstrip('/')}/app/img"
    return CollectionStore(catalog, snapshot, image_base_url=base)


def _create_handoff_board() -> object:
    from flashfind.application.search.channel import HandoffBoard

    return HandoffBoard()


def _create_gateway(catalog: object, board: object, search_timeout: float, search_limit: int) -> object:
    """Lazy factory for RemoteSearchGateway."""
    from flashfind.application.search.gateway import RemoteSearchGateway

    return RemoteSearchGateway(
        catalog,
        board,
        default_timeout=search_timeout or DEFAULTS["search_timeout"],
        limit=search_limit or DEFAULTS["search_limit"],
    )


def _create_orchestrator(store: object, gateway: object, board: object, search_timeout: float) -> object:
    """Lazy factory for SearchOrchestrator."""
    from flashfind.application.search.orchestrator import SearchOrchestrator

    return SearchOrchestrator(store, gateway, board, search_timeout=search_timeout or None)


class ApplicationContainer(containers.DeclarativeContainer):
    """Central DI container for FlashFind.

    Manages creation and lifecycle of all core services:
    - ``catalog_client``: HTTP access to the remote catalog
    - ``collection_store``: the gallery collection (with snapshot persistence)
    - ``handoff_board``: transient channels between components
    - ``search_gateway``: remote search strategies
    - ``orchestrator``: multi-modal search state machine
    """

    config = providers.Configuration()

    catalog_client = providers.Singleton(
        _create_catalog_client,
        catalog_url=config.catalog_url,
        timeout=config.timeout,
    )

    snapshot = providers.Singleton(
        _create_snapshot,
        data_dir=config.data_dir,
    )

    collection_store = providers.Singleton(
        _create_collection_store,
        catalog=catalog_client,
        snapshot=snapshot,
        catalog_url=config.catalog_url,
        image_base_url=config.image_base_url,
    )

    handoff_board = providers.Singleton(_create_handoff_board)

    search_gateway = providers.Singleton(
        _create_gateway,
        catalog=catalog_client,
        board=handoff_board,
        search_timeout=config.search_timeout,
        search_limit=config.search_limit,
    )

    orchestrator = providers.Singleton(
        _create_orchestrator,
        store=collection_store,
        gateway=search_gateway,
        board=handoff_board,
        search_timeout=config.search_timeout,
    )


__all__ = ["DEFAULTS", "ApplicationContainer"]
