"""Tests for DI container and MCP server lifecycle."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from dependency_injector import providers

from flashfind.application.collection import CollectionStore
from flashfind.application.search import RemoteSearchGateway, SearchOrchestrator
from flashfind.container import DEFAULTS, ApplicationContainer
from flashfind.infrastructure.catalog import ApiResponse, CatalogClient
from flashfind.presentation.mcp_server import server as server_module
from flashfind.presentation.mcp_server.server import create_server, get_container
from flashfind.shared.exceptions import ConfigurationError

# ============================================================================
# DI Container Tests
# ============================================================================


class TestApplicationContainer:
    def test_container_creation(self, temp_dir) -> None:
        container = ApplicationContainer()
        container.config.from_dict({**DEFAULTS, "catalog_url": "http://catalog:9000", "data_dir": str(temp_dir)})

        assert container.config.catalog_url() == "http://catalog:9000"
        assert container.config.search_timeout() == 10.0

    def test_services_are_singletons(self, temp_dir) -> None:
        container = ApplicationContainer()
        container.config.from_dict({**DEFAULTS, "data_dir": str(temp_dir)})

        assert container.catalog_client() is container.catalog_client()
        assert container.orchestrator() is container.orchestrator()
        assert isinstance(container.catalog_client(), CatalogClient)
        assert isinstance(container.collection_store(), CollectionStore)
        assert isinstance(container.search_gateway(), RemoteSearchGateway)
        assert isinstance(container.orchestrator(), SearchOrchestrator)

    def test_shared_dependencies(self, temp_dir) -> None:
        container = ApplicationContainer()
        container.config.from_dict({**DEFAULTS, "data_dir": str(temp_dir)})

        store = container.collection_store()
        assert store._catalog is container.catalog_client()
        assert container.orchestrator()._board is container.handoff_board()

    def test_image_base_url_default(self, temp_dir) -> None:
        container = ApplicationContainer()
        container.config.from_dict({**DEFAULTS, "catalog_url": "http://catalog:9000/", "data_dir": str(temp_dir)})

        assert container.collection_store().image_base_url == "http://catalog:9000/app/img"

    def test_override_provider(self, temp_dir) -> None:
        container = ApplicationContainer()
        container.config.from_dict({**DEFAULTS, "data_dir": str(temp_dir)})
        mock_catalog = AsyncMock()

        container.catalog_client.override(providers.Object(mock_catalog))
        try:
            assert container.collection_store()._catalog is mock_catalog
        finally:
            container.catalog_client.reset_override()


# ============================================================================
# MCP server
# ============================================================================


class TestServer:
    def test_get_container_before_create(self, monkeypatch) -> None:
        monkeypatch.setattr(server_module, "_container", None)
        with pytest.raises(RuntimeError):
            get_container()

    async def test_create_server_registers_tools(self, temp_dir) -> None:
        mcp = create_server(catalog_url="http://catalog:9000", data_dir=str(temp_dir))

        names = {tool.name for tool in await mcp.list_tools()}

        assert {"search_images", "upload_image", "delete_image", "search_by_voice"} <= names
        assert get_container().config.data_dir() == str(temp_dir)

    async def test_lifespan_syncs_and_closes(self, temp_dir) -> None:
        create_server(data_dir=str(temp_dir))
        container = get_container()
        mock_catalog = AsyncMock()
        mock_catalog.list_catalog.return_value = ApiResponse(status=200, data=[])
        container.catalog_client.override(providers.Object(mock_catalog))
        container.collection_store.reset()

        lifespan = server_module._make_lifespan(container, sync_on_start=True)
        async with lifespan(AsyncMock()) as yielded:
            assert yielded is container

        mock_catalog.list_catalog.assert_awaited_once()
        mock_catalog.close.assert_awaited_once()

    def test_create_server_rejects_bad_catalog_url(self, temp_dir) -> None:
        with pytest.raises(ConfigurationError):
            create_server(catalog_url="catalog:9000", data_dir=str(temp_dir))

    def test_main_reports_bad_catalog_url(self, temp_dir, monkeypatch, capsys) -> None:
        monkeypatch.setenv("FLASHFIND_CATALOG_URL", "catalog:9000")
        monkeypatch.setenv("FLASHFIND_DATA_DIR", str(temp_dir))

        with pytest.raises(SystemExit) as exc_info:
            server_module.main(["--no-sync"])

        assert exc_info.value.code == 2
        assert "FLASHFIND_CATALOG_URL" in capsys.readouterr().err
