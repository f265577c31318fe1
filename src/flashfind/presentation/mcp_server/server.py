"""
FlashFind MCP Server

Model Context Protocol server exposing the FlashFind gallery: collection
management plus local, semantic, image and voice search.

Architecture:
- instructions.py: SERVER_INSTRUCTIONS for AI agents
- tools/: Tool implementations by category
- container: DI container (dependency-injector) for service lifecycle
"""

from __future__ import annotations

import argparse
import logging
import os
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

from mcp.server.fastmcp import FastMCP

from flashfind.container import DEFAULTS, ApplicationContainer
from flashfind.shared.exceptions import ConfigurationError, FlashFindError

from .instructions import SERVER_INSTRUCTIONS
from .tools import register_all_tools

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from flashfind.application.collection import CollectionStore
    from flashfind.application.search import SearchOrchestrator
    from flashfind.infrastructure.catalog import CatalogClient

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = str(Path.home() / ".flashfind")

# ── Module-level DI container ──────────────────────────────────────────────
_container: ApplicationContainer | None = None


def get_container() -> ApplicationContainer:
    """Get the application DI container.

    Raises:
        RuntimeError: If ``create_server()`` has not been called yet.
    """
    if _container is None:
        msg = "Container not initialized. Call create_server() first."
        raise RuntimeError(msg)
    return _container


def _make_lifespan(
    container: ApplicationContainer,
    sync_on_start: bool,
) -> Callable[[FastMCP[Any]], AbstractAsyncContextManager[ApplicationContainer]]:
    """Create a FastMCP lifespan handler bound to *container*."""

    @asynccontextmanager
    async def _lifespan(server: FastMCP[Any]) -> AsyncIterator[ApplicationContainer]:
        """Application lifecycle: startup → yield → shutdown."""
        store = cast("CollectionStore", container.collection_store())
        if sync_on_start:
            try:
                added = await store.hydrate()
                logger.info(f"Lifecycle: startup, {len(added)} images synced from catalog")
            except FlashFindError as e:
                logger.warning(f"Lifecycle: catalog sync skipped ({e})")
        try:
            yield container
        finally:
            await store.wait_for_uploads()
            catalog = cast("CatalogClient", container.catalog_client())
            await catalog.close()
            logger.info("Lifecycle: shutdown, catalog client closed")

    return _lifespan


def create_server(
    catalog_url: str | None = None,
    name: str = "flashfind",
    data_dir: str | None = None,
    image_base_url: str | None = None,
    timeout: float | None = None,
    search_timeout: float | None = None,
    sync_on_start: bool = True,
) -> FastMCP:
    """
    Create and configure the FlashFind MCP server.

    Args:
        catalog_url: Base URL of the catalog service. Default: http://localhost:8000
        name: Server name.
        data_dir: Directory for the collection snapshot. Default: ~/.flashfind
        image_base_url: Prefix for image location refs. Default: {catalog_url}/app/img
        timeout: Catalog request timeout in seconds.
        search_timeout: Bound on each remote search in seconds.
        sync_on_start: Pull catalog records into the gallery at startup.

    Returns:
        Configured FastMCP server instance.
    """
    global _container
    logger.info("Initializing FlashFind MCP Server...")

    _container = ApplicationContainer()
    _container.config.from_dict(
        {
            **DEFAULTS,
            "catalog_url": catalog_url or DEFAULTS["catalog_url"],
            "image_base_url": image_base_url,
            "timeout": timeout or DEFAULTS["timeout"],
            "search_timeout": search_timeout or DEFAULTS["search_timeout"],
            "data_dir": data_dir or DEFAULT_DATA_DIR,
        }
    )

    store = cast("CollectionStore", _container.collection_store())
    orchestrator = cast("SearchOrchestrator", _container.orchestrator())
    logger.info(f"Collection restored: {len(store)} images ({data_dir or DEFAULT_DATA_DIR})")

    mcp = FastMCP(
        name,
        instructions=SERVER_INSTRUCTIONS,
        lifespan=_make_lifespan(_container, sync_on_start),
    )

    stats = register_all_tools(mcp, store, orchestrator)
    logger.info("Tool registration complete: %s", stats)
    logger.info("FlashFind MCP Server initialized successfully")
    return mcp


def _env_float(name: str) -> float | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}")
        return None


def main(argv: list[str] | None = None):
    """Run the MCP server."""

    parser = argparse.ArgumentParser(description="Run the FlashFind MCP server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse", "streamable-http"],
        default=os.environ.get("MCP_TRANSPORT", "stdio"),
        help="Transport protocol (default: stdio)",
    )
    parser.add_argument("--host", default=os.environ.get("MCP_HOST", "127.0.0.1"), help="HTTP host")
    parser.add_argument("--port", type=int, default=int(os.environ.get("MCP_PORT", "8765")), help="HTTP port")
    parser.add_argument(
        "--no-sync",
        action="store_true",
        help="Do not pull catalog records into the gallery at startup",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        server = create_server(
            catalog_url=os.environ.get("FLASHFIND_CATALOG_URL", "").strip() or None,
            data_dir=os.environ.get("FLASHFIND_DATA_DIR", "").strip() or None,
            image_base_url=os.environ.get("FLASHFIND_IMAGE_BASE_URL", "").strip() or None,
            timeout=_env_float("FLASHFIND_TIMEOUT"),
            search_timeout=_env_float("FLASHFIND_SEARCH_TIMEOUT"),
            sync_on_start=not args.no_sync,
        )
    except ConfigurationError as e:
        parser.error(f"{e} ({e.context.suggestion})")

    if args.transport != "stdio":
        server.settings.host = args.host
        server.settings.port = args.port
        logger.info(f"Starting {args.transport} server at http://{args.host}:{args.port}")

    server.run(transport=args.transport)


if __name__ == "__main__":
    main()
