"""
FlashFind MCP Tools

✅ Gallery (7):
- list_images, upload_image, update_image, delete_image, sync_catalog
- gallery_timeline, gallery_statistics

✅ Search (4):
- search_images, search_by_image, search_by_voice, clear_search

Usage:
    from .tools import register_all_tools
    register_all_tools(mcp, store, orchestrator)
"""

from mcp.server.fastmcp import FastMCP

from flashfind.application.collection import CollectionStore
from flashfind.application.search import SearchOrchestrator

from .gallery import register_gallery_tools
from .search import register_search_tools

GALLERY_TOOLS = [
    "list_images",
    "upload_image",
    "update_image",
    "delete_image",
    "sync_catalog",
    "gallery_timeline",
    "gallery_statistics",
]
SEARCH_TOOLS = ["search_images", "search_by_image", "search_by_voice", "clear_search"]


def register_all_tools(mcp: FastMCP, store: CollectionStore, orchestrator: SearchOrchestrator) -> dict[str, int]:
    """Register all FlashFind tools. Returns tool counts per category."""
    register_gallery_tools(mcp, store, orchestrator)
    register_search_tools(mcp, orchestrator)
    return {"gallery": len(GALLERY_TOOLS), "search": len(SEARCH_TOOLS)}


__all__ = ["register_all_tools", "GALLERY_TOOLS", "SEARCH_TOOLS"]
