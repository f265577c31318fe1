"""
Gallery Tools - manage the image collection.

Tools:
- list_images: Show the collection
- upload_image: Add a local image file
- update_image: Replace description/category
- delete_image: Delete from the catalog, then locally
- sync_catalog: Pull records from the catalog
- gallery_timeline: Current results grouped by day
- gallery_statistics: Collection counters
"""

import logging
from typing import Union

from mcp.server.fastmcp import FastMCP

from flashfind.application.collection import CollectionStore
from flashfind.application.search import SearchOrchestrator
from flashfind.application.timeline import compute_statistics
from flashfind.shared.exceptions import FlashFindError

from ._common import format_error, format_images, load_media

logger = logging.getLogger(__name__)


def register_gallery_tools(mcp: FastMCP, store: CollectionStore, orchestrator: SearchOrchestrator):
    """Register collection management MCP tools."""

    @mcp.tool()
    def list_images() -> str:
        """
        List every image in the gallery.

        Returns:
            Numbered list with id, tags, category and upload time
        """
        images = store.list()
        header = f"## 🖼️ Gallery ({len(images)} images)\n\n"
        return header + format_images(images, "Your gallery is empty. Use `upload_image` to add photos.")

    @mcp.tool()
    async def upload_image(
        path: str,
        description: Union[str, None] = None,
        category: Union[str, None] = None,
    ) -> str:
        """
        Upload a local image (JPEG, PNG, GIF or WebP, up to 10 MB).

        The image appears in the gallery immediately; the catalog upload
        continues in the background.

        Args:
            path: Path of the image file
            description: Optional free-text description
            category: Optional category label
        """
        try:
            entity = await store.add(load_media(path), description=description, category=category)
        except FlashFindError as e:
            return format_error(e, "upload_image")
        tags = ", ".join(sorted(entity.tags)) or "none"
        return f"✅ Image '{entity.resource_name}' uploaded (id: {entity.id}, tags: {tags})"

    @mcp.tool()
    async def update_image(
        image_id: Union[int, str],
        description: Union[str, None] = None,
        category: Union[str, None] = None,
    ) -> str:
        """
        Replace the description and category of an image.

        The catalog must accept the change before the gallery shows it.

        Args:
            image_id: Gallery id of the image
            description: New description (None clears it)
            category: New category (None clears it)
        """
        try:
            entity = await store.update(int(image_id), description=description, category=category)
        except ValueError:
            return format_error(ValueError(f"Invalid image id: {image_id!r}"), "update_image")
        except FlashFindError as e:
            return format_error(e, "update_image")
        return f"✅ Image '{entity.resource_name}' updated"

    @mcp.tool()
    async def delete_image(image_id: Union[int, str]) -> str:
        """
        Delete an image. The catalog must confirm before it leaves the gallery.

        Args:
            image_id: Gallery id of the image
        """
        try:
            removed = await store.remove(int(image_id))
        except ValueError:
            return format_error(ValueError(f"Invalid image id: {image_id!r}"), "delete_image")
        except FlashFindError as e:
            return format_error(e, "delete_image")
        if not removed:
            return f"⚠️ No image with id {image_id} in the gallery"
        return f"🗑️ Image {image_id} deleted"

    @mcp.tool()
    async def sync_catalog() -> str:
        """Load images from the remote catalog that are not in the gallery yet."""
        try:
            added = await store.hydrate()
        except FlashFindError as e:
            return format_error(e, "sync_catalog")
        return f"🔄 Synced catalog: {len(added)} new images ({len(store)} total)"

    @mcp.tool()
    def gallery_timeline() -> str:
        """Show the current search results grouped by upload day (newest first)."""
        groups = orchestrator.timeline()
        if not groups:
            return "No images found. Upload some images or try a different search term."
        parts: list[str] = ["## 📅 Timeline"]
        for group in groups:
            parts.append(f"\n### {group.formatted_date} ({group.count})")
            parts.append(format_images(group.images))
        return "\n".join(parts)

    @mcp.tool()
    def gallery_statistics() -> str:
        """Show collection statistics: totals, recent uploads, top tags."""
        stats = compute_statistics(store.list())
        parts = [
            "## 📊 Gallery Statistics",
            f"- **Total images**: {stats.total_images}",
            f"- **Total tags**: {stats.total_tags}",
            f"- **Recent uploads (24h)**: {stats.recent_uploads}",
            f"- **Avg tags per image**: {stats.avg_tags_per_image}",
        ]
        if stats.top_tags:
            parts.append("- **Top tags**: " + ", ".join(f"{tag} ({n})" for tag, n in stats.top_tags))
        if stats.categories:
            parts.append("- **Categories**: " + ", ".join(f"{c} ({n})" for c, n in stats.categories.items()))
        return "\n".join(parts)
