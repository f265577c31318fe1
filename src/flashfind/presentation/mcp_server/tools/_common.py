"""
Common utilities for MCP tools.

Shared functions:
- Loading local files as media payloads
- Markdown formatting of images and errors
"""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING

from flashfind.domain.entities.image import MediaFile
from flashfind.shared.exceptions import FlashFindError, NotFoundError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from flashfind.domain.entities.image import ImageEntity


def load_media(path: str, default_type: str = "application/octet-stream") -> MediaFile:
    """Read a local file into a MediaFile, guessing its content type."""
    file_path = Path(path).expanduser()
    if not file_path.is_file():
        raise NotFoundError("File", str(file_path))
    content_type = mimetypes.guess_type(file_path.name)[0] or default_type
    return MediaFile(name=file_path.name, content=file_path.read_bytes(), content_type=content_type)


def format_image_line(index: int, image: ImageEntity) -> str:
    line = f"{index}. **{image.resource_name}** (id: {image.id})"
    details = []
    if image.tags:
        details.append(f"tags: {', '.join(sorted(image.tags))}")
    if image.category:
        details.append(f"category: {image.category}")
    details.append(f"uploaded: {image.uploaded_at:%Y-%m-%d %H:%M}")
    line += "\n   " + " | ".join(details)
    if image.description:
        line += f"\n   {image.description}"
    return line


def format_images(images: Sequence[ImageEntity], empty_message: str = "No images found.") -> str:
    if not images:
        return empty_message
    return "\n".join(format_image_line(i, image) for i, image in enumerate(images, 1))


def format_error(error: Exception, tool_name: str) -> str:
    if isinstance(error, FlashFindError):
        return f"{error.to_agent_message()}\n🔧 Tool: `{tool_name}`"
    return f"❌ **Error**: {error}\n🔧 Tool: `{tool_name}`"
