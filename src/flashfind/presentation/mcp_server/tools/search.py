"""
Search Tools - multi-modal gallery search.

Tools:
- search_images: Local or semantic (AI) text search
- search_by_image: Describe a reference image and search with the description
- search_by_voice: Search with a recorded voice clip
- clear_search: Show the whole gallery again
"""

import logging

from mcp.server.fastmcp import FastMCP

from flashfind.application.search import FileAudioSource, SearchOrchestrator
from flashfind.domain.entities.search import ResolutionOutcome, SearchMode, SearchState
from flashfind.shared.exceptions import FlashFindError

from ._common import format_error, format_images, load_media

logger = logging.getLogger(__name__)

_OUTCOME_NOTES = {
    ResolutionOutcome.DEGRADED: "⚠️ Remote search unavailable, showing local matches",
    ResolutionOutcome.RECONCILIATION_MISS: "ℹ️ Remote matches not in this gallery, showing local matches",
    ResolutionOutcome.EMPTY_RESULT: "ℹ️ The search service found no matching images",
}


def _format_state(state: SearchState) -> str:
    parts = [
        "## 🔍 Search Results",
        f"**Query**: {state.query or '(none)'}",
        f"**Mode**: {state.mode.value}",
        f"**Found**: {len(state.results)} images",
    ]
    note = _OUTCOME_NOTES.get(state.outcome)
    if note:
        parts.append(note)
    parts.append("")
    parts.append(format_images(state.results, f'No images matching "{state.query}" were found.'))
    return "\n".join(parts)


def register_search_tools(mcp: FastMCP, orchestrator: SearchOrchestrator):
    """Register gallery search MCP tools."""

    @mcp.tool()
    async def search_images(query: str, mode: str = "local") -> str:
        """
        Search the gallery.

        Args:
            query: Search text (e.g., "beach sunset")
            mode: "local" (tag and file name match) or "semantic" (AI search
                  by the catalog service, falls back to local matching)

        Returns:
            Matching images
        """
        try:
            search_mode = SearchMode(mode.strip().lower())
        except ValueError:
            logger.warning(f"Unknown search mode '{mode}', using local")
            search_mode = SearchMode.LOCAL

        await orchestrator.set_mode(search_mode)
        state = await orchestrator.set_query(query)
        if search_mode is SearchMode.SEMANTIC:
            state = await orchestrator.submit()
        return _format_state(state)

    @mcp.tool()
    async def search_by_image(path: str) -> str:
        """
        Search with a reference image.

        The catalog describes the image; the first description becomes the
        search query.

        Args:
            path: Path of the reference image
        """
        try:
            suggestions = await orchestrator.probe_image(load_media(path))
        except FlashFindError as e:
            return format_error(e, "search_by_image")
        if not suggestions:
            return "No descriptions found for this image."
        parts = ["### Descriptions", *[f"- {text}" for text in suggestions], "", _format_state(orchestrator.state)]
        return "\n".join(parts)

    @mcp.tool()
    async def search_by_voice(path: str) -> str:
        """
        Search with a recorded voice clip.

        Args:
            path: Path of the audio recording
        """
        try:
            outcome = await orchestrator.capture_voice(FileAudioSource(path))
        except FlashFindError as e:
            return format_error(e, "search_by_voice")
        if not outcome.ok:
            return format_error(outcome.error, "search_by_voice")
        return f'🎙️ Heard: "{outcome.query}"\n\n' + _format_state(orchestrator.state)

    @mcp.tool()
    def clear_search() -> str:
        """Clear the query and show the whole gallery."""
        return _format_state(orchestrator.clear())
