"""
Application Service: Remote Search Gateway

Invokes the catalog's remote search strategies and normalizes each answer:

- SEMANTIC:    text query  -> canonical identifiers (``imageUrls``)
- IMAGE_PROBE: image blob  -> description suggestions (``text``)
- VOICE:       audio clip  -> transcript + identifiers, handed off through
               the voice results slot

Every call is bounded by a caller-supplied timeout. Failures never raise
here: they come back as a ``RemoteOutcome`` with an error attached and no
values, and the caller decides how to degrade.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from flashfind.domain.entities.search import SearchMode
from flashfind.infrastructure.catalog.models import ApiResponse, string_list
from flashfind.shared.async_utils import timeout_with_fallback
from flashfind.shared.exceptions import (
    ErrorContext,
    FlashFindError,
    InvalidParameterError,
    TransportFailure,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from flashfind.domain.entities.image import MediaFile
    from flashfind.infrastructure.catalog.client import CatalogClient

    from .channel import HandoffBoard

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_TIMEOUT = 10.0
DEFAULT_SEARCH_LIMIT = 20


@dataclass(frozen=True)
class RemoteOutcome:
    """Normalized result of one remote strategy."""

    values: list[str] = field(default_factory=list)
    error: FlashFindError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class VoiceOutcome(RemoteOutcome):
    query: str = ""


class RemoteSearchGateway:
    """
    Remote search strategies over the catalog client.

    Architecture:
        Orchestrator → Gateway (here) → Infrastructure (CatalogClient)
    """

    def __init__(
        self,
        catalog: CatalogClient,
        board: HandoffBoard,
        *,
        default_timeout: float = DEFAULT_SEARCH_TIMEOUT,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> None:
        self._catalog = catalog
        self._board = board
        self.default_timeout = default_timeout
        self.limit = limit

    async def resolve(self, mode: SearchMode, payload: Any, *, timeout: float | None = None) -> list[str]:
        """
        Run the remote strategy for ``mode``.

        Returns identifiers for SEMANTIC and VOICE, suggestions for
        IMAGE_PROBE; an empty list on failure.
        """
        match mode:
            case SearchMode.SEMANTIC:
                outcome = await self.search_text(payload, timeout=timeout)
            case SearchMode.IMAGE_PROBE:
                outcome = await self.suggest_from_image(payload, timeout=timeout)
            case SearchMode.VOICE:
                outcome = await self.search_audio(payload, timeout=timeout)
            case SearchMode.LOCAL:
                raise InvalidParameterError("mode", mode.value, "a remote search mode")
        return list(outcome.values)

    async def _bounded(self, call: Awaitable[ApiResponse[Any]], timeout: float, operation: str) -> ApiResponse[Any]:
        def expired() -> ApiResponse[Any]:
            logger.warning(f"Remote {operation} aborted after {timeout}s")
            return ApiResponse(
                status=0,
                error=TransportFailure(
                    f"Request timeout after {timeout}s",
                    context=ErrorContext(operation=operation),
                ),
            )

        return await timeout_with_fallback(call, timeout, expired)

    def _timeout(self, timeout: float | None) -> float:
        return timeout if timeout is not None else self.default_timeout

    async def search_text(
        self,
        query: str,
        *,
        limit: int | None = None,
        timeout: float | None = None,
    ) -> RemoteOutcome:
        """Semantic text search; identifiers are returned verbatim."""
        bound = self._timeout(timeout)
        response = await self._bounded(
            self._catalog.search_text(query, limit or self.limit, timeout=bound),
            bound,
            "search_text",
        )
        if not response.ok:
            return RemoteOutcome(error=response.error)
        return RemoteOutcome(values=string_list(response.data, "imageUrls"))

    async def suggest_from_image(self, image: MediaFile, *, timeout: float | None = None) -> RemoteOutcome:
        """Image probe; yields query suggestions rather than results."""
        if not image.content_type.startswith("image/"):
            raise InvalidParameterError("image", image.name, "an image file")
        bound = self._timeout(timeout)
        response = await self._bounded(
            self._catalog.search_image(image, timeout=bound),
            bound,
            "search_image",
        )
        if not response.ok:
            return RemoteOutcome(error=response.error)
        return RemoteOutcome(values=string_list(response.data, "text"))

    async def search_audio(self, audio: MediaFile, *, timeout: float | None = None) -> VoiceOutcome:
        """
        Voice search.

        On success the identifier list is written to the voice results slot
        before returning, for the consuming side to pick up.
        """
        bound = self._timeout(timeout)
        response = await self._bounded(
            self._catalog.search_audio(audio, timeout=bound),
            bound,
            "search_audio",
        )
        if not response.ok:
            return VoiceOutcome(error=response.error)

        identifiers = string_list(response.data, "imageUrls")
        transcript = response.data.get("query") if isinstance(response.data, dict) else None
        self._board.voice_results().put(identifiers)
        logger.info(f"Voice search returned {len(identifiers)} ids for {transcript!r}")
        return VoiceOutcome(values=identifiers, query=str(transcript or "").strip())
