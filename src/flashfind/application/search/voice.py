"""
Voice capture.

Recording suspends until the user grants the microphone permission; a refusal
is a user-visible failure (``CapturePermissionDenied``). The recorded clip is
sent to the audio search endpoint through the gateway, which hands the
identifiers off to the consuming side.
"""

from __future__ import annotations

import asyncio
import logging
import mimetypes
import os
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from flashfind.domain.entities.image import MediaFile
from flashfind.shared.exceptions import CapturePermissionDenied

if TYPE_CHECKING:
    from .gateway import RemoteSearchGateway, VoiceOutcome

logger = logging.getLogger(__name__)


class AudioSource(Protocol):
    """A device (or stand-in) that can produce one audio clip."""

    async def request_permission(self) -> bool: ...

    async def record(self) -> MediaFile: ...


class FileAudioSource:
    """Audio source backed by a pre-recorded file; permission means readable."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    async def request_permission(self) -> bool:
        return self.path.is_file() and os.access(self.path, os.R_OK)

    async def record(self) -> MediaFile:
        content = await asyncio.to_thread(self.path.read_bytes)
        content_type = mimetypes.guess_type(self.path.name)[0] or "audio/webm"
        return MediaFile(name=self.path.name, content=content, content_type=content_type)


class VoiceCapture:
    """Capture side of voice search."""

    def __init__(self, gateway: RemoteSearchGateway):
        self._gateway = gateway

    async def capture(self, source: AudioSource, *, timeout: float | None = None) -> VoiceOutcome:
        """
        Record a clip and run the audio search.

        Raises:
            CapturePermissionDenied: The source refused access.
        """
        if not await source.request_permission():
            raise CapturePermissionDenied()
        clip = await source.record()
        logger.debug(f"Recorded {clip.size} bytes of {clip.content_type}")
        return await self._gateway.search_audio(clip, timeout=timeout)
