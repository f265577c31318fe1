"""Tests for voice capture sources."""

from __future__ import annotations

import pytest

from flashfind.application.search.voice import FileAudioSource, VoiceCapture
from flashfind.infrastructure.catalog import ApiResponse
from flashfind.shared.exceptions import CapturePermissionDenied


class TestFileAudioSource:
    async def test_permission_requires_existing_file(self, temp_dir):
        assert not await FileAudioSource(temp_dir / "missing.webm").request_permission()

    async def test_record(self, temp_dir):
        path = temp_dir / "clip.wav"
        path.write_bytes(b"RIFF")
        source = FileAudioSource(path)

        assert await source.request_permission()
        clip = await source.record()

        assert clip.content == b"RIFF"
        assert clip.name == "clip.wav"
        assert clip.content_type.startswith("audio/")

    async def test_unknown_extension_defaults_to_webm(self, temp_dir):
        path = temp_dir / "clip.unknownext"
        path.write_bytes(b"x")
        clip = await FileAudioSource(path).record()
        assert clip.content_type == "audio/webm"


class TestVoiceCapture:
    async def test_denied(self, gateway, temp_dir):
        with pytest.raises(CapturePermissionDenied):
            await VoiceCapture(gateway).capture(FileAudioSource(temp_dir / "missing.webm"))

    async def test_capture_hands_off_results(self, gateway, board, mock_catalog, temp_dir):
        path = temp_dir / "clip.webm"
        path.write_bytes(b"webm")
        mock_catalog.search_audio.return_value = ApiResponse(
            status=200, data={"query": "beach", "imageUrls": ["sunset-beach.jpg"]}
        )

        outcome = await VoiceCapture(gateway).capture(FileAudioSource(path), timeout=1.0)

        assert outcome.query == "beach"
        assert board.voice_results().take() == ["sunset-beach.jpg"]
