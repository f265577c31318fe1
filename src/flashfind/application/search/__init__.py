"""
Application Layer: Multi-Modal Search

Public API for search resolution and reconciliation.
"""

from .channel import VOICE_RESULTS_KEY, HandoffBoard, HandoffSlot
from .gateway import RemoteOutcome, RemoteSearchGateway, VoiceOutcome
from .local_matcher import match_local
from .orchestrator import SearchOrchestrator
from .reconciler import KNOWN_PREFIXES, normalize_identifier, reconcile
from .tags import extract_tags
from .voice import AudioSource, FileAudioSource, VoiceCapture

__all__ = [
    "extract_tags",
    "match_local",
    "reconcile",
    "normalize_identifier",
    "KNOWN_PREFIXES",
    "RemoteSearchGateway",
    "RemoteOutcome",
    "VoiceOutcome",
    "HandoffBoard",
    "HandoffSlot",
    "VOICE_RESULTS_KEY",
    "AudioSource",
    "FileAudioSource",
    "VoiceCapture",
    "SearchOrchestrator",
]
