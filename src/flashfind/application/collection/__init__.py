"""
Application Layer: Collection Store

Public API for the gallery collection.
"""

from .store import MAX_UPLOAD_BYTES, SUPPORTED_IMAGE_TYPES, CollectionStore

__all__ = ["CollectionStore", "SUPPORTED_IMAGE_TYPES", "MAX_UPLOAD_BYTES"]
