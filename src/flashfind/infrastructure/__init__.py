"""
Infrastructure Layer - External Systems Integration

Contains:
- catalog: Remote catalog HTTP client
- storage: Collection snapshot persistence
"""

from .catalog import CatalogClient
from .storage import CollectionSnapshot

__all__ = ["CatalogClient", "CollectionSnapshot"]
