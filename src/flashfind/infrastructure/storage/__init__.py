"""Local persistence for the gallery collection."""

from .snapshot import SNAPSHOT_FILENAME, CollectionSnapshot, SnapshotEntry

__all__ = ["CollectionSnapshot", "SnapshotEntry", "SNAPSHOT_FILENAME"]
