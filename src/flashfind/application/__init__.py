"""
Application Layer - Use Cases and Services

Contains:
- search: Tag extraction, local matching, remote gateway, reconciliation, orchestration
- collection: The gallery collection store
- timeline: Day grouping and statistics
"""

from .collection import CollectionStore
from .search import (
    HandoffBoard,
    RemoteSearchGateway,
    SearchOrchestrator,
    extract_tags,
    match_local,
    reconcile,
)
from .timeline import compute_statistics, group_by_day

__all__ = [
    "CollectionStore",
    "HandoffBoard",
    "RemoteSearchGateway",
    "SearchOrchestrator",
    "extract_tags",
    "match_local",
    "reconcile",
    "group_by_day",
    "compute_statistics",
]
