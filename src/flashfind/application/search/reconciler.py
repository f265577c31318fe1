"""
Identifier Reconciler

Maps canonical identifiers returned by the remote search service back onto
locally held entities.

Remote ids and local names drift in format (``./app/img/cat.jpg``,
``https://cdn.example/img/Cat.jpg?v=2``, ``cat.jpg``), so both sides are
normalized to their lower-cased final path segment before matching.

Match policy per id, in the order the service ranked them:
    1. exact normalized name
    2. first entity (collection order) whose name contains the id, or the reverse
    3. otherwise the id is dropped

Partial matching is ambiguous when names share substrings ("cat.jpg" vs
"bobcat.jpg"); the first entity in collection order wins.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import unquote, urlsplit

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from flashfind.domain.entities.image import ImageEntity

logger = logging.getLogger(__name__)

KNOWN_PREFIXES: tuple[str, ...] = ("./app/img/", "app/img/", "/app/img/", "./", "file://")


def normalize_identifier(value: str, prefixes: Iterable[str] = KNOWN_PREFIXES) -> str:
    """Reduce an identifier or resource name to its lower-cased final path segment."""
    text = value.strip()
    if not text:
        return ""
    for prefix in prefixes:
        if text.startswith(prefix):
            text = text[len(prefix):]
            break
    if "://" in text:
        text = urlsplit(text).path
    else:
        text = text.split("?", 1)[0].split("#", 1)[0]
    segment = text.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]
    return unquote(segment).lower()


def _find(entities: Sequence[tuple[str, ImageEntity]], target: str) -> ImageEntity | None:
    for name, entity in entities:
        if name == target:
            return entity
    for name, entity in entities:
        if name and (target in name or name in target):
            return entity
    return None


def reconcile(
    entities: Sequence[ImageEntity],
    canonical_ids: Iterable[str],
    prefixes: Iterable[str] = KNOWN_PREFIXES,
) -> list[ImageEntity]:
    """
    Resolve ``canonical_ids`` to entities, preserving id order.

    Each entity appears at most once; unmatched ids contribute nothing.
    An empty result for a non-empty id list is a reconciliation miss, which
    callers handle by falling back to the local matcher.
    """
    prefixes = tuple(prefixes)
    indexed = [(normalize_identifier(e.resource_name, prefixes), e) for e in entities]
    selected: list[ImageEntity] = []
    seen: set[int] = set()

    for raw in canonical_ids:
        target = normalize_identifier(raw, prefixes)
        if not target:
            continue
        entity = _find(indexed, target)
        if entity is None:
            logger.debug(f"No local image for remote id {raw!r}")
            continue
        if entity.id not in seen:
            seen.add(entity.id)
            selected.append(entity)

    return selected
