"""In-memory substring filter for LOCAL-mode queries."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from flashfind.domain.entities.image import ImageEntity


def query_terms(query: str) -> list[str]:
    return query.lower().split()


def matches(entity: ImageEntity, terms: list[str]) -> bool:
    """Any term inside any tag, or inside the lower-cased resource name."""
    name = entity.resource_name.lower()
    return any(term in name or any(term in tag for tag in entity.tags) for term in terms)


def match_local(entities: Sequence[ImageEntity], query: str) -> list[ImageEntity]:
    """
    Filter ``entities`` by ``query`` keeping input order.

    A blank query returns every entity. There is no ranking: one matching term
    anywhere qualifies the whole entity.
    """
    terms = query_terms(query)
    if not terms:
        return list(entities)
    return [entity for entity in entities if matches(entity, terms)]
