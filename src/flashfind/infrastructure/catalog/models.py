"""
Catalog wire models.

Maps the remote catalog's JSON payloads to typed objects and defines the
uniform client-side response envelope ``{status, data, error}``.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from flashfind.shared.exceptions import FlashFindError, ParseError


T = TypeVar("T")


def derive_resource_id(resource_name: str) -> str:
    """
    Stable catalog id for a resource name.

    The catalog addresses resources by the SHA-256 hex digest of their name,
    so deletes need no lookup round trip.
    """
    return hashlib.sha256(resource_name.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """Uniform envelope for every catalog call. ``status`` is 0 when no response arrived."""

    status: int
    data: T | None = None
    error: FlashFindError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and 200 <= self.status < 300

    def unwrap(self) -> T | None:
        """Return ``data`` or raise the recorded error."""
        if self.error is not None:
            raise self.error
        return self.data


def _parse_timestamp(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, (int, float)):
        # epoch milliseconds, as produced by JavaScript clients
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


@dataclass(frozen=True)
class CatalogRecord:
    """One entry of ``GET /catalog``."""

    resource_name: str
    description: str | None = None
    category: str | None = None
    created_at: datetime | None = None
    location_ref: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> CatalogRecord:
        if not isinstance(payload, dict):
            raise ParseError(f"expected an object, got {type(payload).__name__}", source="catalog")
        name = payload.get("resourceName") or payload.get("filename")
        if not name:
            raise ParseError("record without resourceName", source="catalog")
        metadata = payload.get("metadata") or {}
        return cls(
            resource_name=str(name),
            description=metadata.get("description"),
            category=metadata.get("category"),
            created_at=_parse_timestamp(metadata.get("createdAt")),
            location_ref=payload.get("url"),
        )


def string_list(data: Any, key: str) -> list[str]:
    """Extract a list of strings under ``key``; anything else yields []."""
    if not isinstance(data, dict):
        return []
    values = data.get(key)
    if not isinstance(values, list):
        return []
    return [str(v) for v in values if isinstance(v, str) and v.strip()]
