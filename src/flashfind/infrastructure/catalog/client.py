"""
Catalog API Client

Async client for the remote image catalog and its search endpoints.

Endpoints:
- GET    /catalog                 list records
- POST   /catalog                 upload (multipart: file + metadata JSON)
- PATCH  /catalog/{derived_id}    update description/category (JSON body)
- DELETE /catalog/{derived_id}    delete by hashed resource name
- GET    /search/text             semantic text search -> imageUrls
- POST   /search/image            image probe -> text suggestions
- POST   /search/audio            voice search -> query + imageUrls

Every method returns an ``ApiResponse`` envelope instead of raising, so each
caller picks its own policy (search degrades, delete surfaces the error).

Usage:
    >>> async with CatalogClient("http://localhost:8000") as catalog:
    ...     response = await catalog.search_text("beach", limit=10)
    ...     print(response.data)
"""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import urlsplit

import httpx
from typing_extensions import Self

from flashfind.domain.entities.image import MediaFile
from flashfind.shared.async_utils import CircuitBreaker
from flashfind.shared.exceptions import (
    ConfigurationError,
    ErrorContext,
    FlashFindError,
    ParseError,
    RemoteRejected,
    TransportFailure,
)

from .models import ApiResponse, CatalogRecord, derive_resource_id

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 30.0


class CatalogClient:
    """Client for the gallery catalog service."""

    _service_name: str = "Catalog"

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
        circuit_breaker: CircuitBreaker | None = None,
    ) -> None:
        """
        Initialize client.

        Args:
            base_url: Catalog root URL
            timeout: Default request timeout in seconds
            headers: Extra headers for all requests
            circuit_breaker: Optional breaker; defaults to threshold=5, recovery=30s

        Raises:
            ConfigurationError: base_url is not an http(s) URL or timeout is not positive
        """
        _check_config(base_url, timeout)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers = {"Accept": "application/json", **(headers or {})}
        self._client: httpx.AsyncClient | None = None
        self._circuit_breaker = circuit_breaker or CircuitBreaker(failure_threshold=5, recovery_timeout=30.0)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-init HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self._headers,
                limits=httpx.Limits(
                    max_connections=20,
                    max_keepalive_connections=10,
                    keepalive_expiry=30.0,
                ),
            )
        return self._client

    async def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        params: dict[str, Any] | None = None,
        files: dict[str, tuple[str, bytes, str]] | None = None,
        data: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        timeout: float | None = None,
    ) -> ApiResponse[Any]:
        """
        Perform one request and wrap the outcome in an envelope.

        Non-2xx answers become ``RemoteRejected``; connection problems and
        timeouts become ``TransportFailure``; undecodable bodies ``ParseError``.
        """
        request_timeout = timeout if timeout is not None else self.timeout
        context = ErrorContext(operation=operation, endpoint=f"{method} {path}")
        try:
            async with self._circuit_breaker:
                response = await self.client.request(
                    method,
                    path,
                    params=params,
                    files=files,
                    data=data,
                    json=json_body,
                    timeout=request_timeout,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(f"{self._service_name} HTTP error {status} for {method} {path}")
            return ApiResponse(status=status, error=RemoteRejected(status, context=context))
        except httpx.TimeoutException:
            logger.warning(f"{self._service_name} timeout after {request_timeout}s for {method} {path}")
            return ApiResponse(
                status=0,
                error=TransportFailure(f"Request timeout after {request_timeout}s", context=context),
            )
        except httpx.RequestError as e:
            logger.warning(f"{self._service_name} request failed for {method} {path}: {e}")
            return ApiResponse(status=0, error=TransportFailure(f"Connection failed: {e}", context=context))
        except TransportFailure as e:
            # circuit breaker open
            logger.warning(f"{self._service_name}: {e}, skipping {method} {path}")
            return ApiResponse(status=0, error=e)

        return ApiResponse(status=response.status_code, **self._decode(response, context))

    @staticmethod
    def _decode(response: httpx.Response, context: ErrorContext) -> dict[str, Any]:
        if not response.content:
            return {"data": None}
        try:
            return {"data": response.json()}
        except ValueError:
            logger.warning(f"Catalog returned a non-JSON body for {context.endpoint}")
            return {"error": ParseError("Invalid JSON response", source=context.endpoint, context=context)}

    # =========================================================================
    # Catalog
    # =========================================================================

    async def list_catalog(self, *, timeout: float | None = None) -> ApiResponse[list[CatalogRecord]]:
        """Fetch every catalog record. Malformed records are skipped."""
        response = await self._request("GET", "/catalog", operation="list_catalog", timeout=timeout)
        if not response.ok:
            return response

        payload = response.data
        if isinstance(payload, dict):
            payload = payload.get("items") or payload.get("data") or []
        if not isinstance(payload, list):
            return ApiResponse(
                status=response.status,
                error=ParseError("expected a list of records", source="GET /catalog"),
            )

        records: list[CatalogRecord] = []
        for item in payload:
            try:
                records.append(CatalogRecord.from_payload(item))
            except FlashFindError as e:
                logger.warning(f"Skipping catalog record: {e}")
        return ApiResponse(status=response.status, data=records)

    async def upload(
        self,
        file: MediaFile,
        metadata: dict[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> ApiResponse[Any]:
        """Upload an image with its JSON metadata."""
        return await self._request(
            "POST",
            "/catalog",
            operation="upload",
            files={"file": file.as_multipart()},
            data={"metadata": json.dumps(metadata or {})},
            timeout=timeout,
        )

    async def update(
        self,
        resource_name: str,
        metadata: dict[str, Any],
        *,
        timeout: float | None = None,
    ) -> ApiResponse[Any]:
        """Replace the metadata of a resource addressed by its derived id."""
        return await self._request(
            "PATCH",
            f"/catalog/{derive_resource_id(resource_name)}",
            operation="update",
            json_body=metadata,
            timeout=timeout,
        )

    async def delete(self, resource_name: str, *, timeout: float | None = None) -> ApiResponse[Any]:
        """Delete a resource addressed by its derived id."""
        return await self._request(
            "DELETE",
            f"/catalog/{derive_resource_id(resource_name)}",
            operation="delete",
            timeout=timeout,
        )

    # =========================================================================
    # Search
    # =========================================================================

    async def search_text(self, query: str, limit: int = 20, *, timeout: float | None = None) -> ApiResponse[Any]:
        """Semantic text search. Response: ``{imageUrls: [...]}``."""
        return await self._request(
            "GET",
            "/search/text",
            operation="search_text",
            params={"query": query, "limit": limit},
            timeout=timeout,
        )

    async def search_image(self, file: MediaFile, *, timeout: float | None = None) -> ApiResponse[Any]:
        """Image probe. Response: ``{text: [...]}`` description suggestions."""
        return await self._request(
            "POST",
            "/search/image",
            operation="search_image",
            files={"file": file.as_multipart()},
            timeout=timeout,
        )

    async def search_audio(self, file: MediaFile, *, timeout: float | None = None) -> ApiResponse[Any]:
        """Voice search. Response: ``{query: str, imageUrls: [...]}``."""
        return await self._request(
            "POST",
            "/search/audio",
            operation="search_audio",
            files={"file": file.as_multipart()},
            timeout=timeout,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()


def _check_config(base_url: str, timeout: float) -> None:
    parts = urlsplit(base_url or "")
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigurationError(
            f"Catalog URL must be an http(s) URL, got {base_url!r}",
            context=ErrorContext(
                input_value=base_url,
                suggestion="Set FLASHFIND_CATALOG_URL to e.g. http://localhost:8000",
            ),
        )
    if timeout <= 0:
        raise ConfigurationError(
            f"Catalog timeout must be positive, got {timeout!r}",
            context=ErrorContext(input_value=timeout, suggestion="Set FLASHFIND_TIMEOUT to a number of seconds"),
        )
