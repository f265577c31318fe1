"""
Catalog Infrastructure

HTTP access to the remote image catalog and its search endpoints.
"""

from .client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, CatalogClient
from .models import ApiResponse, CatalogRecord, derive_resource_id, string_list

__all__ = [
    "CatalogClient",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "ApiResponse",
    "CatalogRecord",
    "derive_resource_id",
    "string_list",
]
