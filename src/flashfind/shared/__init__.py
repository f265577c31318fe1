"""
Shared module for FlashFind.

Provides:
- Unified exception hierarchy
- Async utilities for bounded catalog calls
"""

from .async_utils import BackgroundTasks, CircuitBreaker, timeout_with_fallback
from .exceptions import (
    APIError,
    CapturePermissionDenied,
    ConfigurationError,
    DataError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    FlashFindError,
    InvalidParameterError,
    NotFoundError,
    ParseError,
    RemoteRejected,
    TransportFailure,
    ValidationError,
)

__all__ = [
    # Exceptions
    "FlashFindError",
    "ErrorContext",
    "ErrorSeverity",
    "ErrorCategory",
    "APIError",
    "TransportFailure",
    "RemoteRejected",
    "ValidationError",
    "InvalidParameterError",
    "DataError",
    "NotFoundError",
    "ParseError",
    "CapturePermissionDenied",
    "ConfigurationError",
    # Async utilities
    "BackgroundTasks",
    "CircuitBreaker",
    "timeout_with_fallback",
]
