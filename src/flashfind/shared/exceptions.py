"""
Unified Exception Hierarchy for FlashFind.

Exception Hierarchy:
    FlashFindError (base)
    ├── APIError
    │   ├── TransportFailure
    │   └── RemoteRejected
    ├── ValidationError
    │   └── InvalidParameterError
    ├── DataError
    │   ├── NotFoundError
    │   └── ParseError
    ├── CapturePermissionDenied
    └── ConfigurationError

EmptyResult and ReconciliationMiss are not exceptions: they are valid
(possibly empty) outcomes, see ``ResolutionOutcome``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    WARNING = auto()      # Recoverable, can continue
    ERROR = auto()        # Failed but can retry
    CRITICAL = auto()     # Cannot continue
    TRANSIENT = auto()    # Temporary, should retry automatically


class ErrorCategory(Enum):
    """Categories for error classification."""
    API = "api"
    VALIDATION = "validation"
    DATA = "data"
    DEVICE = "device"
    CONFIGURATION = "config"


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Rich context for error messages."""
    operation: str | None = None
    endpoint: str | None = None
    input_value: Any = None
    suggestion: str | None = None
    status_code: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def with_defaults(self, **defaults: Any) -> ErrorContext:
        """Return a copy where unset fields take the given defaults."""
        values = {
            "operation": self.operation,
            "endpoint": self.endpoint,
            "input_value": self.input_value,
            "suggestion": self.suggestion,
            "status_code": self.status_code,
            "metadata": self.metadata,
        }
        for key, value in defaults.items():
            if values.get(key) is None:
                values[key] = value
        return ErrorContext(**values)


class FlashFindError(Exception):
    """
    Base exception for all FlashFind errors.

    Provides:
    - Structured error context
    - Severity classification
    - Retry guidance
    - Agent-friendly formatting
    """

    __slots__ = ("context", "severity", "category", "retryable")

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        category: ErrorCategory = ErrorCategory.API,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.context = context or ErrorContext()
        self.severity = severity
        self.category = category
        self.retryable = retryable

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "error": str(self),
            "category": self.category.value,
            "severity": self.severity.name.lower(),
            "retryable": self.retryable,
        }
        if self.context.operation:
            result["operation"] = self.context.operation
        if self.context.endpoint:
            result["endpoint"] = self.context.endpoint
        if self.context.status_code is not None:
            result["status_code"] = self.context.status_code
        if self.context.suggestion:
            result["suggestion"] = self.context.suggestion
        return result

    def to_agent_message(self) -> str:
        """Format for Agent consumption (Markdown)."""
        parts = [f"❌ **Error**: {self}"]

        if self.context.suggestion:
            parts.append(f"💡 **Suggestion**: {self.context.suggestion}")
        if self.retryable:
            parts.append("🔄 This error is retryable")

        return "\n".join(parts)


# =============================================================================
# API Errors
# =============================================================================

class APIError(FlashFindError):
    """Base class for catalog API errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
        retryable: bool = True,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.API,
            retryable=retryable,
        )


class TransportFailure(APIError):
    """Raised for network failures and timeouts."""

    def __init__(
        self,
        message: str = "Catalog connection failed",
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = (context or ErrorContext()).with_defaults(
            suggestion="Check that the catalog service is reachable",
        )
        super().__init__(message, context=ctx, retryable=True)
        self.severity = ErrorSeverity.TRANSIENT


class RemoteRejected(APIError):
    """Raised when the catalog answers with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        message: str | None = None,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = (context or ErrorContext()).with_defaults(status_code=status_code)
        super().__init__(
            message or f"Catalog rejected the request (HTTP {status_code})",
            context=ctx,
            retryable=status_code >= 500,
        )
        self.status_code = status_code


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(FlashFindError):
    """Base class for validation errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.VALIDATION,
            retryable=False,
        )


class InvalidParameterError(ValidationError):
    """Raised when a parameter value is invalid."""

    def __init__(
        self,
        param_name: str,
        value: Any,
        expected: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = (context or ErrorContext()).with_defaults(
            input_value=value,
            suggestion=f"Expected {expected}",
        )
        super().__init__(
            f"Invalid parameter '{param_name}': {value!r} (expected {expected})",
            context=ctx,
        )


# =============================================================================
# Data Errors
# =============================================================================

class DataError(FlashFindError):
    """Base class for data-related errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.ERROR,
            category=ErrorCategory.DATA,
            retryable=False,
        )


class NotFoundError(DataError):
    """Raised when requested data is not found."""

    def __init__(
        self,
        resource: str,
        identifier: str | None = None,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        msg = f"{resource} not found"
        if identifier:
            msg = f"{resource} not found: {identifier}"
        ctx = (context or ErrorContext()).with_defaults(
            input_value=identifier,
            suggestion="Check the identifier and try again",
        )
        super().__init__(msg, context=ctx)


class ParseError(DataError):
    """Raised when a catalog payload cannot be interpreted."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        context: ErrorContext | None = None,
    ) -> None:
        full_msg = f"Parse error: {message}"
        if source:
            full_msg = f"Parse error ({source}): {message}"
        super().__init__(full_msg, context=context)


# =============================================================================
# Device & Configuration Errors
# =============================================================================

class CapturePermissionDenied(FlashFindError):
    """Raised when the audio device permission is refused."""

    def __init__(
        self,
        message: str = "Microphone permission was denied",
        *,
        context: ErrorContext | None = None,
    ) -> None:
        ctx = (context or ErrorContext()).with_defaults(
            suggestion="Allow microphone access and try the voice search again",
        )
        super().__init__(
            message,
            context=ctx,
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.DEVICE,
            retryable=False,
        )


class ConfigurationError(FlashFindError):
    """Raised for configuration-related errors."""

    def __init__(
        self,
        message: str,
        *,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(
            message,
            context=context,
            severity=ErrorSeverity.CRITICAL,
            category=ErrorCategory.CONFIGURATION,
            retryable=False,
        )
