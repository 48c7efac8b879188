"""
Custom exceptions for the ingestion pipeline and query API with structured error context.

Each exception includes context information for debugging and logging.
Ingestion-time errors are returned inside a ``Result`` and logged by the runner;
query-time errors are raised and mapped to HTTP responses by the API layer.

Exception Hierarchy:
    AppException (base)
    ├── IngestionError
    │   ├── UpstreamFetchError
    │   │   ├── UpstreamStatusError
    │   │   ├── UpstreamTransportError
    │   │   └── UpstreamPayloadError
    │   └── PersistenceError
    └── QueryValidationError
"""

from typing import Optional, Dict, Any, List
from datetime import datetime, timezone


class AppException(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (attempt, url, payload, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[BaseException] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Ingestion Errors
# ============================================================================

class IngestionError(AppException):
    """Base exception for failures during a fetch+store attempt."""
    pass


class UpstreamFetchError(IngestionError):
    """
    Base exception for profile source failures.

    Context should include:
        - api_url: The upstream endpoint
    """
    pass


class UpstreamStatusError(UpstreamFetchError):
    """Upstream answered with a non-success HTTP status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        response_body: str = "",
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, context)
        self.status_code = status_code
        self.response_body = response_body
        self.context["status_code"] = status_code
        self.context["response_body"] = response_body


class UpstreamTransportError(UpstreamFetchError):
    """Timeout, connection failure or other transport exception."""
    pass


class UpstreamPayloadError(UpstreamFetchError):
    """
    Upstream answered successfully but the body is unusable.

    Context should include:
        - response_body: Response body (truncated)
    """
    pass


class PersistenceError(IngestionError):
    """
    Exception raised when a profile cannot be written or users cannot be read.

    Context should include:
        - operation: "save" or "find_users"
        - payload: The offending profile (save only)
        - constraint: "unique" for duplicate email/username
    """
    pass


# ============================================================================
# Query Errors
# ============================================================================

class QueryValidationError(AppException):
    """
    Exception raised when listing parameters fail validation.

    Attributes:
        errors: Mapping of parameter name to a list of messages
    """

    def __init__(self, message: str, errors: Dict[str, List[str]]):
        super().__init__(message, context={"errors": errors})
        self.errors = errors
