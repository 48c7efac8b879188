"""
Core utilities and configuration for the random user backend.

Modules:
    config: Application configuration and environment variable management
    database: Async engine and session factory
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration
    result: Value-or-error container returned by the ingestion components

Usage:
    from core.config import settings
    from core.database import async_session_maker
    from core.exceptions import PersistenceError, UpstreamFetchError
    from core.logging import setup_logging
"""

__all__ = [
    "settings",
    "async_session_maker",
    "setup_logging",
    "Result",
    # Exceptions
    "AppException",
    "IngestionError",
    "UpstreamFetchError",
    "UpstreamStatusError",
    "UpstreamTransportError",
    "UpstreamPayloadError",
    "PersistenceError",
    "QueryValidationError",
]
