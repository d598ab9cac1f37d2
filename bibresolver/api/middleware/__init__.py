"""
API middleware components.

- Error handling
- Request logging
"""

from .error_handler import (
    setup_exception_handlers,
    create_error_response,
)

from .logging import (
    LoggingConfig,
    StructuredLogFormatter,
    RequestLoggingMiddleware,
    setup_logging,
    get_request_id,
)


__all__ = [
    # Error handling
    "setup_exception_handlers",
    "create_error_response",
    # Logging
    "LoggingConfig",
    "StructuredLogFormatter",
    "RequestLoggingMiddleware",
    "setup_logging",
    "get_request_id",
]
