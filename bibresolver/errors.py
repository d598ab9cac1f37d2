"""
Exceptions for bibresolver.

Only misuse (a blank query) is signalled to callers. Source failures are
raised inside adapters and absorbed at the adapter boundary.
"""

from typing import Optional


class BibResolverError(Exception):
    """Base exception for bibresolver errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        detail: Optional[str] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class InvalidQueryError(BibResolverError):
    """Query has no usable field."""

    def __init__(self, message: str = "Query is empty", detail: Optional[str] = None):
        super().__init__(
            message=message,
            code="INVALID_QUERY",
            status_code=400,
            detail=detail or "Provide at least one of isbn, title, author or publisher",
        )


class NotFoundError(BibResolverError):
    """No source produced a record."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
            detail=f"No catalog returned data for '{identifier}'",
        )


class SourceError(BibResolverError):
    """
    External catalog failure.

    Raised by adapters for non-success statuses and unusable payloads.
    Never leaves the adapter boundary.
    """

    def __init__(self, source: str, detail: Optional[str] = None):
        self.source = source
        super().__init__(
            message=f"{source} lookup failed",
            code="SOURCE_ERROR",
            status_code=503,
            detail=detail,
        )
