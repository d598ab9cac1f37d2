"""
API Schemas for bibresolver

Pydantic models for request validation and response serialization.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from bibresolver.models import BibliographicQuery, Confidence, ResolvedBookRecord


class ResolveRequest(BaseModel):
    """Free-form resolution request. At least one field must be non-blank."""

    isbn: Optional[str] = Field(None, max_length=32)
    title: Optional[str] = Field(None, max_length=500)
    author: Optional[str] = Field(None, max_length=200)
    publisher: Optional[str] = Field(None, max_length=200)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Cien años de soledad",
                "author": "García Márquez",
            }
        }
    )

    def to_query(self) -> BibliographicQuery:
        return BibliographicQuery(
            isbn=self.isbn,
            title=self.title,
            author=self.author,
            publisher=self.publisher,
        )


class ResolvedBookResponse(BaseModel):
    """Resolved book record."""

    title: str
    author: str = ""
    isbn: str = ""
    publisher: str = ""
    year: Optional[int] = None
    pages: Optional[int] = None
    language: Optional[str] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None

    # Classifications
    lc: str = ""
    dewey: str = ""
    udc: str = ""
    subjects: list[str] = Field(default_factory=list)

    # Provenance
    sources: list[str] = Field(default_factory=list)
    search_strategy: str = ""
    confidence: Confidence = Confidence.LOW
    classification_summary: str = ""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Harry Potter and the Sorcerer's Stone",
                "author": "J. K. Rowling",
                "isbn": "9780439708180",
                "lc": "PZ7.R79835",
                "dewey": "823.914",
                "udc": "",
                "subjects": ["Wizards", "Magic"],
                "sources": ["basic metadata", "WorldCat Classify"],
                "search_strategy": "basic metadata + enhanced classifications",
                "confidence": "medium",
            }
        }
    )

    @classmethod
    def from_record(cls, record: ResolvedBookRecord) -> "ResolvedBookResponse":
        return cls(
            **record.to_dict(),
            classification_summary=record.classification_summary(),
        )


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: Optional[str] = None
    code: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Book not found",
                "detail": "No catalog returned data for '9780000000000'",
                "code": "NOT_FOUND",
                "timestamp": "2025-01-20T12:00:00Z",
            }
        }
    )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    environment: str
    sources: list[str] = Field(default_factory=list)
