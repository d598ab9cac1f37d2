"""
Data model for bibliographic resolution.

Query -> fragments (one per adapter call) -> one classification set per
resolution -> one resolved record handed to the caller.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from bibresolver.errors import InvalidQueryError


def is_blank(value: Optional[str]) -> bool:
    """True for None, empty or whitespace-only strings."""
    return value is None or not value.strip()


class ClassificationScheme(str, Enum):
    """Bibliographic classification schemes."""
    LC = "lc"
    DEWEY = "dewey"
    UDC = "udc"


class Confidence(str, Enum):
    """Coarse confidence of a resolved record."""
    HIGH = "high"      # Two or more sources agree on a scheme
    MEDIUM = "medium"  # At least one classification found
    LOW = "low"        # No classification at all


class LookupKey(str, Enum):
    """Query field an adapter can be keyed on."""
    ISBN = "isbn"
    TITLE = "title"
    AUTHOR = "author"


class ResolutionState(str, Enum):
    """Lifecycle of one resolution."""
    STARTED = "started"
    METADATA_PHASE = "metadata_phase"
    CLASSIFICATION_PHASE = "classification_phase"
    MERGED = "merged"
    COMPOSED = "composed"
    EMPTY = "empty"


@dataclass
class BibliographicQuery:
    """Caller input. At least one field must be non-blank."""

    isbn: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    publisher: Optional[str] = None

    def __post_init__(self):
        # Blank strings are treated as absent
        self.isbn = None if is_blank(self.isbn) else self.isbn.strip()
        self.title = None if is_blank(self.title) else self.title.strip()
        self.author = None if is_blank(self.author) else self.author.strip()
        self.publisher = None if is_blank(self.publisher) else self.publisher.strip()

    def is_blank(self) -> bool:
        return not (self.isbn or self.title or self.author or self.publisher)

    def validate(self) -> "BibliographicQuery":
        """
        Reject a query with no usable field.

        Raises:
            InvalidQueryError: if every field is blank
        """
        if self.is_blank():
            raise InvalidQueryError()
        return self


@dataclass(frozen=True)
class BibliographicFragment:
    """
    One source's normalized partial answer.

    Every field except source_name may be missing.
    """

    source_name: str
    title: Optional[str] = None
    author: Optional[str] = None
    publisher: Optional[str] = None
    year: Optional[int] = None
    pages: Optional[int] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None
    language: Optional[str] = None
    lc: Optional[str] = None
    dewey: Optional[str] = None
    udc: Optional[str] = None
    subjects: tuple[str, ...] = ()
    # Adapter that actually produced the data when source_name is a wrapper's label
    origin: Optional[str] = None

    def classification(self, scheme: ClassificationScheme) -> Optional[str]:
        """Classification value for a scheme, None when blank."""
        value = {
            ClassificationScheme.LC: self.lc,
            ClassificationScheme.DEWEY: self.dewey,
            ClassificationScheme.UDC: self.udc,
        }[scheme]
        return None if is_blank(value) else value.strip()

    @property
    def origin_name(self) -> str:
        return self.origin or self.source_name

    def has_title(self) -> bool:
        return not is_blank(self.title)

    def has_classification(self) -> bool:
        return any(self.classification(scheme) for scheme in ClassificationScheme)

    def is_empty(self) -> bool:
        return not (self.has_title() or self.has_classification() or self.subjects)


@dataclass
class EnhancedClassificationSet:
    """
    Classification candidates accumulated during one resolution.

    Candidate lists behave as ordered sets. Built fresh per resolution and
    only mutated after all concurrent source calls have completed.
    """

    lc_candidates: list[str] = field(default_factory=list)
    dewey_candidates: list[str] = field(default_factory=list)
    udc_candidates: list[str] = field(default_factory=list)
    subjects: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)

    # Every (origin, value) contribution per scheme, duplicates included
    contributions: dict[ClassificationScheme, list[tuple[str, str]]] = field(
        default_factory=lambda: {scheme: [] for scheme in ClassificationScheme}
    )

    def candidates(self, scheme: ClassificationScheme) -> list[str]:
        return {
            ClassificationScheme.LC: self.lc_candidates,
            ClassificationScheme.DEWEY: self.dewey_candidates,
            ClassificationScheme.UDC: self.udc_candidates,
        }[scheme]

    def best(self, scheme: ClassificationScheme) -> Optional[str]:
        """First-seen candidate for a scheme."""
        candidates = self.candidates(scheme)
        return candidates[0] if candidates else None

    def has_any_classification(self) -> bool:
        return any(self.candidates(scheme) for scheme in ClassificationScheme)

    def is_empty(self) -> bool:
        return not (self.has_any_classification() or self.subjects)

    def to_dict(self) -> dict:
        return {
            "lc_candidates": list(self.lc_candidates),
            "dewey_candidates": list(self.dewey_candidates),
            "udc_candidates": list(self.udc_candidates),
            "subjects": list(self.subjects),
            "sources": list(self.sources),
        }


@dataclass(frozen=True)
class ResolvedBookRecord:
    """Final output of a resolution. Never mutated after construction."""

    title: str
    author: str = ""
    isbn: str = ""
    publisher: str = ""
    year: Optional[int] = None
    pages: Optional[int] = None
    language: Optional[str] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None
    lc: str = ""
    dewey: str = ""
    udc: str = ""
    subjects: tuple[str, ...] = ()
    sources: tuple[str, ...] = ()
    search_strategy: str = ""
    confidence: Confidence = Confidence.LOW

    def classification(self, scheme: ClassificationScheme) -> str:
        return {
            ClassificationScheme.LC: self.lc,
            ClassificationScheme.DEWEY: self.dewey,
            ClassificationScheme.UDC: self.udc,
        }[scheme]

    def has_classification(self) -> bool:
        return any(self.classification(scheme) for scheme in ClassificationScheme)

    def classification_summary(self) -> str:
        """One-line summary such as 'LC: QA76.76 | Dewey: 005.1'."""
        summary = []

        if self.lc:
            summary.append(f"LC: {self.lc}")
        if self.dewey:
            summary.append(f"Dewey: {self.dewey}")
        if self.udc:
            summary.append(f"UDC: {self.udc}")
        if self.subjects:
            summary.append(f"Subjects: {', '.join(self.subjects[:3])}")

        return " | ".join(summary)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "title": self.title,
            "author": self.author,
            "isbn": self.isbn,
            "publisher": self.publisher,
            "year": self.year,
            "pages": self.pages,
            "language": self.language,
            "description": self.description,
            "cover_url": self.cover_url,
            "lc": self.lc,
            "dewey": self.dewey,
            "udc": self.udc,
            "subjects": list(self.subjects),
            "sources": list(self.sources),
            "search_strategy": self.search_strategy,
            "confidence": self.confidence.value,
        }
